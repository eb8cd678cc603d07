"""Registration password verifiers."""

import logging
import secrets

import bcrypt

from .remote import RemoteTokenBackend

logger = logging.getLogger(__name__)


class RemoteHashPasswordVerifier:
    """Compares against the bcrypt hash held in the remote store."""

    def __init__(self, remote: RemoteTokenBackend):
        self.remote = remote

    async def verify(self, password: str) -> bool:
        password_hash = await self.remote.fetch_password_hash()
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError as e:
            logger.error(f"Stored registration password hash rejected by bcrypt: {e}")
            return False


class PlainPasswordVerifier:
    """Development fallback: compares against a configured plaintext password."""

    def __init__(self, expected: str):
        self._expected = expected

    async def verify(self, password: str) -> bool:
        return secrets.compare_digest(password.encode("utf-8"), self._expected.encode("utf-8"))


def hash_password(password: str) -> str:
    """Create a bcrypt hash suitable for the remote AppSetting value."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
