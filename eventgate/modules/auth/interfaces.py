"""Authentication interfaces following Black Box Design principles."""
import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

TOKEN_BYTES = 32


@dataclass(frozen=True)
class IssuedToken:
    """An access token and its absolute UTC expiry."""
    token: str
    expires_at: datetime


def generate_token(nbytes: int = TOKEN_BYTES) -> str:
    """Random token, URL-safe base64 without padding."""
    return secrets.token_urlsafe(nbytes)


class TokenBackend(Protocol):
    """Protocol for access token storage - local memory or remote store."""

    async def issue(self) -> IssuedToken:
        """
        Create and store a new access token.

        Returns:
            IssuedToken with the raw token and its expiry
        """
        ...

    async def validate(self, token: str) -> bool:
        """
        Check whether a token exists and has not expired.

        Returns:
            True if valid, False otherwise (never raises)
        """
        ...


class PasswordVerifier(Protocol):
    """Protocol for checking the registration password."""

    async def verify(self, password: str) -> bool:
        """
        Check a plaintext password.

        Raises:
            UpstreamError: If the expected password could not be obtained
        """
        ...
