"""
Remote token backend backed by a Parse REST store (e.g. Back4App).

Only a SHA-256 hash of each token is sent to the store; the raw token
never leaves this process. The store also holds the bcrypt hash of the
registration password in its AppSetting class.
"""

import hashlib
import json
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List

import httpx

from ...config.provider import RemoteStoreConfig
from ...errors import UpstreamError
from ..clock import format_rfc3339, parse_rfc3339, utcnow
from .interfaces import IssuedToken, generate_token

logger = logging.getLogger(__name__)

TOKEN_CLASS = "AccessToken"
SETTING_CLASS = "AppSetting"
PASSWORD_HASH_KEY = "registrationPasswordHash"
TOKEN_PURPOSE = "registration"


def hash_token(token: str) -> str:
    """Hex-encoded SHA-256 of a token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def is_bcrypt_hash(value: str) -> bool:
    """Check the modular crypt shape of a bcrypt hash ($2a$/$2b$/$2y$, 60 chars)."""
    return len(value) == 60 and value[:4] in ("$2a$", "$2b$", "$2y$") and value[6] == "$"


class RemoteTokenBackend:
    """
    Token backend storing hashed tokens in a Parse class.

    This class is a black box that:
    - Stores token hashes with their expiry
    - Looks tokens up by hash
    - Reads the registration password hash setting
    """

    def __init__(
        self,
        config: RemoteStoreConfig,
        http_client: httpx.AsyncClient,
        ttl: timedelta = timedelta(hours=12),
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize remote token backend with injected config and client.

        Args:
            config: Remote store connection settings
            http_client: Shared async HTTP client (owned by the caller)
            ttl: Lifetime of issued tokens
            clock: Returns the current aware datetime (UTC)
        """
        self.config = config
        self.http = http_client
        self.ttl = ttl
        self.clock = clock

    def _headers(self) -> Dict[str, str]:
        return {
            "X-Parse-Application-Id": self.config.app_id,
            "X-Parse-REST-API-Key": self.config.rest_key,
        }

    def _class_url(self, class_name: str) -> str:
        return f"{self.config.server_url}/classes/{class_name}"

    async def issue(self) -> IssuedToken:
        token = generate_token()
        expires_at = self.clock() + self.ttl
        await self.store(token, expires_at)
        logger.info(f"Issued remote access token (expires {expires_at.isoformat()})")
        return IssuedToken(token=token, expires_at=expires_at)

    async def store(self, token: str, expires_at: datetime) -> None:
        """
        Store the hash of a token with its expiry.

        Raises:
            UpstreamError: On transport failure or a non-2xx answer
        """
        payload = {
            "tokenHash": hash_token(token),
            "expiresAt": {"__type": "Date", "iso": format_rfc3339(expires_at)},
            "purpose": TOKEN_PURPOSE,
        }
        try:
            response = await self.http.post(
                self._class_url(TOKEN_CLASS),
                json=payload,
                headers=self._headers(),
                timeout=self.config.timeout_seconds,
            )
        except httpx.HTTPError as e:
            raise UpstreamError(f"parse create token request failed: {e}") from e

        if not response.is_success:
            raise UpstreamError(
                f"parse create token failed: {response.status_code} {response.text}"
            )

    async def validate(self, token: str) -> bool:
        """
        Validate a token against the store.

        Any failure to reach or understand the store counts as invalid.
        """
        try:
            results = await self._query(TOKEN_CLASS, {"tokenHash": hash_token(token)})
        except UpstreamError as e:
            logger.error(f"Remote token validation failed: {e}")
            return False

        now = self.clock()
        for record in results:
            expires = record.get("expiresAt") if isinstance(record, dict) else None
            iso = expires.get("iso") if isinstance(expires, dict) else None
            if not isinstance(iso, str) or not iso:
                if iso is not None:
                    logger.warning(f"Ignoring token record with non-string expiry: {iso!r}")
                continue
            try:
                if now <= parse_rfc3339(iso):
                    return True
            except ValueError:
                logger.warning(f"Ignoring token record with unparseable expiry: {iso!r}")
        return False

    async def fetch_password_hash(self) -> str:
        """
        Read the registration password hash from the AppSetting class.

        Returns:
            bcrypt hash string

        Raises:
            UpstreamError: If the store fails, has no setting, or holds a non-bcrypt value
        """
        results = await self._query(SETTING_CLASS, {"key": PASSWORD_HASH_KEY})
        if not results:
            raise UpstreamError(f"no {PASSWORD_HASH_KEY} found in {SETTING_CLASS}")

        value = results[0].get("value") if isinstance(results[0], dict) else None
        if not isinstance(value, str) or not is_bcrypt_hash(value):
            raise UpstreamError(f"{PASSWORD_HASH_KEY} is not a bcrypt hash")
        return value

    async def _query(self, class_name: str, where: Dict[str, Any]) -> List[Any]:
        """
        Run a where-query against a Parse class.

        Raises:
            UpstreamError: On transport, status or decode failure
        """
        try:
            response = await self.http.get(
                self._class_url(class_name),
                params={"where": json.dumps(where)},
                headers=self._headers(),
                timeout=self.config.timeout_seconds,
            )
        except httpx.HTTPError as e:
            raise UpstreamError(f"parse query on {class_name} failed: {e}") from e

        if response.status_code != 200:
            raise UpstreamError(
                f"parse query on {class_name} bad status: {response.status_code} {response.text}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError(f"parse query on {class_name} decode failed: {e}") from e

        results = body.get("results") if isinstance(body, dict) else None
        if not isinstance(results, list):
            raise UpstreamError(f"parse query on {class_name} returned no results list")
        return results
