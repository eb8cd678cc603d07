"""
In-memory token backend.

Tokens live in a process-local dict guarded by a lock. Expired entries
are dropped when they are looked up and whenever a new token is issued;
there is no background sweep.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, Dict

from ..clock import utcnow
from .interfaces import IssuedToken, generate_token

logger = logging.getLogger(__name__)


class LocalTokenBackend:
    """Token backend for single-instance deployments without a remote store."""

    def __init__(self, ttl: timedelta = timedelta(hours=12), clock: Callable[[], datetime] = utcnow):
        """
        Initialize local token backend.

        Args:
            ttl: Lifetime of issued tokens
            clock: Returns the current aware datetime (UTC)
        """
        self.ttl = ttl
        self.clock = clock
        self._tokens: Dict[str, datetime] = {}
        self._lock = asyncio.Lock()

    async def issue(self) -> IssuedToken:
        token = generate_token()
        expires_at = self.clock() + self.ttl

        async with self._lock:
            self._prune_locked()
            self._tokens[token] = expires_at

        logger.info(f"Issued local access token (expires {expires_at.isoformat()})")
        return IssuedToken(token=token, expires_at=expires_at)

    async def validate(self, token: str) -> bool:
        async with self._lock:
            expires_at = self._tokens.get(token)
            if expires_at is None:
                return False
            if self.clock() > expires_at:
                del self._tokens[token]
                return False
            return True

    async def prune_expired(self) -> int:
        """
        Drop all expired tokens.

        Returns:
            Number of tokens removed
        """
        async with self._lock:
            return self._prune_locked()

    def _prune_locked(self) -> int:
        now = self.clock()
        expired = [t for t, exp in self._tokens.items() if now > exp]
        for t in expired:
            del self._tokens[t]
        if expired:
            logger.debug(f"Pruned {len(expired)} expired access tokens")
        return len(expired)

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, token: str) -> bool:
        return token in self._tokens
