"""
Authentication Service Facade following Black Box Design principles.

This module provides:
- A single authenticate() call that turns a password into an access token
- Uniform rejection, whatever the reason the password check failed
"""

import logging
from typing import Optional

from ...errors import AuthError, UpstreamError
from .interfaces import IssuedToken, PasswordVerifier, TokenBackend

logger = logging.getLogger(__name__)


class AuthenticationService:
    """
    Turns a registration password into an access token.

    This facade hides which verifier and which token backend are active
    and provides a clean, stable interface for the API layer.
    """

    def __init__(self, verifier: PasswordVerifier, backend: TokenBackend, mode: str = "local"):
        """
        Initialize with a password verifier and a token backend.

        Args:
            verifier: Checks the submitted password
            backend: Issues and validates access tokens
            mode: Label of the active backend, for logs and health output
        """
        self.verifier = verifier
        self.backend = backend
        self.mode = mode

    async def authenticate(self, password: Optional[str]) -> IssuedToken:
        """
        Authenticate a password and issue an access token.

        Args:
            password: Plaintext registration password

        Returns:
            IssuedToken for the caller

        Raises:
            AuthError: Wrong password, or the expected password was unavailable
            UpstreamError: The token could not be stored after a correct password
        """
        if not password:
            raise AuthError()

        try:
            ok = await self.verifier.verify(password)
        except UpstreamError as e:
            logger.error(f"Failed to fetch registration password hash ({self.mode}): {e}")
            raise AuthError() from e

        if not ok:
            logger.info("Registration password rejected")
            raise AuthError()

        try:
            return await self.backend.issue()
        except UpstreamError as e:
            logger.error(f"Failed to store access token ({self.mode}): {e}")
            raise
