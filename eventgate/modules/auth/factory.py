"""
Authentication Factory following Black Box Design principles.

This factory:
- Constructs the token backend and password verifier from configuration
- Wires dependencies together
- Returns only the service facade (hiding implementation)
"""

import logging
from datetime import timedelta
from typing import Optional

import httpx

from ...config.provider import AuthConfig, RemoteStoreConfig
from .local import LocalTokenBackend
from .passwords import PlainPasswordVerifier, RemoteHashPasswordVerifier
from .remote import RemoteTokenBackend
from .service import AuthenticationService

logger = logging.getLogger(__name__)


class AuthFactory:
    """
    Factory for building the authentication stack.

    This is the composition root that:
    - Picks the local or remote backend once, at startup
    - Wires verifier and backend together via dependency injection
    - Returns only the public interface
    """

    @staticmethod
    def build(
        auth_config: AuthConfig,
        remote_config: RemoteStoreConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> AuthenticationService:
        """
        Build the complete authentication stack.

        Args:
            auth_config: Passwords and token lifetime
            remote_config: Remote store connection settings
            http_client: Shared async HTTP client, required for the remote store

        Returns:
            AuthenticationService facade (hides all implementation details)
        """
        ttl = timedelta(hours=auth_config.token_ttl_hours)

        if remote_config.is_configured:
            if http_client is None:
                raise ValueError("http_client is required when the remote store is configured")

            logger.info(f"Building authentication stack with remote store at {remote_config.server_url}")
            backend = RemoteTokenBackend(remote_config, http_client, ttl=ttl)
            return AuthenticationService(
                verifier=RemoteHashPasswordVerifier(backend),
                backend=backend,
                mode="remote",
            )

        logger.info("Building authentication stack with in-memory tokens and fallback password")
        return AuthenticationService(
            verifier=PlainPasswordVerifier(auth_config.registration_password),
            backend=LocalTokenBackend(ttl=ttl),
            mode="local",
        )
