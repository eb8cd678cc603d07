"""Configuration provider following Black Box Design principles."""
import logging
import os
from dataclasses import dataclass
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_TOKEN = "my-secret-admin-token"
DEFAULT_REGISTRATION_PASSWORD = "secret-password"
DEFAULT_PARSE_SERVER_URL = "https://parseapi.back4app.com"


@dataclass
class RemoteStoreConfig:
    """Parse / Back4App REST store configuration."""
    app_id: str
    rest_key: str
    server_url: str
    timeout_seconds: float = 10.0

    @property
    def is_configured(self) -> bool:
        """Remote store is used only when all three connection values are set."""
        return bool(self.app_id and self.rest_key and self.server_url)


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    debug: bool
    cors_origin: str
    static_dir: str
    log_level: str = "INFO"


@dataclass
class AuthConfig:
    """Authentication configuration."""
    admin_token: str
    registration_password: str
    token_ttl_hours: float = 12.0


@dataclass
class StorageConfig:
    """Event configuration file location."""
    config_file: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration."""
        ...

    def get_remote_store_config(self) -> RemoteStoreConfig:
        """Get remote store configuration."""
        ...

    def get_storage_config(self) -> StorageConfig:
        """Get storage configuration."""
        ...


def _env(key: str, fallback: str = "", legacy_key: Optional[str] = None) -> str:
    """Read an environment variable, treating empty values as unset."""
    value = os.getenv(key, "").strip()
    if not value and legacy_key:
        value = os.getenv(legacy_key, "").strip()
    return value or fallback


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=int(_env("API_PORT", "8080")),
            host=_env("API_HOST", "0.0.0.0"),
            debug=_env("API_DEBUG", "false").lower() == "true",
            cors_origin=_env("CORS_ORIGIN", "http://localhost:5173"),
            static_dir=_env("STATIC_DIR", "static"),
            log_level=_env("LOG_LEVEL", "INFO").upper(),
        )

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration from environment variables."""
        admin_token = _env("ADMIN_TOKEN", DEFAULT_ADMIN_TOKEN)
        registration_password = _env("REGISTRATION_PASSWORD", DEFAULT_REGISTRATION_PASSWORD)

        if admin_token == DEFAULT_ADMIN_TOKEN:
            logger.warning("ADMIN_TOKEN not set - using the built-in development token")
        if registration_password == DEFAULT_REGISTRATION_PASSWORD:
            logger.warning("REGISTRATION_PASSWORD not set - using the built-in development password")

        return AuthConfig(
            admin_token=admin_token,
            registration_password=registration_password,
            token_ttl_hours=float(_env("ACCESS_TOKEN_TTL_HOURS", "12")),
        )

    def get_remote_store_config(self) -> RemoteStoreConfig:
        """Get remote store configuration, honouring the older BACK4APP_* names."""
        return RemoteStoreConfig(
            app_id=_env("PARSE_APP_ID", legacy_key="BACK4APP_APP_ID"),
            rest_key=_env("PARSE_REST_KEY", legacy_key="BACK4APP_REST_KEY"),
            server_url=_env(
                "PARSE_SERVER_URL", DEFAULT_PARSE_SERVER_URL, legacy_key="BACK4APP_SERVER_URL"
            ).rstrip("/"),
            timeout_seconds=float(_env("REMOTE_TIMEOUT_SECONDS", "10")),
        )

    def get_storage_config(self) -> StorageConfig:
        """Get storage configuration from environment variables."""
        return StorageConfig(config_file=_env("CONFIG_FILE", "config.json"))
