"""Configuration access for Eventgate."""

from .provider import ConfigProvider, EnvConfigProvider

__all__ = ["ConfigProvider", "EnvConfigProvider"]
