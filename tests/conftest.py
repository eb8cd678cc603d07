"""
Shared pytest fixtures for Eventgate tests.

This module provides common fixtures including:
- FrozenClock: controllable "now" for token expiry tests
- StaticConfigProvider: in-test configuration without environment variables
- Remote store mocks built on httpx.MockTransport
"""

import json
import os
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from eventgate.config.provider import (
    APIConfig,
    AuthConfig,
    RemoteStoreConfig,
    StorageConfig,
)


# =============================================================================
# Clock
# =============================================================================


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2025, 10, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    """Frozen UTC clock starting 2025-10-01T12:00:00Z."""
    return FrozenClock()


# =============================================================================
# Configuration
# =============================================================================


ADMIN_TOKEN = "test-admin-token"
REGISTRATION_PASSWORD = "test-password"


@dataclass
class StaticConfigProvider:
    """ConfigProvider returning fixed values."""
    config_file: str
    static_dir: str = "does-not-exist"
    remote: RemoteStoreConfig = field(
        default_factory=lambda: RemoteStoreConfig(app_id="", rest_key="", server_url="")
    )

    def get_api_config(self) -> APIConfig:
        return APIConfig(
            port=8080,
            host="127.0.0.1",
            debug=False,
            cors_origin="http://localhost:5173",
            static_dir=self.static_dir,
        )

    def get_auth_config(self) -> AuthConfig:
        return AuthConfig(admin_token=ADMIN_TOKEN, registration_password=REGISTRATION_PASSWORD)

    def get_remote_store_config(self) -> RemoteStoreConfig:
        return self.remote

    def get_storage_config(self) -> StorageConfig:
        return StorageConfig(config_file=self.config_file)


@pytest.fixture
def config_file(tmp_path):
    """Path of a not-yet-existing event config file."""
    return str(tmp_path / "config.json")


@pytest.fixture
def config_provider(config_file):
    """Local-mode provider writing to a temp directory."""
    return StaticConfigProvider(config_file=config_file)


@pytest.fixture
def remote_config():
    """Remote store configuration pointing at a fake Parse server."""
    return RemoteStoreConfig(
        app_id="app-id",
        rest_key="rest-key",
        server_url="https://parse.example.com",
        timeout_seconds=10,
    )


# =============================================================================
# Remote store mocking
# =============================================================================


class FakeParseServer:
    """
    Minimal in-memory Parse REST server for httpx.MockTransport.

    Records every request and serves the AccessToken and AppSetting classes.
    fail_with may return a response to short-circuit a request, or None.
    """

    def __init__(self):
        self.objects: Dict[str, List[Dict[str, Any]]] = {"AccessToken": [], "AppSetting": []}
        self.requests: List[httpx.Request] = []
        self.fail_with: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            failure = self.fail_with(request)
            if failure is not None:
                return failure

        class_name = request.url.path.rsplit("/", 1)[-1]
        if request.method == "POST":
            self.objects.setdefault(class_name, []).append(json.loads(request.content))
            return httpx.Response(201, json={"objectId": "abc123", "createdAt": "2025-10-01T12:00:00.000Z"})

        where = json.loads(request.url.params.get("where", "{}"))
        results = [
            obj for obj in self.objects.get(class_name, [])
            if all(obj.get(k) == v for k, v in where.items())
        ]
        return httpx.Response(200, json={"results": results})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def parse_server():
    return FakeParseServer()
