"""
Unit tests for the Parse-backed remote token backend.
"""

import json
from datetime import timedelta

import httpx
import pytest

from eventgate.errors import UpstreamError
from eventgate.modules.auth.passwords import hash_password
from eventgate.modules.auth.remote import (
    PASSWORD_HASH_KEY,
    RemoteTokenBackend,
    hash_token,
    is_bcrypt_hash,
)


@pytest.fixture
def backend(remote_config, parse_server, clock):
    """Create a RemoteTokenBackend talking to the fake Parse server."""
    return RemoteTokenBackend(
        remote_config, parse_server.client(), ttl=timedelta(hours=12), clock=clock
    )


@pytest.mark.asyncio
async def test_issue_stores_only_hash(backend, parse_server):
    """The raw token never reaches the store."""
    issued = await backend.issue()

    request = parse_server.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/classes/AccessToken"
    assert request.headers["X-Parse-Application-Id"] == "app-id"
    assert request.headers["X-Parse-REST-API-Key"] == "rest-key"

    body = json.loads(request.content)
    assert body["tokenHash"] == hash_token(issued.token)
    assert body["expiresAt"] == {"__type": "Date", "iso": "2025-10-02T00:00:00Z"}
    assert body["purpose"] == "registration"
    assert issued.token not in request.content.decode()


@pytest.mark.asyncio
async def test_issue_then_validate(backend):
    """A stored token validates through a hash lookup."""
    issued = await backend.issue()

    assert await backend.validate(issued.token) is True


@pytest.mark.asyncio
async def test_validate_unknown_token(backend):
    """A hash with no record is invalid."""
    assert await backend.validate("unknown") is False


@pytest.mark.asyncio
async def test_validate_expired_record(backend, clock):
    """Records past their expiry do not validate."""
    issued = await backend.issue()
    clock.advance(hours=12, seconds=1)

    assert await backend.validate(issued.token) is False


@pytest.mark.asyncio
async def test_validate_any_unexpired_record(backend, parse_server):
    """One live record among expired ones is enough."""
    token_hash = hash_token("tok")
    parse_server.objects["AccessToken"] = [
        {"tokenHash": token_hash, "expiresAt": {"__type": "Date", "iso": "2020-01-01T00:00:00.000Z"}},
        {"tokenHash": token_hash, "expiresAt": {"__type": "Date"}},
        {"tokenHash": token_hash, "expiresAt": {"__type": "Date", "iso": "2030-01-01T00:00:00.000Z"}},
    ]

    assert await backend.validate("tok") is True


@pytest.mark.asyncio
@pytest.mark.parametrize("iso", [1893456000, ["2030-01-01T00:00:00Z"], {"iso": "x"}, "not-a-date"])
async def test_validate_ignores_malformed_expiry(backend, parse_server, iso):
    """Records whose expiry is not an RFC 3339 string never validate."""
    parse_server.objects["AccessToken"] = [
        {"tokenHash": hash_token("tok"), "expiresAt": {"__type": "Date", "iso": iso}},
    ]

    assert await backend.validate("tok") is False


@pytest.mark.asyncio
async def test_validate_fails_closed_on_network_error(remote_config, clock):
    """Transport errors make the token invalid instead of raising."""
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    backend = RemoteTokenBackend(remote_config, client, clock=clock)

    assert await backend.validate("tok") is False


@pytest.mark.asyncio
async def test_validate_fails_closed_on_bad_status(backend, parse_server):
    """Non-200 answers make the token invalid."""
    parse_server.fail_with = lambda request: httpx.Response(500, text="boom")

    assert await backend.validate("tok") is False


@pytest.mark.asyncio
async def test_validate_fails_closed_on_bad_json(backend, parse_server):
    """Undecodable answers make the token invalid."""
    parse_server.fail_with = lambda request: httpx.Response(200, text="<html>")

    assert await backend.validate("tok") is False


@pytest.mark.asyncio
async def test_issue_raises_on_rejected_store(backend, parse_server):
    """A non-2xx create is surfaced as UpstreamError."""
    parse_server.fail_with = lambda request: httpx.Response(400, json={"error": "bad"})

    with pytest.raises(UpstreamError):
        await backend.issue()


@pytest.mark.asyncio
async def test_fetch_password_hash(backend, parse_server):
    """The AppSetting value is returned."""
    stored = hash_password("pw")
    parse_server.objects["AppSetting"] = [{"key": PASSWORD_HASH_KEY, "value": stored}]

    assert await backend.fetch_password_hash() == stored

    request = parse_server.requests[0]
    assert request.url.path == "/classes/AppSetting"
    assert json.loads(request.url.params["where"]) == {"key": PASSWORD_HASH_KEY}


@pytest.mark.asyncio
async def test_fetch_password_hash_missing(backend):
    """No setting record is an upstream error."""
    with pytest.raises(UpstreamError):
        await backend.fetch_password_hash()


@pytest.mark.asyncio
async def test_fetch_password_hash_malformed(backend, parse_server):
    """A value that is not a bcrypt hash is an upstream error."""
    parse_server.objects["AppSetting"] = [{"key": PASSWORD_HASH_KEY, "value": "plaintext"}]

    with pytest.raises(UpstreamError):
        await backend.fetch_password_hash()


def test_is_bcrypt_hash():
    """Only modular-crypt bcrypt strings pass."""
    assert is_bcrypt_hash(hash_password("pw")) is True
    assert is_bcrypt_hash("$2b$12$short") is False
    assert is_bcrypt_hash("x" * 60) is False
