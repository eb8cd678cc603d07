"""
Unit tests for the in-memory token backend.
"""

from datetime import timedelta

import pytest

from eventgate.modules.auth.local import LocalTokenBackend


@pytest.fixture
def backend(clock):
    """Create a LocalTokenBackend driven by the frozen clock."""
    return LocalTokenBackend(ttl=timedelta(hours=12), clock=clock)


@pytest.mark.asyncio
async def test_issue_then_validate(backend, clock):
    """A freshly issued token validates."""
    issued = await backend.issue()

    assert await backend.validate(issued.token) is True
    assert issued.expires_at == clock.now + timedelta(hours=12)


@pytest.mark.asyncio
async def test_token_format(backend):
    """Tokens are 32 random bytes in unpadded URL-safe base64."""
    issued = await backend.issue()

    assert len(issued.token) == 43
    assert "=" not in issued.token
    assert "+" not in issued.token and "/" not in issued.token


@pytest.mark.asyncio
async def test_tokens_are_unique(backend):
    """Two issues never return the same token."""
    first = await backend.issue()
    second = await backend.issue()

    assert first.token != second.token
    assert len(backend) == 2


@pytest.mark.asyncio
async def test_validate_unknown_token(backend):
    """Unknown tokens are rejected."""
    assert await backend.validate("not-a-token") is False


@pytest.mark.asyncio
async def test_valid_exactly_at_expiry(backend, clock):
    """Expiry is inclusive."""
    issued = await backend.issue()
    clock.advance(hours=12)

    assert await backend.validate(issued.token) is True


@pytest.mark.asyncio
async def test_expired_token_removed_on_validate(backend, clock):
    """An expired token is rejected and dropped after one lookup."""
    issued = await backend.issue()
    clock.advance(hours=12, seconds=1)

    assert issued.token in backend
    assert await backend.validate(issued.token) is False
    assert issued.token not in backend
    assert await backend.validate(issued.token) is False


@pytest.mark.asyncio
async def test_issue_prunes_expired_tokens(backend, clock):
    """Issuing a token drops previously expired ones."""
    old = await backend.issue()
    clock.advance(hours=13)

    fresh = await backend.issue()

    assert old.token not in backend
    assert fresh.token in backend
    assert len(backend) == 1


@pytest.mark.asyncio
async def test_prune_expired_returns_count(backend, clock):
    """prune_expired removes only expired entries."""
    await backend.issue()
    await backend.issue()
    clock.advance(hours=6)
    keep = await backend.issue()
    clock.advance(hours=7)

    removed = await backend.prune_expired()

    assert removed == 2
    assert keep.token in backend
