"""Unit tests for the session registry over in-memory stores."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from ecommerce_auth.infra.jwt.pyjwt_token_codec import JWTSettings, JWTTokenCodec
from ecommerce_auth.services._shared.ports import (
    InMemoryDenylistStore,
    InMemoryRefreshTokenStore,
)
from ecommerce_auth.services.sessions.registry import SessionRegistry


@dataclass
class _User:
    id: int = 3
    email: str = "carol@example.com"
    role: str = "vendor"


@pytest.fixture
def registry() -> SessionRegistry:
    codec = JWTTokenCodec(JWTSettings(access_secret="a-secret", refresh_secret="r-secret"))
    return SessionRegistry(
        codec=codec,
        refresh_store=InMemoryRefreshTokenStore(),
        denylist=InMemoryDenylistStore(),
    )


def test_issue_pair_records_refresh_token(registry):
    pair = registry.issue_pair(_User())

    assert pair.access_token != pair.refresh_token
    assert registry.validate_refresh(pair.refresh_token) == "3"
    assert registry.validate_refresh(pair.access_token) is None


def test_invalidate_refresh_only_once(registry):
    pair = registry.issue_pair(_User())

    assert registry.invalidate_refresh(pair.refresh_token) is True
    assert registry.invalidate_refresh(pair.refresh_token) is False
    assert registry.validate_refresh(pair.refresh_token) is None


def test_blacklist_live_token(registry):
    pair = registry.issue_pair(_User())

    assert registry.is_blacklisted(pair.access_token) is False
    assert registry.blacklist(pair.access_token) is True
    assert registry.is_blacklisted(pair.access_token) is True


def test_blacklist_uses_remaining_lifetime(registry, freeze_time):
    with freeze_time("2024-01-01 00:00:00") as frozen:
        pair = registry.issue_pair(_User())
        frozen.tick(10 * 60)
        assert registry.blacklist(pair.access_token) is True
        frozen.tick(4 * 60)
        assert registry.is_blacklisted(pair.access_token) is True
        frozen.tick(61)
        assert registry.is_blacklisted(pair.access_token) is False


def test_blacklist_skips_expired_token(registry, freeze_time):
    with freeze_time("2024-01-01 00:00:00") as frozen:
        pair = registry.issue_pair(_User())
        frozen.tick(16 * 60)
        assert registry.blacklist(pair.access_token) is False
        assert registry.is_blacklisted(pair.access_token) is False


def test_blacklist_skips_undecodable_token(registry):
    assert registry.blacklist("not-a-token") is False
    assert registry.is_blacklisted("not-a-token") is False
