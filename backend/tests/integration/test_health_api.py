"""Integration tests for health endpoints."""

from __future__ import annotations

from redis.exceptions import ConnectionError as RedisConnectionError

from tests.helpers.http import build_url


def test_health(client) -> None:
    resp = client.get(build_url("/health"))

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["status"] == "ok"
    assert data["service"] == "auth-service"
    assert data["timestamp"]


def test_liveness(client) -> None:
    resp = client.get(build_url("/health/live"))
    assert resp.get_json()["data"] == {"status": "alive"}


def test_readiness(client) -> None:
    resp = client.get(build_url("/health/ready"))

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {
        "status": "ready",
        "checks": {"database": "ok", "redis": "ok"},
    }


def test_readiness_reports_redis_outage(client, redis_client, monkeypatch) -> None:
    def _down():
        raise RedisConnectionError("connection refused")

    monkeypatch.setattr(redis_client, "ping", _down)

    resp = client.get(build_url("/health/ready"))

    assert resp.status_code == 503
    data = resp.get_json()["data"]
    assert data["status"] == "not_ready"
    assert data["checks"]["redis"] == "fail"
