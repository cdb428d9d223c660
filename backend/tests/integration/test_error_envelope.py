"""The failure envelope and request correlation across error types."""

from __future__ import annotations

from redis.exceptions import ConnectionError as RedisConnectionError

from ecommerce_auth.services.auth.guard import Identity
from tests.helpers.http import bearer, build_url

_IDENTITY = Identity(user_id=1, email="x@example.com", role="customer", token="t")


def test_unknown_route(client) -> None:
    resp = client.get("/api/v1/nope")

    assert resp.status_code == 404
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_FOUND"
    assert body["error"]["message"] == "Route '/api/v1/nope' not found"
    assert body["error"]["requestId"]


def test_request_id_is_propagated(client) -> None:
    resp = client.get(build_url("/users/profile"), headers={"X-Request-ID": "req-123"})

    assert resp.headers["X-Request-ID"] == "req-123"
    assert resp.get_json()["error"]["requestId"] == "req-123"


def test_request_id_generated_when_absent(client) -> None:
    resp = client.get(build_url("/health/live"))
    assert resp.headers["X-Request-ID"]


def test_method_not_allowed(client) -> None:
    resp = client.get(build_url("/auth/login"))
    assert resp.status_code == 405
    assert resp.get_json()["error"]["code"] == "METHOD_NOT_ALLOWED"


def test_malformed_json_is_validation_error(client) -> None:
    resp = client.post(
        build_url("/auth/login"), data="{not json", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "VALIDATION_ERROR"


def test_redis_outage_is_service_unavailable(client, redis_client, monkeypatch) -> None:
    def _down(*_args, **_kwargs):
        raise RedisConnectionError("connection refused")

    monkeypatch.setattr(redis_client, "exists", _down)

    resp = client.get(build_url("/users/profile"), headers=bearer("any-token"))

    assert resp.status_code == 503
    assert resp.get_json()["error"]["code"] == "SERVICE_UNAVAILABLE"


def test_unexpected_error_hides_details(client, container, monkeypatch) -> None:
    def _explode(*_args, **_kwargs):
        raise ZeroDivisionError("secret internals")

    monkeypatch.setattr(container.users, "get_profile", _explode)
    monkeypatch.setattr(container.guard, "authenticate", lambda header: _IDENTITY)

    resp = client.get(build_url("/users/profile"), headers=bearer("t"))

    assert resp.status_code == 500
    error = resp.get_json()["error"]
    assert error["code"] == "INTERNAL_ERROR"
    assert error["message"] == "Internal server error"
