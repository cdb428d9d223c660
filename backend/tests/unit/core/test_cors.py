"""Unit tests for CORS origin parsing and headers."""

from __future__ import annotations

import pytest

from ecommerce_auth.core.cors import allowed_origins


@pytest.mark.parametrize("raw", [None, "", " ", "*", " * "])
def test_any_origin(raw) -> None:
    assert allowed_origins(raw) is None


def test_explicit_origins() -> None:
    assert allowed_origins("http://a.test, http://b.test,") == ["http://a.test", "http://b.test"]


def test_preflight_exposes_request_id(client) -> None:
    resp = client.options(
        "/api/v1/auth/login",
        headers={"Origin": "http://localhost:4200", "Access-Control-Request-Method": "POST"},
    )

    assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:4200"
