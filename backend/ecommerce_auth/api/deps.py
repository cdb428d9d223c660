"""Shared API helpers: response envelope, timing and bearer-token guards."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from ecommerce_auth.core.container import get_container
from ecommerce_auth.services.auth.guard import Identity

F = TypeVar("F", bound=Callable[..., Any])

_MISSING = object()


def json_response(
    data: Any = _MISSING,
    *,
    message: str | None = None,
    status: int = 200,
) -> Response:
    """Return ``{success: true, message?, data?}`` with the given status."""

    payload: dict[str, Any] = {"success": True}
    if message is not None:
        payload["message"] = message
    if data is not _MISSING:
        payload["data"] = data
    response = jsonify(payload)
    response.status_code = status
    return response


def load_json(schema) -> dict[str, Any]:
    """Validate the JSON body with ``schema``; an absent body counts as ``{}``."""

    return schema.load(request.get_json(silent=True) or {})


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


def current_identity() -> Identity | None:
    """Return the identity attached by :func:`require_auth`, if any."""

    return g.get("identity")


def require_auth(func: F) -> F:
    """Ensure the request carries a valid, non-revoked access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        guard = get_container().guard
        g.identity = guard.authenticate(request.headers.get("Authorization"))
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_role(*roles: str) -> Callable[[F], F]:
    """Ensure the authenticated caller holds one of ``roles``.

    Must be stacked below :func:`require_auth`.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            guard = get_container().guard
            guard.require_role(current_identity(), roles)
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
