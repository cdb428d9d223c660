"""HTTP layer: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def mount_prefix(*segments: str) -> str:
    """Join path segments into ``/a/b/c``, ignoring empty ones.

    >>> mount_prefix("/api/", "v1", "")
    '/api/v1'
    """
    parts = [s.strip("/") for s in segments if s and s.strip("/")]
    return "/" + "/".join(parts)


def register_version(
    app: Flask, version: str, blueprints: Iterable[tuple[Blueprint, str]]
) -> None:
    """Mount each ``(blueprint, subpath)`` beneath ``<API_BASE_PREFIX>/<version>``."""
    base = app.config.get("API_BASE_PREFIX", "/api")
    for bp, subpath in blueprints:
        app.register_blueprint(bp, url_prefix=mount_prefix(base, version, subpath))


def init_app(app: Flask) -> None:
    from ecommerce_auth.api import v1

    register_version(app, v1.API_VERSION, v1.REGISTRY)


__all__ = ["init_app", "mount_prefix", "register_version"]
