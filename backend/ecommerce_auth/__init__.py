"""Expose the application factory at package level.

Provide convenient access to :func:`ecommerce_auth.factory.create_app` so
callers can ``from ecommerce_auth import create_app`` (e.g. gunicorn's
``"ecommerce_auth:create_app()"``) without traversing the package structure.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
