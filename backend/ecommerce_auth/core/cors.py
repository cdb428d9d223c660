"""Cross-origin policy for browser clients calling the auth API."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from ecommerce_auth.core.logger import REQUEST_ID_HEADER


def allowed_origins(raw: str | None) -> list[str] | None:
    """Split ``CORS_ORIGINS``; ``None`` stands for any origin (blank or ``*``)."""
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    return None if not origins or origins == ["*"] else origins


def init_app(app: Flask) -> None:
    """
    Enable CORS on ``/api/*``.

    Credentials are only allowed with an explicit origin list. Bearer tokens
    travel in ``Authorization`` and the request id header is exposed so
    clients can quote it when reporting errors.
    """
    origins = allowed_origins(app.config.get("CORS_ORIGINS"))
    CORS(
        app,
        resources={r"/api/*": {"origins": origins or "*"}},
        supports_credentials=origins is not None,
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
