"""WSGI proxy middleware configuration helper."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Apply :class:`werkzeug.middleware.proxy_fix.ProxyFix` when enabled.

    The service sits behind the API gateway, which sets ``X-Forwarded-*``
    headers. ``USE_PROXYFIX`` (default ``True``) toggles the middleware and
    ``PROXYFIX_HOPS`` sets how many proxies are trusted (default one).
    """
    if app.config.get("USE_PROXYFIX", True):
        hops = int(app.config.get("PROXYFIX_HOPS", 1))
        app.wsgi_app = ProxyFix(  # type: ignore[method-assign]
            app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops, x_prefix=hops
        )
