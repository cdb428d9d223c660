"""Version 1 of the auth API.

``/health*`` sits at the version root; authentication flows live under
``/auth`` and profile or admin user management under ``/users``.
"""

from __future__ import annotations

from flask import Blueprint

from ecommerce_auth.api.v1.auth import bp as auth_bp
from ecommerce_auth.api.v1.health import bp as health_bp
from ecommerce_auth.api.v1.users import bp as users_bp

API_VERSION = "v1"

REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),
    (auth_bp, "auth"),
    (users_bp, "users"),
]
