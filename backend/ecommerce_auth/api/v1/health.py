"""Health, liveness and readiness endpoints."""

from __future__ import annotations

from datetime import UTC, datetime

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ecommerce_auth.api.deps import json_response, timing
from ecommerce_auth.core.container import get_container
from ecommerce_auth.core.extensions import db

bp = Blueprint("health", __name__)


def _check_database() -> bool:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        return False
    return True


def _check_redis() -> bool:
    try:
        return bool(get_container().redis.ping())
    except RedisError:
        current_app.logger.exception("healthcheck.redis_error")
        return False


@bp.get("/health")
@timing
def healthcheck():
    """Return service identity and the current server time."""

    return json_response(
        {
            "status": "ok",
            "service": current_app.config.get("SERVICE_NAME", "auth-service"),
            "timestamp": datetime.now(UTC).isoformat(),
        }
    )


@bp.get("/health/live")
def liveness():
    return json_response({"status": "alive"})


@bp.get("/health/ready")
@timing
def readiness():
    """Report database and Redis reachability; 503 when either is down."""

    checks = {
        "database": "ok" if _check_database() else "fail",
        "redis": "ok" if _check_redis() else "fail",
    }
    ready = all(value == "ok" for value in checks.values())
    status = "ready" if ready else "not_ready"
    return json_response({"status": status, "checks": checks}, status=200 if ready else 503)
