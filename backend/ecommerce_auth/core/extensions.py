"""Flask extension instances and initialization helpers."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Import-safe extension objects; bound per app in init_app()
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy and migrations.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`ecommerce_auth.models` package to ensure SQLAlchemy metadata is
        ready for migrations.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from ecommerce_auth import models as _models  # noqa: F401

    migrate.init_app(app, db)


def connect_redis(app: Flask) -> redis.Redis:
    """Build a Redis client from ``REDIS_URL`` with bounded socket timeouts.

    :param app: Application whose config provides ``REDIS_URL`` and
        ``REDIS_SOCKET_TIMEOUT``.
    :returns: Connected client.
    :raises RuntimeError: When ``REDIS_URL`` is missing or Redis is unreachable.
    """
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        raise RuntimeError("REDIS_URL is not configured and no Redis client was injected.")

    timeout = float(app.config.get("REDIS_SOCKET_TIMEOUT", 2.0))
    client = redis.Redis.from_url(
        redis_url,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    return client
