"""Per-application service container.

Collaborators are constructed once per Flask app by :func:`init_app` and kept
in ``app.extensions[EXTENSION_KEY]``; request handlers reach them through
:func:`get_container`. Nothing here is a process-wide singleton, so two apps
(e.g. in tests) never share a Redis client or a service instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app

from ecommerce_auth.core.extensions import connect_redis
from ecommerce_auth.infra.email.smtp_sender import SMTPEmailSender
from ecommerce_auth.infra.jwt.pyjwt_token_codec import JWTSettings, JWTTokenCodec
from ecommerce_auth.infra.redis.redis_denylist_store import RedisTokenDenylistStore
from ecommerce_auth.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from ecommerce_auth.services._shared.ports import EmailSender
from ecommerce_auth.services.auth.dto import AuthSettings
from ecommerce_auth.services.auth.guard import AuthorizationGuard
from ecommerce_auth.services.auth.service import AuthService
from ecommerce_auth.services.sessions.registry import SessionRegistry
from ecommerce_auth.services.users.service import UserService

EXTENSION_KEY = "ecommerce_auth"


@dataclass(frozen=True)
class ServiceContainer:
    """Immutable bundle of the collaborators one application uses."""

    redis: Any
    codec: JWTTokenCodec
    sessions: SessionRegistry
    email_sender: EmailSender
    auth: AuthService
    users: UserService
    guard: AuthorizationGuard


def build_container(
    config,
    *,
    redis_client: redis.Redis,
    email_sender: EmailSender | None = None,
) -> ServiceContainer:
    """Wire codec, registry, services and guard from ``config``."""
    codec = JWTTokenCodec(JWTSettings.from_config(config))
    sessions = SessionRegistry(
        codec=codec,
        refresh_store=RedisRefreshTokenStore(redis_client),
        denylist=RedisTokenDenylistStore(redis_client),
    )
    sender = email_sender or SMTPEmailSender.from_config(config)
    return ServiceContainer(
        redis=redis_client,
        codec=codec,
        sessions=sessions,
        email_sender=sender,
        auth=AuthService(
            sessions=sessions,
            email_sender=sender,
            settings=AuthSettings.from_config(config),
        ),
        users=UserService(),
        guard=AuthorizationGuard(sessions),
    )


def init_app(
    app: Flask,
    *,
    redis_client: redis.Redis | None = None,
    email_sender: EmailSender | None = None,
) -> ServiceContainer:
    """Build the container for ``app``; connects to ``REDIS_URL`` unless a client is given."""
    client = redis_client if redis_client is not None else connect_redis(app)
    container = build_container(app.config, redis_client=client, email_sender=email_sender)
    app.extensions[EXTENSION_KEY] = container
    return container


def get_container(app: Flask | None = None) -> ServiceContainer:
    target = app or current_app
    return target.extensions[EXTENSION_KEY]
