"""Application factory wiring Flask extensions, services and blueprints."""

from __future__ import annotations

from typing import Any

from flask import Flask

from ecommerce_auth.core.config import BaseConfig, get_config, validate_config
from ecommerce_auth.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    redis_client: Any | None = None,
    email_sender: Any | None = None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config class, object or import path; defaults to the class
        selected by ``APP_ENV``.
    :param redis_client: Pre-built Redis client (tests pass fakeredis). When
        omitted the client is built from ``REDIS_URL``.
    :param email_sender: Replacement for the SMTP sender.
    :raises RuntimeError: On unsafe production settings or unreachable Redis.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)
    validate_config(app.config)

    configure_logging(
        app.config.get("LOG_LEVEL", "INFO"),
        fmt=app.config.get("LOG_FORMAT", "json"),
        service=app.config.get("SERVICE_NAME", "auth-service"),
    )

    from ecommerce_auth.core import proxy

    proxy.init_app(app)

    from ecommerce_auth.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from ecommerce_auth.core import cors

    cors.init_app(app)

    from ecommerce_auth.core import container

    container.init_app(app, redis_client=redis_client, email_sender=email_sender)

    from ecommerce_auth.api import init_app as init_api

    init_api(app)

    from ecommerce_auth.core import errors

    errors.init_app(app)

    from ecommerce_auth import cli as app_cli

    app_cli.init_app(app)

    return app
