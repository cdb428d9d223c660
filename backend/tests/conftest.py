"""Pytest fixtures building an isolated application per test.

Each test gets its own Flask app bound to a fresh in-memory SQLite database,
a fakeredis client for the session registry and an in-memory email outbox,
so no state leaks between cases.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from typing import Any

import fakeredis
import pytest
from flask import Flask

from ecommerce_auth.core.config import TestingConfig
from ecommerce_auth.core.container import ServiceContainer, get_container
from ecommerce_auth.core.extensions import db as _db
from ecommerce_auth.factory import create_app
from ecommerce_auth.services._shared.ports import InMemoryEmailSender


@pytest.fixture()
def redis_client() -> fakeredis.FakeRedis:
    """Provide a fresh FakeRedis instance for each test."""
    return fakeredis.FakeRedis()


@pytest.fixture()
def outbox() -> InMemoryEmailSender:
    """Email sender recording messages instead of delivering them."""
    return InMemoryEmailSender()


@pytest.fixture()
def app(redis_client, outbox) -> Generator[Flask, None, None]:
    """Create a testing application with its schema created.

    Yields
    ------
    flask.Flask
        Application with an active app context; tables are dropped afterwards.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestingConfig, redis_client=redis_client, email_sender=outbox)
    application.logger.setLevel("WARNING")
    with application.app_context():
        _db.create_all()
        yield application
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def db(app):
    """Flask-SQLAlchemy extension bound to the testing application."""
    return _db


@pytest.fixture()
def session(db):
    """The scoped session services and factories share."""
    return db.session


@pytest.fixture()
def container(app) -> ServiceContainer:
    return get_container(app)


@pytest.fixture()
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture()
def runner(app):
    """Return a Click runner for the application's CLI."""
    return app.test_cli_runner()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-01-01"):
    ...         ...
    """
    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2024-01-01")

    return _factory
