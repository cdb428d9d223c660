"""Factory Boy helpers wired to the project's SQLAlchemy session."""

from __future__ import annotations

import factory

from ecommerce_auth.core.extensions import db


def _current_session():
    """Return the Flask-SQLAlchemy session of the active app context.

    Raises
    ------
    RuntimeError
        If factories are used without the ``app`` fixture pushing a context.
    """
    return db.session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class persisting through the application's session.

    Objects are committed, not only flushed: read-only units of work roll the
    session back on exit, which would otherwise discard factory rows.
    """

    class Meta:
        abstract = True
        sqlalchemy_session_factory = _current_session
        sqlalchemy_session_persistence = "commit"
