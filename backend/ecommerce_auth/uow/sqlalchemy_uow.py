"""
SQLAlchemy Units of Work bound to the Flask-SQLAlchemy session.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.orm import Session

from ecommerce_auth.core.extensions import db
from ecommerce_auth.repositories import UserRepository
from ecommerce_auth.uow.base import UnitOfWork


def _current_session() -> Session:
    # Calling the scoped_session yields this thread's Session; event
    # listeners must target the instance, not the shared factory.
    return db.session()


class _SessionScope(UnitOfWork):
    """Repositories sharing one concrete :class:`~sqlalchemy.orm.Session`."""

    def __init__(self, session: Session | None = None) -> None:
        self.session = session if session is not None else _current_session()
        self.users = UserRepository(session=self.session)

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyUnitOfWork(_SessionScope):
    """
    Read-write scope: commit when the block exits cleanly, roll back otherwise.

    A failed commit is rolled back before the error propagates, so a service
    persists every change of a use case or none of them.
    """

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()


class SQLAlchemyReadOnlyUnitOfWork(_SessionScope):
    """
    Read-only scope: ORM flushes with pending changes are refused, ``commit()``
    raises and the transaction is rolled back on exit regardless of outcome.
    """

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        event.listen(self.session, "before_flush", self._refuse_writes)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            if event.contains(self.session, "before_flush", self._refuse_writes):
                event.remove(self.session, "before_flush", self._refuse_writes)

    @staticmethod
    def _refuse_writes(session: Session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

    def commit(self) -> None:
        """
        :raises RuntimeError: always.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")
