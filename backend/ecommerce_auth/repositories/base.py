"""Persistence-only repository base for SQLAlchemy 2.x.

Repositories stage reads and writes on the current session. Transactions
belong to the Unit of Work: nothing here commits or rolls back.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar, cast

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.orm import Session

from ecommerce_auth.core.extensions import db

E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Pagination:
    """1-based page request; callers clamp ``limit`` beforehand."""

    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(slots=True)
class Page(Generic[E]):
    items: Sequence[E]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        """Page count, ``0`` for an empty result."""
        return -(-self.total // self.limit) if self.limit > 0 else 0


def count_rows(session: Session, stmt: Select[Any]) -> int:
    """Count the rows ``stmt`` would return, ignoring its ORDER BY."""
    subquery = stmt.order_by(None).subquery()
    return int(session.execute(select(func.count()).select_from(subquery)).scalar_one())


class BaseRepository(Generic[E]):
    """Shared CRUD for one mapped model.

    Subclasses set :attr:`model` and list which attributes clients may filter
    on (:attr:`filterable`) or assign through :meth:`update` (:attr:`updatable`).
    """

    model: type[E]
    filterable: ClassVar[frozenset[str]] = frozenset()
    updatable: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        """The injected session, else the Flask-SQLAlchemy scoped one."""
        return self._session if self._session is not None else cast(Session, db.session)

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is assigned."""
        self.session.add(instance)
        self.flush()
        return instance

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.flush()

    def update(self, instance: E, **changes: Any) -> E:
        """
        Assign whitelisted attributes, skipping ``None`` values.

        Attributes are set one by one so model ``@validates`` hooks run.

        :raises ValueError: When a key is not in :attr:`updatable`.
        """
        rejected = sorted(set(changes) - self.updatable)
        if rejected:
            raise ValueError(f"Fields not updatable: {rejected}")
        for key, value in changes.items():
            if value is not None:
                setattr(instance, key, value)
        self.flush()
        return instance

    def flush(self) -> None:
        self.session.flush()

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def get(self, entity_id: Any) -> E | None:
        return self.session.get(self.model, entity_id)

    def _where(self, stmt: Select[Any], filters: Mapping[str, Any]) -> Select[Any]:
        """Apply equality filters on whitelisted attributes; ``None`` means no filter."""
        clauses: list[ColumnElement[bool]] = []
        for name, value in filters.items():
            if value is None:
                continue
            if name not in self.filterable:
                raise ValueError(f"Field not filterable: {name}")
            clauses.append(getattr(self.model, name) == value)
        return stmt.where(*clauses) if clauses else stmt

    def paginate(
        self,
        pagination: Pagination,
        *,
        order_by: Sequence[Any],
        filters: Mapping[str, Any] | None = None,
    ) -> Page[E]:
        """Return one page of ``model`` rows and the total match count."""
        stmt = self._where(select(self.model), filters or {})
        total = count_rows(self.session, stmt)
        rows = self.session.execute(
            stmt.order_by(*order_by).limit(pagination.limit).offset(pagination.offset)
        ).scalars()
        return Page(items=list(rows), total=total, page=pagination.page, limit=pagination.limit)
