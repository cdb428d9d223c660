"""Shared building blocks for application services."""

from __future__ import annotations

from collections.abc import Callable

from ecommerce_auth.repositories.base import Pagination
from ecommerce_auth.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

UowFactory = Callable[[], SQLAlchemyUnitOfWork]
ReadOnlyUowFactory = Callable[[], SQLAlchemyReadOnlyUnitOfWork]

MAX_PAGE_SIZE = 100


class BaseService:
    """
    Base class for application services.

    Services open a Unit of Work per use case and never touch the scoped
    session directly. Failures are raised as
    :mod:`ecommerce_auth.services._shared.errors` subclasses and translated
    once at the HTTP boundary.
    """

    def __init__(
        self,
        *,
        uow_factory: UowFactory | None = None,
        ro_uow_factory: ReadOnlyUowFactory | None = None,
    ) -> None:
        """
        :param uow_factory: Builds read-write units of work (tests may swap it).
        :param ro_uow_factory: Builds read-only units of work.
        """
        self._uow_factory = uow_factory or SQLAlchemyUnitOfWork
        self._ro_uow_factory = ro_uow_factory or SQLAlchemyReadOnlyUnitOfWork

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return self._uow_factory()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        return self._ro_uow_factory()

    @staticmethod
    def ensure_pagination(*, page: int, limit: int) -> Pagination:
        """Clamp ``page`` to >= 1 and ``limit`` to ``1..MAX_PAGE_SIZE``."""
        return Pagination(page=max(1, int(page)), limit=min(MAX_PAGE_SIZE, max(1, int(limit))))
