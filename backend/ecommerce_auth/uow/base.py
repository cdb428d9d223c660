"""Unit of Work contract used by the service layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecommerce_auth.repositories import UserRepository


class UnitOfWork(ABC):
    """
    One transactional boundary per use case.

    Repositories exposed here share the same session, so everything staged
    through them commits or rolls back together.
    """

    users: UserRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
