"""Transport-neutral DTOs shared by the services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PageMeta:
    """
    Output pagination metadata.

    :param page: Current page (1-based).
    :param limit: Page size.
    :param total: Total rows available.
    :param pages: Number of pages for ``total`` rows.
    """

    page: int
    limit: int
    total: int
    pages: int


@dataclass(frozen=True, slots=True)
class PageOut(Generic[T]):
    """A page of DTOs plus its metadata."""

    items: list[T]
    meta: PageMeta


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Public projection of a user; never carries credentials or one-time tokens.

    :param id: User identifier.
    :param email: Normalized email.
    :param first_name: Given name.
    :param last_name: Family name.
    :param role: Role value (``customer``/``admin``/``vendor``).
    :param is_active: Whether the account can authenticate.
    :param is_email_verified: Whether the verification link was followed.
    :param last_login: Last successful login, if any.
    :param created_at: Creation timestamp.
    :param updated_at: Last update timestamp.
    """

    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    is_active: bool
    is_email_verified: bool
    last_login: datetime | None
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_model(cls, user) -> UserOut:
        role = getattr(user.role, "value", user.role)
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=str(role),
            is_active=bool(user.is_active),
            is_email_verified=bool(user.is_email_verified),
            last_login=user.last_login,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
