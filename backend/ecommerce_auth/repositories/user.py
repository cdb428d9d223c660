"""User repository for persistence and lookup utilities."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import select

from ecommerce_auth.models.user import User, UserRole
from ecommerce_auth.repositories.base import BaseRepository, Page, Pagination


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    This repository NEVER issues tokens or touches the session registry; it
    only looks users up and stages changes for the Unit of Work.
    """

    model = User
    filterable = frozenset({"email", "role", "is_active"})
    # Credentials change only through entity methods
    updatable = frozenset({"first_name", "last_name", "is_active"})

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == email.lower().strip())
        return bool(self.session.execute(stmt).first())

    def get_by_reset_token(self, token: str, *, now: datetime) -> User | None:
        """Fetch the user holding ``token`` whose reset window is still open.

        :param token: Opaque reset token from the email link.
        :param now: Current UTC time; rows expiring at or before it are skipped.
        :returns: Matching user or ``None``.
        """
        if not token:
            return None
        stmt = select(User).where(
            User.password_reset_token == token,
            User.password_reset_expires.is_not(None),
            User.password_reset_expires > now,
        )
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_verification_token(self, token: str) -> User | None:
        if not token:
            return None
        stmt = select(User).where(User.email_verification_token == token)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def list_by_role(self, role: UserRole) -> list[User]:
        stmt = select(User).where(User.role == role).order_by(User.id.asc())
        return list(self.session.execute(stmt).scalars().all())

    def paginate_newest(
        self,
        pagination: Pagination,
        *,
        role: UserRole | None = None,
        is_active: bool | None = None,
    ) -> Page[User]:
        """Page through users newest first, optionally filtered."""
        return self.paginate(
            pagination,
            order_by=(User.created_at.desc(), User.id.desc()),
            filters={"role": role, "is_active": is_active},
        )
