"""User model definition for the e-commerce authentication service."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from sqlalchemy import Boolean, DateTime, Index, String, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, validates
from werkzeug.security import check_password_hash, generate_password_hash

from ecommerce_auth.core.extensions import db
from ecommerce_auth.services._shared.errors import PersistenceError

from .base import PKMixin, ReprMixin, TimestampMixin, utcnow

DEFAULT_HASH_METHOD = "pbkdf2:sha256:600000"
DEFAULT_RESET_LIFETIME = timedelta(hours=1)


class UserRole(str, Enum):
    """Roles recognized by the platform's services."""

    CUSTOMER = "customer"
    ADMIN = "admin"
    VENDOR = "vendor"


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity and profile of a platform user.

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed). Unique.
    password_hash : str
        Salted one-way hash; the raw password is never stored.
    first_name / last_name : str
        Display names (1-50 characters).
    role : UserRole
        ``customer`` (default), ``admin`` or ``vendor``.
    is_active : bool
        Inactive users cannot authenticate (soft delete).
    is_email_verified : bool
        Set once the verification link is followed.
    email_verification_token : str | None
        Opaque one-time token sent at registration.
    password_reset_token / password_reset_expires
        Opaque one-time reset token and its UTC expiry.
    last_login : datetime | None
        Timestamp of the last successful login.
    """

    __tablename__ = "users"

    # Columns
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(
            UserRole,
            name="enum_user_role",
            native_enum=False,
            create_constraint=True,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=UserRole.CUSTOMER,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_verification_token: Mapped[str | None] = mapped_column(String(128), nullable=True)
    password_reset_token: Mapped[str | None] = mapped_column(String(128), nullable=True)
    password_reset_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Constraints & indexes
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("ix_users_role", "role"),
        Index("ix_users_email_verification_token", "email_verification_token"),
        Index("ix_users_password_reset_token", "password_reset_token"),
    )

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """Hash and set the password with the default method."""
        self.set_password(raw)

    def set_password(
        self, raw: str, *, method: str | None = None, check_existing: bool = True
    ) -> bool:
        """
        Hash ``raw`` and store it unless it already matches the stored hash.

        The match check costs one key derivation on top of the new hash;
        callers that already know ``raw`` differs pass ``check_existing=False``.

        :param raw: Plain text password.
        :type raw: str
        :param method: Werkzeug hashing method including its work factor.
        :type method: str | None
        :param check_existing: Compare against the stored hash before rehashing.
        :type check_existing: bool
        :returns: ``True`` when a new hash was written.
        :rtype: bool
        :raises ValueError: If ``raw`` is empty.
        :raises PersistenceError: If hashing fails (e.g. unknown method).
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        if check_existing and self.password_hash and self.verify_password(raw):
            return False
        try:
            self.password_hash = generate_password_hash(raw, method=method or DEFAULT_HASH_METHOD)
        except (ValueError, TypeError) as exc:
            raise PersistenceError("Could not hash password") from exc
        return True

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash in constant time.

        :param raw: Plain text password candidate.
        :type raw: str
        :returns: ``True`` if it matches; otherwise ``False``.
        :rtype: bool
        """
        if not self.password_hash or not raw:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- One-time tokens --------------------
    def generate_password_reset_token(
        self, lifetime: timedelta = DEFAULT_RESET_LIFETIME
    ) -> str:
        """
        Create a reset token valid for ``lifetime``; the caller persists it.

        :returns: The opaque token to deliver by email.
        :rtype: str
        """
        token = secrets.token_urlsafe(32)
        self.password_reset_token = token
        self.password_reset_expires = utcnow() + lifetime
        return token

    def clear_password_reset(self) -> None:
        self.password_reset_token = None
        self.password_reset_expires = None

    def generate_email_verification_token(self) -> str:
        token = secrets.token_urlsafe(32)
        self.email_verification_token = token
        return token

    def mark_email_verified(self) -> None:
        self.is_email_verified = True
        self.email_verification_token = None

    def mark_logged_in(self) -> None:
        self.last_login = utcnow()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :returns: Normalized email (lowercased/trimmed).
        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("first_name", "last_name")
    def _normalize_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{key} is required.")
        return value.strip()
