"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP machinery directly. They serve as stable contracts between
repositories, domain models, and application services.

Each error carries a stable machine-readable ``code`` and the HTTP
``status_code`` the API boundary (``ecommerce_auth/core/errors.py``) uses when
translating it into a response envelope.
"""

from __future__ import annotations

from typing import Any, ClassVar

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError message mentions the constraint. SQLite
        reports the column instead (``users.email``), so callers may pass that.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base type
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    :param message: Client-safe description.
    :param code: Stable error code; defaults to :attr:`default_code`.
    :param details: Optional structured context (e.g. field errors).

    Notes
    -----
    - These are *not* HTTP errors; ``status_code`` is a hint for the boundary.
    - They can be safely raised from repositories, entities or services.
    """

    status_code: ClassVar[int] = 400
    default_code: ClassVar[str] = "BAD_REQUEST"
    default_message: ClassVar[str] = "Bad request"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details
        super().__init__(self.message)


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class InvalidRequestError(ServiceError):
    """400: malformed input, bad one-time token, or a forbidden self-action."""

    status_code = 400
    default_code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class ConflictError(ServiceError):
    """
    Raised when a uniqueness rule is violated.

    Reported as ``400`` rather than ``409`` to keep the public contract of
    the registration endpoint.
    """

    status_code = 400
    default_code = "EMAIL_EXISTS"
    default_message = "Email already registered"


class AuthenticationError(ServiceError):
    """401: credentials or bearer token missing, wrong, revoked or expired."""

    status_code = 401
    default_code = "AUTH_REQUIRED"
    default_message = "Authentication required"


class AuthorizationError(ServiceError):
    """403: the caller is known but not allowed to proceed."""

    status_code = 403
    default_code = "FORBIDDEN"
    default_message = "Insufficient permissions"


class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :param key: Identifier or search key, kept for logs only.
    """

    status_code = 404
    default_code = "USER_NOT_FOUND"
    default_message = "User not found"

    def __init__(
        self,
        entity: str = "User",
        key: str | int | None = None,
        *,
        message: str | None = None,
        code: str | None = None,
    ) -> None:
        self.entity = entity
        self.key = key
        super().__init__(message or f"{entity} not found", code=code)


class PersistenceError(ServiceError):
    """500: a write could not be completed (hashing, storage)."""

    status_code = 500
    default_code = "PERSISTENCE_ERROR"
    default_message = "Could not persist changes"
