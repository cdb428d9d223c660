"""Bearer-token authorization guard, independent from the web framework."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ecommerce_auth.services._shared.errors import AuthenticationError, AuthorizationError
from ecommerce_auth.services._shared.ports import InvalidTokenError
from ecommerce_auth.services.sessions.registry import SessionRegistry

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Authenticated caller attached to the request context.

    :param user_id: Numeric user id from the ``sub`` claim.
    :param email: Email claim.
    :param role: Role claim.
    :param token: The raw access token (needed for logout).
    """

    user_id: int
    email: str
    role: str
    token: str


def extract_bearer(header: str | None) -> str | None:
    """Return the token from ``Authorization: Bearer <token>`` or ``None``."""
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


class AuthorizationGuard:
    """
    Validate access tokens and enforce roles.

    The blacklist is consulted before the signature so a revoked token is
    reported as ``TOKEN_REVOKED`` even once it has also expired.
    """

    def __init__(self, sessions: SessionRegistry) -> None:
        self.sessions = sessions

    def authenticate(self, authorization_header: str | None) -> Identity:
        """
        :raises AuthenticationError: ``NO_TOKEN``, ``TOKEN_REVOKED`` or ``INVALID_TOKEN``.
        """
        token = extract_bearer(authorization_header)
        if token is None:
            raise AuthenticationError("No token provided", code="NO_TOKEN")

        if self.sessions.is_blacklisted(token):
            raise AuthenticationError("Token has been revoked", code="TOKEN_REVOKED")

        try:
            claims = self.sessions.codec.verify_access(token)
            user_id = int(claims.user_id)
        except (InvalidTokenError, ValueError) as exc:
            raise AuthenticationError("Invalid or expired token", code="INVALID_TOKEN") from exc

        return Identity(user_id=user_id, email=claims.email, role=claims.role, token=token)

    @staticmethod
    def require_role(identity: Identity | None, roles: Iterable[str]) -> Identity:
        """
        :raises AuthenticationError: ``AUTH_REQUIRED`` without an identity.
        :raises AuthorizationError: ``FORBIDDEN`` when the role is not allowed.
        """
        if identity is None:
            raise AuthenticationError("Authentication required", code="AUTH_REQUIRED")
        allowed = {getattr(r, "value", r) for r in roles}
        if identity.role not in allowed:
            raise AuthorizationError("Insufficient permissions", code="FORBIDDEN")
        return identity
