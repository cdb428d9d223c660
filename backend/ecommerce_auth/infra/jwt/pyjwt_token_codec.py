"""PyJWT-backed implementation of the token provider port."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from ecommerce_auth.services._shared.ports import (
    AccessClaims,
    InvalidTokenError,
    RefreshClaims,
    TokenProvider,
)

DEFAULT_ACCESS_TTL = 15 * 60
DEFAULT_REFRESH_TTL = 7 * 24 * 60 * 60
DEFAULT_ISSUER = "ecommerce-auth"
DEFAULT_AUDIENCE = "ecommerce-platform"


@dataclass(frozen=True, slots=True)
class JWTSettings:
    """
    Signing material and lifetimes for both token types.

    :param access_secret: HMAC key for access tokens.
    :param refresh_secret: HMAC key for refresh tokens.
    :param access_ttl: Access token lifetime in seconds.
    :param refresh_ttl: Refresh token lifetime in seconds.
    :param issuer: ``iss`` claim written and required.
    :param audience: ``aud`` claim of access tokens.
    :param algorithm: JWS algorithm (HS256).
    """

    access_secret: str
    refresh_secret: str
    access_ttl: int = DEFAULT_ACCESS_TTL
    refresh_ttl: int = DEFAULT_REFRESH_TTL
    issuer: str = DEFAULT_ISSUER
    audience: str = DEFAULT_AUDIENCE
    algorithm: str = "HS256"

    @classmethod
    def from_config(cls, config) -> JWTSettings:
        return cls(
            access_secret=config["JWT_ACCESS_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            access_ttl=int(config.get("JWT_ACCESS_EXPIRES", DEFAULT_ACCESS_TTL)),
            refresh_ttl=int(config.get("JWT_REFRESH_EXPIRES", DEFAULT_REFRESH_TTL)),
            issuer=config.get("JWT_ISSUER", DEFAULT_ISSUER),
            audience=config.get("JWT_AUDIENCE", DEFAULT_AUDIENCE),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )


class JWTTokenCodec(TokenProvider):
    """
    Sign and verify compact JWTs with PyJWT.

    Access tokens carry ``sub``, ``email``, ``role``, ``type="access"``,
    ``iss``, ``aud``, ``iat``, ``exp`` and a random ``jti``; refresh tokens
    carry ``sub``, ``type="refresh"``, ``iss``, ``iat``, ``exp`` and ``jti``.
    The ``jti`` keeps two tokens minted in the same second distinct.
    """

    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings

    @property
    def refresh_ttl_seconds(self) -> int:
        return self._settings.refresh_ttl

    @property
    def access_ttl_seconds(self) -> int:
        return self._settings.access_ttl

    # -------------------------- issuing --------------------------

    def _base_claims(self, user, *, token_type: str, ttl: int) -> dict[str, Any]:
        now = datetime.now(UTC)
        return {
            "sub": str(user.id),
            "type": token_type,
            "iss": self._settings.issuer,
            "iat": now,
            "exp": now + timedelta(seconds=ttl),
            "jti": uuid4().hex,
        }

    def issue_access(self, user) -> str:
        s = self._settings
        claims = self._base_claims(user, token_type="access", ttl=s.access_ttl)
        claims.update(
            {
                "email": user.email,
                "role": getattr(user.role, "value", user.role),
                "aud": s.audience,
            }
        )
        return jwt.encode(claims, s.access_secret, algorithm=s.algorithm)

    def issue_refresh(self, user) -> str:
        s = self._settings
        claims = self._base_claims(user, token_type="refresh", ttl=s.refresh_ttl)
        return jwt.encode(claims, s.refresh_secret, algorithm=s.algorithm)

    # -------------------------- verifying --------------------------

    def _decode(self, token: str, *, secret: str, audience: str | None) -> dict[str, Any]:
        s = self._settings
        options: dict[str, Any] = {"require": ["exp", "iat", "sub", "iss", "jti"]}
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[s.algorithm],
                issuer=s.issuer,
                audience=audience,
                options=options,
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

    def verify_access(self, token: str) -> AccessClaims:
        """
        Verify signature, issuer, audience, expiry and ``type == "access"``.

        :raises InvalidTokenError: On any failure.
        """
        payload = self._decode(
            token, secret=self._settings.access_secret, audience=self._settings.audience
        )
        if payload.get("type") != "access":
            raise InvalidTokenError("Not an access token")
        return AccessClaims(
            user_id=str(payload["sub"]),
            email=str(payload.get("email", "")),
            role=str(payload.get("role", "")),
            jti=str(payload["jti"]),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
        )

    def verify_refresh(self, token: str) -> RefreshClaims:
        """
        Verify signature, issuer, expiry and ``type == "refresh"``.

        :raises InvalidTokenError: On any failure.
        """
        payload = self._decode(token, secret=self._settings.refresh_secret, audience=None)
        if payload.get("type") != "refresh":
            raise InvalidTokenError("Not a refresh token")
        return RefreshClaims(
            user_id=str(payload["sub"]),
            jti=str(payload["jti"]),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
        )

    def read_expiry_unverified(self, token: str) -> datetime | None:
        """Return the ``exp`` claim without checking the signature.

        Only used to size blacklist entries; never trust the result otherwise.
        """
        try:
            payload = jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError:
            return None
        exp = payload.get("exp")
        if not isinstance(exp, int | float):
            return None
        return datetime.fromtimestamp(exp, tz=UTC)
