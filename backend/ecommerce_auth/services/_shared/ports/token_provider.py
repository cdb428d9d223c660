from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class InvalidTokenError(Exception):
    """Raised by codecs when a token fails signature, claim or expiry checks."""


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """
    Verified claims of an access token.

    :param user_id: ``sub`` claim (string form of the user id).
    :param email: Email at issuance time.
    :param role: Role at issuance time.
    :param jti: Unique token id.
    :param expires_at: ``exp`` as an aware UTC datetime.
    """

    user_id: str
    email: str
    role: str
    jti: str
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class RefreshClaims:
    """Verified claims of a refresh token."""

    user_id: str
    jti: str
    expires_at: datetime


class TokenProvider(Protocol):
    """Port for issuing and verifying signed session tokens."""

    @property
    def refresh_ttl_seconds(self) -> int: ...

    def issue_access(self, user) -> str: ...

    def issue_refresh(self, user) -> str: ...

    def verify_access(self, token: str) -> AccessClaims: ...

    def verify_refresh(self, token: str) -> RefreshClaims: ...

    def read_expiry_unverified(self, token: str) -> datetime | None: ...
