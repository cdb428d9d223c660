from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta
from typing import Protocol


class TokenDenylistStore(Protocol):
    """
    Abstraction for a denylist of **access tokens** revoked before expiry.

    Entries must disappear on their own once ``ttl_seconds`` elapse.
    """

    def is_revoked(self, token: str) -> bool: ...
    def revoke(self, token: str, *, ttl_seconds: int) -> None: ...


class InMemoryDenylistStore(TokenDenylistStore):
    """Simple in-memory denylist honoring TTLs, for unit tests."""

    def __init__(self) -> None:
        self._revoked: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def is_revoked(self, token: str) -> bool:
        with self._lock:
            expires_at = self._revoked.get(token)
            if expires_at is None:
                return False
            if expires_at <= datetime.now(UTC):
                del self._revoked[token]
                return False
            return True

    def revoke(self, token: str, *, ttl_seconds: int) -> None:
        with self._lock:
            self._revoked[token] = datetime.now(UTC) + timedelta(seconds=ttl_seconds)
