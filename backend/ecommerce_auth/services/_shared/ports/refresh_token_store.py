from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta
from typing import Protocol


class RefreshTokenStore(Protocol):
    """
    Stateful store mapping live refresh tokens to their owner.

    ``delete`` MUST be atomic: when two callers race for the same token,
    exactly one of them observes ``True``.
    """

    def save(self, token: str, user_id: str, *, ttl_seconds: int) -> None:
        """Record ``token`` as issued to ``user_id`` for ``ttl_seconds``."""

    def get_user_id(self, token: str) -> str | None:
        """Return the owner of a live token, or ``None``."""

    def delete(self, token: str) -> bool:
        """Remove ``token``. :returns: True if this call removed it."""


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh store with TTLs.

    .. note::
       Uses a threading lock to keep ``delete`` atomic in unit tests.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, datetime]] = {}
        self._lock = threading.Lock()

    def _live(self, token: str) -> tuple[str, datetime] | None:
        entry = self._entries.get(token)
        if entry is None:
            return None
        if entry[1] <= datetime.now(UTC):
            del self._entries[token]
            return None
        return entry

    def save(self, token: str, user_id: str, *, ttl_seconds: int) -> None:
        with self._lock:
            expires_at = datetime.now(UTC) + timedelta(seconds=ttl_seconds)
            self._entries[token] = (str(user_id), expires_at)

    def get_user_id(self, token: str) -> str | None:
        with self._lock:
            entry = self._live(token)
            return entry[0] if entry else None

    def delete(self, token: str) -> bool:
        with self._lock:
            if self._live(token) is None:
                return False
            del self._entries[token]
            return True
