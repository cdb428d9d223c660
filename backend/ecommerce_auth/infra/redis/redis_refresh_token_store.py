# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass
from typing import cast

import redis  # type: ignore[import-untyped]

from ecommerce_auth.services._shared.ports import RefreshTokenStore


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed registry of live refresh tokens.

    Entries are ``token:<refresh token> -> <user id>`` with a TTL equal to the
    refresh lifetime.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    PREFIX = "token:"

    @staticmethod
    def _k(token: str) -> str:
        return f"{RedisRefreshTokenStore.PREFIX}{token}"

    def save(self, token: str, user_id: str, *, ttl_seconds: int) -> None:
        self.r.set(self._k(token), str(user_id), ex=max(1, int(ttl_seconds)))

    def get_user_id(self, token: str) -> str | None:
        raw = self.r.get(self._k(token))
        if raw is None:
            return None
        return raw.decode() if isinstance(raw, bytes | bytearray) else str(raw)

    def delete(self, token: str) -> bool:
        """
        Remove the entry with a single ``DEL``.

        Redis executes ``DEL`` atomically, so when two rotations race for the
        same token only one of them sees a count of ``1``.
        """
        return cast(int, self.r.delete(self._k(token))) == 1
