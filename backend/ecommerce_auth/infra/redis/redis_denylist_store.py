from typing import cast

import redis  # type: ignore[import-untyped]

from ecommerce_auth.services._shared.ports import TokenDenylistStore


class RedisTokenDenylistStore(TokenDenylistStore):
    """
    Blacklist of **access tokens** revoked before their natural expiry.

    Each entry is ``blacklist:<token> -> "1"`` and expires with the token.
    """

    PREFIX = "blacklist:"

    def __init__(self, r: redis.Redis):
        self.r = r

    @classmethod
    def _k(cls, token: str) -> str:
        return f"{cls.PREFIX}{token}"

    def is_revoked(self, token: str) -> bool:
        return cast(int, self.r.exists(self._k(token))) == 1

    def revoke(self, token: str, *, ttl_seconds: int) -> None:
        # idempotent; a repeated logout only refreshes the TTL
        self.r.set(self._k(token), "1", ex=max(1, int(ttl_seconds)))
