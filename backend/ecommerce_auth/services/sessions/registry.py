"""Session registry: refresh-token tracking and access-token blacklist."""

from __future__ import annotations

import logging
import math
from datetime import UTC, datetime

from ecommerce_auth.services._shared.ports import (
    RefreshTokenStore,
    TokenDenylistStore,
    TokenProvider,
)
from ecommerce_auth.services.auth.dto import TokenPairOut

log = logging.getLogger(__name__)


class SessionRegistry:
    """
    Issue token pairs and track which of them are still usable.

    - Every issued refresh token is recorded with TTL = refresh lifetime and
      value = user id; it is single-use for rotation.
    - Logged-out access tokens are blacklisted until their own ``exp``.

    :param codec: Signs and verifies tokens.
    :param refresh_store: Live refresh tokens.
    :param denylist: Revoked access tokens.
    """

    def __init__(
        self,
        *,
        codec: TokenProvider,
        refresh_store: RefreshTokenStore,
        denylist: TokenDenylistStore,
    ) -> None:
        self.codec = codec
        self.refresh_store = refresh_store
        self.denylist = denylist

    def issue_pair(self, user) -> TokenPairOut:
        """Issue access + refresh tokens and record the refresh token."""
        access = self.codec.issue_access(user)
        refresh = self.codec.issue_refresh(user)
        self.refresh_store.save(refresh, str(user.id), ttl_seconds=self.codec.refresh_ttl_seconds)
        return TokenPairOut(access_token=access, refresh_token=refresh)

    def validate_refresh(self, token: str) -> str | None:
        """Return the user id recorded for ``token``, or ``None`` if unknown."""
        return self.refresh_store.get_user_id(token)

    def invalidate_refresh(self, token: str) -> bool:
        """
        Remove ``token`` from the registry.

        :returns: ``True`` only for the caller that actually removed it, so
            concurrent rotations of one token cannot both succeed.
        """
        return self.refresh_store.delete(token)

    def blacklist(self, access_token: str) -> bool:
        """
        Revoke ``access_token`` until its natural expiry.

        The TTL is read from the token's unverified ``exp`` claim. Nothing is
        stored when the token is already expired or cannot be decoded.

        :returns: ``True`` when an entry was written.
        """
        expires_at = self.codec.read_expiry_unverified(access_token)
        if expires_at is None:
            log.warning("Blacklist skipped: token has no readable expiry")
            return False
        remaining = (expires_at - datetime.now(UTC)).total_seconds()
        if remaining <= 0:
            return False
        self.denylist.revoke(access_token, ttl_seconds=math.ceil(remaining))
        return True

    def is_blacklisted(self, access_token: str) -> bool:
        return self.denylist.is_revoked(access_token)
