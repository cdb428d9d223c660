"""
ecommerce_auth.services._shared.ports
=====================================

*Ports* (hexagonal interfaces) for the session-token infrastructure.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider`, signing and verifying access/refresh tokens.
- :mod:`denylist_store`:
    :class:`~.TokenDenylistStore`, access tokens revoked before expiry.
- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore`, live refresh tokens and their owners.
- :mod:`email_sender`:
    :class:`~.EmailSender`, transactional mail for the auth flows.

Concrete adapters (Redis, PyJWT, SMTP) live under ``ecommerce_auth.infra``;
the in-memory implementations here back the unit tests.
"""

from __future__ import annotations

from .denylist_store import InMemoryDenylistStore, TokenDenylistStore
from .email_sender import EmailSender, InMemoryEmailSender, OutgoingEmail
from .refresh_token_store import InMemoryRefreshTokenStore, RefreshTokenStore
from .token_provider import AccessClaims, InvalidTokenError, RefreshClaims, TokenProvider

__all__ = [
    "AccessClaims",
    "EmailSender",
    "InMemoryDenylistStore",
    "InMemoryEmailSender",
    "InMemoryRefreshTokenStore",
    "InvalidTokenError",
    "OutgoingEmail",
    "RefreshClaims",
    "RefreshTokenStore",
    "TokenDenylistStore",
    "TokenProvider",
]
