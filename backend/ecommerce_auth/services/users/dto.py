from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Partial profile update; ``None`` fields are left untouched.

    :param first_name: New given name.
    :type first_name: str | None
    :param last_name: New family name.
    :type last_name: str | None
    """

    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True, slots=True)
class UserListIn:
    """
    Admin listing filters.

    :param page: 1-based page (default 1).
    :param limit: Page size (default 10, clamped to 1..100).
    :param role: Only users with this role.
    :param is_active: Only active or only inactive users.
    """

    page: int = 1
    limit: int = 10
    role: str | None = None
    is_active: bool | None = None
