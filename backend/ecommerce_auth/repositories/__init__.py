"""Repositories: persistence-only access to the credential store."""

from __future__ import annotations

from ecommerce_auth.repositories.base import BaseRepository, Page, Pagination, count_rows
from ecommerce_auth.repositories.user import UserRepository

__all__ = ["BaseRepository", "Page", "Pagination", "UserRepository", "count_rows"]
