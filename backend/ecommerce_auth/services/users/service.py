from __future__ import annotations

import logging

from ecommerce_auth.models.user import UserRole
from ecommerce_auth.services._shared.base import BaseService
from ecommerce_auth.services._shared.dto import PageMeta, PageOut, UserOut
from ecommerce_auth.services._shared.errors import InvalidRequestError, NotFoundError
from ecommerce_auth.services.users.dto import ProfileUpdateIn, UserListIn

log = logging.getLogger(__name__)


class UserService(BaseService):
    """
    Profile self-service and admin user management.

    Role checks happen in the HTTP layer; this service trusts its caller.
    """

    # ------------------------------------------------------------------ #
    # Own profile
    # ------------------------------------------------------------------ #

    def get_profile(self, user_id: int) -> UserOut:
        return self.get_user(user_id)

    def update_profile(self, user_id: int, dto: ProfileUpdateIn) -> UserOut:
        """
        Update the provided names only.

        :raises NotFoundError: ``USER_NOT_FOUND``.
        """
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            uow.users.update(user, first_name=dto.first_name, last_name=dto.last_name)
            out = UserOut.from_model(user)

        log.info("Profile updated", extra={"user_id": user_id})
        return out

    def deactivate_account(self, user_id: int) -> None:
        """Soft delete: the row stays, the account can no longer log in."""
        self.update_user_status(user_id, is_active=False)

    # ------------------------------------------------------------------ #
    # Admin
    # ------------------------------------------------------------------ #

    def list_users(self, dto: UserListIn) -> PageOut[UserOut]:
        """
        Page through users newest first.

        :returns: Items plus ``{page, limit, total, pages}``.
        """
        pagination = self.ensure_pagination(page=dto.page, limit=dto.limit)
        try:
            role = UserRole(dto.role) if dto.role else None
        except ValueError as exc:
            raise InvalidRequestError(
                "Validation failed", details={"role": [f"Unknown role: {dto.role}"]}
            ) from exc

        with self.ro_uow() as uow:
            page = uow.users.paginate_newest(pagination, role=role, is_active=dto.is_active)
            items = [UserOut.from_model(u) for u in page.items]
            meta = PageMeta(page=page.page, limit=page.limit, total=page.total, pages=page.pages)
        return PageOut(items=items, meta=meta)

    def get_user(self, user_id: int) -> UserOut:
        """
        :raises NotFoundError: ``USER_NOT_FOUND``.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserOut.from_model(user)

    def update_user_status(self, user_id: int, *, is_active: bool) -> UserOut:
        """
        :raises NotFoundError: ``USER_NOT_FOUND``.
        """
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            uow.users.update(user, is_active=bool(is_active))
            out = UserOut.from_model(user)

        log.info("User status changed to active=%s", out.is_active, extra={"user_id": user_id})
        return out

    def delete_user(self, actor_id: int, user_id: int) -> None:
        """
        Hard delete ``user_id`` on behalf of ``actor_id``.

        :raises InvalidRequestError: ``CANNOT_DELETE_SELF``.
        :raises NotFoundError: ``USER_NOT_FOUND``.
        """
        if actor_id == user_id:
            raise InvalidRequestError("Cannot delete your own account", code="CANNOT_DELETE_SELF")
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            uow.users.delete(user)

        log.info("User deleted by admin %s", actor_id, extra={"user_id": user_id})
