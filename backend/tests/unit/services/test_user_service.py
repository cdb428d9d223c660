"""Unit tests for UserService."""

from __future__ import annotations

import pytest

from ecommerce_auth.models.user import User, UserRole
from ecommerce_auth.services._shared.errors import InvalidRequestError, NotFoundError
from ecommerce_auth.services.users.dto import ProfileUpdateIn, UserListIn
from ecommerce_auth.services.users.service import UserService
from tests.factories.user import AdminFactory, UserFactory


@pytest.fixture()
def service(app) -> UserService:
    return UserService()


class TestProfile:
    def test_get_profile(self, service):
        user = UserFactory(email="gina@example.com")
        out = service.get_profile(user.id)
        assert out.email == "gina@example.com"
        assert not hasattr(out, "password_hash")

    def test_get_profile_missing(self, service):
        with pytest.raises(NotFoundError) as exc:
            service.get_profile(404)
        assert exc.value.code == "USER_NOT_FOUND"

    def test_partial_update(self, service):
        user = UserFactory(first_name="Gina", last_name="Old")

        out = service.update_profile(user.id, ProfileUpdateIn(last_name="New"))

        assert out.first_name == "Gina"
        assert out.last_name == "New"

    def test_update_missing(self, service):
        with pytest.raises(NotFoundError):
            service.update_profile(404, ProfileUpdateIn(first_name="X"))

    def test_deactivate_is_soft_delete(self, service, session):
        user = UserFactory()

        service.deactivate_account(user.id)

        stored = session.get(User, user.id)
        assert stored is not None
        assert stored.is_active is False


class TestAdmin:
    def test_list_newest_first_with_meta(self, service):
        users = [UserFactory() for _ in range(5)]

        page = service.list_users(UserListIn(page=1, limit=2))

        assert [u.id for u in page.items] == [users[4].id, users[3].id]
        assert (page.meta.page, page.meta.limit, page.meta.total, page.meta.pages) == (1, 2, 5, 3)

        last = service.list_users(UserListIn(page=3, limit=2))
        assert [u.id for u in last.items] == [users[0].id]

    def test_list_filters(self, service):
        AdminFactory()
        UserFactory(role=UserRole.VENDOR)
        UserFactory(is_active=False)
        UserFactory()

        admins = service.list_users(UserListIn(role="admin"))
        inactive = service.list_users(UserListIn(is_active=False))
        active_customers = service.list_users(UserListIn(role="customer", is_active=True))

        assert [u.role for u in admins.items] == ["admin"]
        assert [u.is_active for u in inactive.items] == [False]
        assert active_customers.meta.total == 1

    def test_list_clamps_limit(self, service):
        page = service.list_users(UserListIn(limit=1000))
        assert page.meta.limit == 100

    def test_list_unknown_role(self, service):
        with pytest.raises(InvalidRequestError):
            service.list_users(UserListIn(role="root"))

    def test_update_status(self, service):
        user = UserFactory()

        assert service.update_user_status(user.id, is_active=False).is_active is False
        assert service.update_user_status(user.id, is_active=True).is_active is True

    def test_update_status_missing(self, service):
        with pytest.raises(NotFoundError):
            service.update_user_status(404, is_active=False)

    def test_delete_user(self, service, session):
        admin, victim = AdminFactory(), UserFactory()

        service.delete_user(admin.id, victim.id)

        assert session.get(User, victim.id) is None

    def test_cannot_delete_self(self, service):
        admin = AdminFactory()
        with pytest.raises(InvalidRequestError) as exc:
            service.delete_user(admin.id, admin.id)
        assert exc.value.code == "CANNOT_DELETE_SELF"

    def test_delete_missing(self, service):
        admin = AdminFactory()
        with pytest.raises(NotFoundError):
            service.delete_user(admin.id, 404)
