"""Integration tests for profile and admin user endpoints."""

from __future__ import annotations

import pytest

from ecommerce_auth.models.user import User, UserRole
from tests.factories.user import AdminFactory, UserFactory
from tests.helpers.auth import issue_tokens, register
from tests.helpers.http import bearer, build_url


@pytest.fixture()
def admin_headers(container) -> dict[str, str]:
    access, _ = issue_tokens(container, AdminFactory(email="root@example.com"))
    return bearer(access)


@pytest.fixture()
def customer(container):
    user = UserFactory(email="carl@example.com", first_name="Carl", last_name="Jones")
    access, _ = issue_tokens(container, user)
    return user, bearer(access)


class TestProfile:
    def test_registered_user_reads_profile(self, client) -> None:
        access = register(client).get_json()["data"]["tokens"]["accessToken"]

        resp = client.get(build_url("/users/profile"), headers=bearer(access))

        assert resp.status_code == 200
        data = resp.get_json()["data"]["user"]
        assert data["email"] == "alice@example.com"
        assert "password" not in data
        assert "passwordHash" not in data
        assert "emailVerificationToken" not in data

    def test_profile_requires_token(self, client) -> None:
        resp = client.get(build_url("/users/profile"))
        assert resp.status_code == 401
        assert resp.get_json()["error"]["code"] == "NO_TOKEN"

    def test_profile_rejects_forged_token(self, client) -> None:
        resp = client.get(build_url("/users/profile"), headers=bearer("forged.token.value"))
        assert resp.status_code == 401
        assert resp.get_json()["error"]["code"] == "INVALID_TOKEN"

    def test_update_profile(self, client, customer) -> None:
        _, headers = customer

        resp = client.put(build_url("/users/profile"), json={"lastName": "Smith"}, headers=headers)

        assert resp.status_code == 200
        data = resp.get_json()["data"]["user"]
        assert (data["firstName"], data["lastName"]) == ("Carl", "Smith")

    def test_update_profile_validation(self, client, customer) -> None:
        _, headers = customer
        resp = client.put(build_url("/users/profile"), json={"firstName": ""}, headers=headers)
        assert resp.status_code == 400
        assert "firstName" in resp.get_json()["error"]["details"]

    def test_update_profile_rejects_blank_name(self, client, customer, session) -> None:
        user, headers = customer

        resp = client.put(build_url("/users/profile"), json={"firstName": "   "}, headers=headers)

        assert resp.status_code == 400
        assert resp.get_json()["error"]["code"] == "VALIDATION_ERROR"
        assert "firstName" in resp.get_json()["error"]["details"]
        assert session.get(User, user.id).first_name == "Carl"

    def test_delete_profile_deactivates(self, client, customer, session) -> None:
        user, headers = customer

        resp = client.delete(build_url("/users/profile"), headers=headers)

        assert resp.status_code == 200
        assert session.get(User, user.id).is_active is False


class TestAdminRoutes:
    def test_customer_is_forbidden(self, client, customer) -> None:
        _, headers = customer
        resp = client.get(build_url("/users"), headers=headers)
        assert resp.status_code == 403
        assert resp.get_json()["error"]["code"] == "FORBIDDEN"

    def test_list_users(self, client, admin_headers) -> None:
        for _ in range(3):
            UserFactory()

        resp = client.get(build_url("/users", page=1, limit=2), headers=admin_headers)

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert set(data) == {"users", "pagination"}
        assert len(data["users"]) == 2
        assert data["pagination"] == {"page": 1, "limit": 2, "total": 4, "pages": 2}

    def test_list_users_filters(self, client, admin_headers) -> None:
        UserFactory(role=UserRole.VENDOR)
        UserFactory(is_active=False)

        vendors = client.get(build_url("/users", role="vendor"), headers=admin_headers)
        inactive = client.get(build_url("/users", isActive=False), headers=admin_headers)

        assert [u["role"] for u in vendors.get_json()["data"]["users"]] == ["vendor"]
        assert [u["isActive"] for u in inactive.get_json()["data"]["users"]] == [False]

    def test_list_users_clamps_limit(self, client, admin_headers) -> None:
        resp = client.get(build_url("/users", limit=500), headers=admin_headers)
        assert resp.get_json()["data"]["pagination"]["limit"] == 100

    def test_get_user(self, client, admin_headers, customer) -> None:
        user, _ = customer

        found = client.get(build_url(f"/users/{user.id}"), headers=admin_headers)
        missing = client.get(build_url("/users/9999"), headers=admin_headers)

        assert found.get_json()["data"]["user"]["email"] == "carl@example.com"
        assert missing.status_code == 404
        assert missing.get_json()["error"]["code"] == "USER_NOT_FOUND"

    def test_update_status(self, client, admin_headers, customer) -> None:
        user, headers = customer

        resp = client.put(
            build_url(f"/users/{user.id}/status"), json={"isActive": False}, headers=admin_headers
        )

        assert resp.status_code == 200
        assert resp.get_json()["message"] == "User deactivated successfully"
        assert resp.get_json()["data"]["user"]["isActive"] is False

    def test_update_status_requires_flag(self, client, admin_headers, customer) -> None:
        user, _ = customer
        resp = client.put(build_url(f"/users/{user.id}/status"), json={}, headers=admin_headers)
        assert resp.status_code == 400

    def test_delete_user(self, client, admin_headers, customer, session) -> None:
        user, _ = customer

        resp = client.delete(build_url(f"/users/{user.id}"), headers=admin_headers)

        assert resp.status_code == 200
        assert session.get(User, user.id) is None

    def test_admin_cannot_delete_self(self, client, container) -> None:
        admin = AdminFactory()
        access, _ = issue_tokens(container, admin)

        resp = client.delete(build_url(f"/users/{admin.id}"), headers=bearer(access))

        assert resp.status_code == 400
        assert resp.get_json()["error"]["code"] == "CANNOT_DELETE_SELF"
