"""Integration tests for the authentication endpoints."""

from __future__ import annotations

from ecommerce_auth.core.config import TestingConfig
from ecommerce_auth.core.extensions import db
from ecommerce_auth.factory import create_app
from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tests.helpers.auth import issue_tokens, login, register
from tests.helpers.http import bearer, build_url


class _ExposeResetTokenConfig(TestingConfig):
    EXPOSE_RESET_TOKEN = True


def _error_code(resp) -> str:
    return resp.get_json()["error"]["code"]


class TestRegister:
    def test_register_returns_user_and_tokens(self, client, outbox) -> None:
        resp = register(client)

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        user = body["data"]["user"]
        assert user["email"] == "alice@example.com"
        assert user["firstName"] == "Alice"
        assert user["role"] == "customer"
        assert user["isEmailVerified"] is False
        assert {"password", "passwordHash", "password_hash"}.isdisjoint(user)
        assert set(body["data"]["tokens"]) == {"accessToken", "refreshToken"}
        assert outbox.last("verification")["to"] == "alice@example.com"

    def test_register_twice_conflicts(self, client) -> None:
        assert register(client).status_code == 201

        resp = register(client, email="ALICE@example.com")

        assert resp.status_code == 400
        assert _error_code(resp) == "EMAIL_EXISTS"

    def test_register_validation(self, client) -> None:
        resp = register(client, email="not-an-email", password="123")

        assert resp.status_code == 400
        error = resp.get_json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert set(error["details"]) == {"email", "password"}

    def test_register_rejects_blank_names(self, client) -> None:
        resp = register(client, firstName="   ", lastName="\t")

        assert resp.status_code == 400
        error = resp.get_json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert set(error["details"]) == {"firstName", "lastName"}

    def test_register_rejects_dotless_email_domain(self, client) -> None:
        resp = register(client, email="bob@localhost")

        assert resp.status_code == 400
        assert _error_code(resp) == "VALIDATION_ERROR"
        assert "email" in resp.get_json()["error"]["details"]

    def test_register_rejects_unknown_role(self, client) -> None:
        resp = register(client, role="superuser")
        assert resp.status_code == 400
        assert "role" in resp.get_json()["error"]["details"]

    def test_register_strips_unknown_fields(self, client) -> None:
        resp = register(client, isActive=False, isAdmin=True)
        assert resp.status_code == 201
        assert resp.get_json()["data"]["user"]["isActive"] is True


class TestLogin:
    def test_login(self, client) -> None:
        UserFactory(email="bob@example.com")

        resp = login(client, "bob@example.com", DEFAULT_PASSWORD)

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["user"]["email"] == "bob@example.com"
        assert data["user"]["lastLogin"] is not None
        assert data["tokens"]["accessToken"]

    def test_login_wrong_password(self, client) -> None:
        UserFactory(email="bob@example.com")
        resp = login(client, "bob@example.com", "wrong-password")
        assert resp.status_code == 401
        assert _error_code(resp) == "INVALID_CREDENTIALS"

    def test_login_inactive(self, client) -> None:
        UserFactory(email="bob@example.com", is_active=False)

        resp = login(client, "bob@example.com", DEFAULT_PASSWORD)
        assert resp.status_code == 403
        assert _error_code(resp) == "ACCOUNT_DEACTIVATED"

        resp = login(client, "bob@example.com", "wrong-password")
        assert resp.status_code == 401
        assert _error_code(resp) == "INVALID_CREDENTIALS"


class TestRefresh:
    def test_refresh_is_single_use(self, client) -> None:
        tokens = register(client).get_json()["data"]["tokens"]
        url = build_url("/auth/refresh")

        first = client.post(url, json={"refreshToken": tokens["refreshToken"]})
        assert first.status_code == 200
        new_tokens = first.get_json()["data"]["tokens"]
        assert new_tokens["refreshToken"] != tokens["refreshToken"]

        replay = client.post(url, json={"refreshToken": tokens["refreshToken"]})
        assert replay.status_code == 401
        assert _error_code(replay) == "INVALID_REFRESH_TOKEN"

        again = client.post(url, json={"refreshToken": new_tokens["refreshToken"]})
        assert again.status_code == 200

    def test_refresh_requires_token(self, client) -> None:
        resp = client.post(build_url("/auth/refresh"), json={})
        assert resp.status_code == 400
        assert _error_code(resp) == "VALIDATION_ERROR"


class TestLogout:
    def test_logout_revokes_access_token(self, client) -> None:
        tokens = register(client).get_json()["data"]["tokens"]
        headers = bearer(tokens["accessToken"])

        assert client.get(build_url("/users/profile"), headers=headers).status_code == 200

        resp = client.post(
            build_url("/auth/logout"),
            json={"refreshToken": tokens["refreshToken"]},
            headers=headers,
        )
        assert resp.status_code == 200
        assert resp.get_json() == {"success": True, "message": "Logged out successfully"}

        after = client.get(build_url("/users/profile"), headers=headers)
        assert after.status_code == 401
        assert _error_code(after) == "TOKEN_REVOKED"

        refresh = client.post(
            build_url("/auth/refresh"), json={"refreshToken": tokens["refreshToken"]}
        )
        assert _error_code(refresh) == "INVALID_REFRESH_TOKEN"

    def test_logout_requires_token(self, client) -> None:
        resp = client.post(build_url("/auth/logout"))
        assert resp.status_code == 401
        assert _error_code(resp) == "NO_TOKEN"

    def test_blacklist_entry_expires_with_token(self, client, container, redis_client) -> None:
        user = UserFactory()
        access, _ = issue_tokens(container, user)

        client.post(build_url("/auth/logout"), headers=bearer(access))

        ttl = redis_client.ttl(f"blacklist:{access}")
        assert 0 < ttl <= 15 * 60


class TestPasswordFlows:
    def test_forgot_password_is_generic(self, client, outbox) -> None:
        UserFactory(email="erin@example.com")
        url = build_url("/auth/forgot-password")

        known = client.post(url, json={"email": "erin@example.com"}).get_json()
        unknown = client.post(url, json={"email": "ghost@example.com"}).get_json()

        assert known == unknown == {
            "success": True,
            "message": "If the email exists, a reset link has been sent",
        }
        assert [m["to"] for m in outbox.outbox] == ["erin@example.com"]

    def test_forgot_password_echoes_token_when_enabled(self, redis_client, outbox) -> None:
        app = create_app(_ExposeResetTokenConfig, redis_client=redis_client, email_sender=outbox)
        with app.app_context():
            db.create_all()
            try:
                UserFactory(email="erin@example.com")
                body = (
                    app.test_client()
                    .post(build_url("/auth/forgot-password"), json={"email": "erin@example.com"})
                    .get_json()
                )
            finally:
                db.session.remove()
                db.drop_all()

        assert body["data"]["resetToken"] == outbox.last("password_reset")["token"]

    def test_reset_password(self, client, outbox) -> None:
        UserFactory(email="erin@example.com")
        client.post(build_url("/auth/forgot-password"), json={"email": "erin@example.com"})
        token = outbox.last("password_reset")["token"]
        url = build_url("/auth/reset-password")

        resp = client.post(url, json={"token": token, "password": "brand-new-pass"})
        assert resp.status_code == 200
        assert login(client, "erin@example.com", "brand-new-pass").status_code == 200

        replay = client.post(url, json={"token": token, "password": "other-pass"})
        assert replay.status_code == 400
        assert _error_code(replay) == "INVALID_TOKEN"

    def test_reset_password_expired(self, client, outbox, freeze_time) -> None:
        UserFactory(email="erin@example.com")
        with freeze_time("2024-01-01 09:00:00"):
            client.post(build_url("/auth/forgot-password"), json={"email": "erin@example.com"})
        token = outbox.last("password_reset")["token"]

        with freeze_time("2024-01-01 10:00:01"):
            resp = client.post(
                build_url("/auth/reset-password"), json={"token": token, "password": "new-pass"}
            )
        assert resp.status_code == 400
        assert _error_code(resp) == "INVALID_TOKEN"

    def test_change_password(self, client, container) -> None:
        user = UserFactory(email="gus@example.com")
        access, _ = issue_tokens(container, user)
        url = build_url("/auth/change-password")

        wrong = client.post(
            url,
            json={"currentPassword": "nope", "newPassword": "another-pass"},
            headers=bearer(access),
        )
        assert wrong.status_code == 401
        assert _error_code(wrong) == "INVALID_PASSWORD"

        ok = client.post(
            url,
            json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "another-pass"},
            headers=bearer(access),
        )
        assert ok.status_code == 200
        assert login(client, "gus@example.com", "another-pass").status_code == 200


def test_verify_email(client, outbox) -> None:
    register(client)
    token = outbox.last("verification")["token"]

    resp = client.get(build_url(f"/auth/verify-email/{token}"))
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Email verified successfully"
    assert outbox.last("welcome")["to"] == "alice@example.com"

    replay = client.get(build_url(f"/auth/verify-email/{token}"))
    assert replay.status_code == 400
    assert _error_code(replay) == "INVALID_TOKEN"
