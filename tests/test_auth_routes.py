"""
tests/test_auth_routes.py -- Integration tests for registration, login and sessions.

Coverage:
  - /api/auth/check for anonymous and signed-in clients
  - registration: success opens a session, duplicates and bad input are 400
  - login by username or email, generic 401 on failure, logout
  - tampered cookies resolve to anonymous
  - /api/user/profile requires a session and reads fresh data
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from arboretum.core.config import get_settings
from helpers import current_user, login, login_admin, register


def _usernames(client: TestClient) -> list[str]:
    login_admin(client)
    resp = client.get("/api/admin/users")
    assert resp.status_code == 200, resp.text
    return [user["username"] for user in resp.json()["users"]]


class TestAuthCheck:
    def test_anonymous(self, client: TestClient) -> None:
        resp = client.get("/api/auth/check")
        assert resp.status_code == 200
        assert resp.json() == {"loggedIn": False, "user": None}

    def test_after_registration(self, client: TestClient) -> None:
        register(client, "alice")
        body = client.get("/api/auth/check").json()
        assert body["loggedIn"] is True
        assert body["user"]["username"] == "alice"
        assert body["user"]["role"] == "user"
        assert body["user"]["avatar"] is None
        assert "password" not in body["user"]


class TestRegister:
    def test_register_then_duplicate_username_conflicts(self, client: TestClient) -> None:
        """Registering alice succeeds once; a second attempt with the same username is a 400."""
        first = register(client, "alice", email="a@x.com")
        assert first.status_code == 200, first.text
        assert first.json()["success"] is True
        assert first.json()["message"]

        second = register(client, "alice", email="other@x.com")
        assert second.status_code == 400
        assert "error" in second.json()

        assert _usernames(client).count("alice") == 1

    def test_duplicate_email_conflicts(self, client: TestClient) -> None:
        assert register(client, "alice", email="a@x.com").status_code == 200
        resp = register(client, "alice2", email="a@x.com")
        assert resp.status_code == 400
        assert "alice2" not in _usernames(client)

    def test_username_matching_is_case_sensitive(self, client: TestClient) -> None:
        assert register(client, "alice").status_code == 200
        assert register(client, "Alice").status_code == 200

    def test_short_password_is_rejected(self, client: TestClient) -> None:
        resp = register(client, "alice", password="12345")
        assert resp.status_code == 400
        assert "password" in resp.json()["error"]

    def test_missing_or_blank_fields_are_rejected(self, client: TestClient) -> None:
        resp = client.post("/api/auth/register", json={"username": "alice", "password": "secret1"})
        assert resp.status_code == 400
        resp = client.post("/api/auth/register", json={"username": "  ", "email": "a@x.com", "password": "secret1"})
        assert resp.status_code == 400

    def test_session_cookie_is_http_only(self, client: TestClient) -> None:
        resp = register(client, "alice")
        cookie = resp.headers["set-cookie"]
        assert get_settings().session_cookie_name in cookie
        assert "httponly" in cookie.lower()
        assert "samesite=strict" in cookie.lower()


class TestLogin:
    def test_login_by_username_and_by_email(self, client: TestClient) -> None:
        register(client, "alice", email="a@x.com")
        client.cookies.clear()

        assert login(client, "alice").status_code == 200
        assert current_user(client)["username"] == "alice"

        client.cookies.clear()
        assert login(client, "a@x.com").status_code == 200
        assert current_user(client)["username"] == "alice"

    def test_failures_are_indistinguishable(self, client: TestClient) -> None:
        register(client, "alice")
        client.cookies.clear()

        wrong_password = login(client, "alice", "not-the-password")
        unknown_user = login(client, "nobody", "secret1")
        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json()
        assert current_user(client) is None

    def test_login_replaces_the_previous_session(self, client: TestClient) -> None:
        register(client, "alice")
        register(client, "bob")
        login(client, "alice")
        assert current_user(client)["username"] == "alice"
        login(client, "bob")
        assert current_user(client)["username"] == "bob"

    def test_logout(self, client: TestClient) -> None:
        register(client, "alice")
        resp = client.post("/api/auth/logout")
        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert current_user(client) is None

    def test_logout_without_session_still_succeeds(self, client: TestClient) -> None:
        assert client.post("/api/auth/logout").status_code == 200

    def test_tampered_cookie_is_treated_as_anonymous(self, client: TestClient) -> None:
        register(client, "alice")
        name = get_settings().session_cookie_name
        value = client.cookies.get(name)
        client.cookies.clear()
        headers = {"Cookie": f"{name}={value[:-3]}abc"}
        assert client.get("/api/auth/check", headers=headers).json()["user"] is None
        assert client.get("/api/user/profile", headers=headers).status_code == 401


class TestProfile:
    def test_requires_session(self, client: TestClient) -> None:
        resp = client.get("/api/user/profile")
        assert resp.status_code == 401
        assert "error" in resp.json()

    def test_returns_stored_account(self, client: TestClient) -> None:
        register(client, "alice", email="a@x.com")
        resp = client.get("/api/user/profile")
        assert resp.status_code == 200
        user = resp.json()["user"]
        assert user["username"] == "alice"
        assert user["email"] == "a@x.com"
        assert user["role"] == "user"
        assert "password" not in user and "password_hash" not in user
