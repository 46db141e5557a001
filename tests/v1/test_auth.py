# mypy: ignore-errors
# tests/v1/test_auth.py
"""Tests for authentication and account endpoints."""

from __future__ import annotations

from fastapi import status

from forum_core.core import security
from forum_core.services import SessionCodec


def _register_payload(username: str = "carol", password: str = "carol-pass", **overrides) -> dict:
    payload = {
        "username": username,
        "password": password,
        "confirm_password": password,
        "email": f"{username}@example.com",
        "bio": "new here",
    }
    payload.update(overrides)
    return payload


def _login(client, username: str, password: str):
    return client.post("/api/v1/auth/login", json={"username": username, "password": password})


def test_register_user_success(client, services) -> None:
    response = client.post("/api/v1/auth/register", json=_register_payload())
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["username"] == "carol"

    user = services.credentials.get_by_username("carol")
    assert user.id == data["id"]
    assert user.role == "user"
    assert user.bio == "new here"


def test_register_ignores_role_in_payload(client, services) -> None:
    response = client.post("/api/v1/auth/register", json=_register_payload(role="admin"))
    assert response.status_code == status.HTTP_201_CREATED
    assert services.credentials.get_by_username("carol").role == "user"


def test_register_duplicate_username(client, test_user) -> None:
    response = client.post("/api/v1/auth/register", json=_register_payload("alice"))
    assert response.status_code == status.HTTP_409_CONFLICT


def test_register_password_mismatch(client) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json=_register_payload(confirm_password="something-else"),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_register_blank_username(client) -> None:
    response = client.post("/api/v1/auth/register", json=_register_payload("   "))
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_login_sets_cookie_and_returns_token(client, services, test_user) -> None:
    response = _login(client, "alice", "alice-password")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["token_type"] == "bearer"

    claims = services.sessions.verify(data["access_token"])
    assert claims.username == "alice"
    assert claims.role == "user"
    assert claims.id == test_user.id
    assert response.cookies.get("auth_token") == data["access_token"]


def test_login_failures_are_indistinguishable(client, test_user) -> None:
    wrong_password = _login(client, "alice", "nope")
    unknown_user = _login(client, "nobody", "alice-password")

    assert wrong_password.status_code == status.HTTP_401_UNAUTHORIZED
    assert unknown_user.status_code == status.HTTP_401_UNAUTHORIZED
    assert wrong_password.json() == unknown_user.json()
    assert wrong_password.headers["WWW-Authenticate"] == "Bearer"


def test_me_with_cookie_session(client, test_user) -> None:
    _login(client, "alice", "alice-password")

    response = client.get("/api/v1/auth/me")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["username"] == "alice"
    assert data["email_hash"] == security.email_hash("alice@example.com")
    assert data["avatar_url"].endswith(f"{data['email_hash']}?d=identicon")
    assert "password_hash" not in data


def test_me_with_bearer_token(client, auth_token) -> None:
    response = client.get("/api/v1/auth/me", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["username"] == "alice"


def test_me_requires_authentication(client) -> None:
    assert client.get("/api/v1/auth/me").status_code == status.HTTP_401_UNAUTHORIZED


def test_me_rejects_foreign_signature(client, test_user) -> None:
    forged = SessionCodec("some-other-secret").issue(test_user)
    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_update_profile(client, auth_token) -> None:
    response = client.patch(
        "/api/v1/auth/me",
        json={"bio": "updated bio", "email": "New@Example.com"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["bio"] == "updated bio"
    assert data["email"] == "New@Example.com"
    assert data["email_hash"] == security.email_hash("new@example.com")


def test_update_password_changes_login(client, auth_token) -> None:
    response = client.patch(
        "/api/v1/auth/me",
        json={"password": "fresh-password"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK

    assert _login(client, "alice", "alice-password").status_code == status.HTTP_401_UNAUTHORIZED
    assert _login(client, "alice", "fresh-password").status_code == status.HTTP_200_OK


def test_logout_clears_cookie(client, test_user) -> None:
    _login(client, "alice", "alice-password")
    assert client.get("/api/v1/auth/me").status_code == status.HTTP_200_OK

    response = client.post("/api/v1/auth/logout")
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get("/api/v1/auth/me").status_code == status.HTTP_401_UNAUTHORIZED


def test_update_profile_requires_authentication(client, test_user) -> None:
    anonymous = client.patch("/api/v1/auth/me", json={"bio": "x"})
    assert anonymous.status_code == status.HTTP_401_UNAUTHORIZED

    garbage = client.patch(
        "/api/v1/auth/me",
        json={"bio": "x"},
        headers={"Authorization": "Bearer garbage"},
    )
    assert garbage.status_code == status.HTTP_401_UNAUTHORIZED
