"""Tests for registration, login and bearer authentication."""

from uuid import uuid4

import pytest

from src.app.core.security import create_access_token
from tests.factories import DEFAULT_TEST_PASSWORD

pytestmark = pytest.mark.integration


async def test_register_login_and_me(client, register):
    user, headers = await register("alice")

    assert user["username"] == "alice"
    assert "hashed_password" not in user
    response = await client.get("/api/v1/auth/me", headers=headers)
    assert response.json()["id"] == user["id"]


async def test_duplicate_username_or_email_conflicts(client, register):
    await register("bob")

    for payload in (
        {"username": "bob", "email": "other@example.com"},
        {"username": "bobby", "email": "bob@example.com"},
    ):
        response = await client.post(
            "/api/v1/auth/register", json={**payload, "password": DEFAULT_TEST_PASSWORD}
        )
        assert response.status_code == 409


async def test_weak_password_is_rejected(client):
    response = await client.post(
        "/api/v1/auth/register",
        json={"username": "carol", "email": "carol@example.com", "password": "password123"},
    )

    assert response.status_code == 422


async def test_wrong_password_and_unknown_email_look_the_same(client, register):
    await register("dave")

    wrong = await client.post(
        "/api/v1/auth/login", json={"email": "dave@example.com", "password": "not-the-password"}
    )
    unknown = await client.post(
        "/api/v1/auth/login", json={"email": "nobody@example.com", "password": "not-the-password"}
    )

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json()["detail"] == unknown.json()["detail"]


@pytest.mark.parametrize(
    "authorization",
    [None, "Token abc", "Bearer not-a-jwt"],
)
async def test_protected_endpoints_need_a_valid_token(client, authorization):
    headers = {"Authorization": authorization} if authorization else {}

    response = await client.get("/api/v1/auth/me", headers=headers)

    assert response.status_code == 401


async def test_token_for_unknown_user_is_rejected(client):
    headers = {"Authorization": f"Bearer {create_access_token(uuid4())}"}

    assert (await client.get("/api/v1/auth/me", headers=headers)).status_code == 401


async def test_optional_auth_rejects_invalid_token(client, register):
    _, headers = await register()
    created = await client.post(
        "/api/v1/layouts/generate",
        json={"description": "public page", "is_public": True},
        headers=headers,
    )
    layout_id = created.json()["id"]

    anonymous = await client.get(f"/api/v1/layouts/{layout_id}")
    invalid = await client.get(
        f"/api/v1/layouts/{layout_id}", headers={"Authorization": "Bearer garbage"}
    )

    assert anonymous.status_code == 200
    assert invalid.status_code == 401
