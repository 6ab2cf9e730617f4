"""API tests for sign-in and the current user endpoint."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_login_returns_token_and_user(client: AsyncClient, make_user):
    user = await make_user("BD", email="asha@medops.test", password="right-password")

    response = await client.post("/api/v1/auth/login", json={"email": "asha@medops.test", "password": "right-password"})

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["id"] == user.id
    assert "password_hash" not in data["user"]

    me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "asha@medops.test"


async def test_login_email_is_case_insensitive(client: AsyncClient, make_user):
    await make_user("BD", email="asha@medops.test", password="right-password")
    payload = {"email": " Asha@MedOps.test ", "password": "right-password"}
    response = await client.post("/api/v1/auth/login", json=payload)
    assert response.status_code == 200


async def test_wrong_password(client: AsyncClient, make_user):
    await make_user("BD", email="asha@medops.test", password="right-password")

    response = await client.post("/api/v1/auth/login", json={"email": "asha@medops.test", "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid email or password", "error_type": "AuthenticationError"}


async def test_unknown_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={"email": "ghost@medops.test", "password": "whatever"})
    assert response.status_code == 401


async def test_inactive_account(client: AsyncClient, make_user):
    await make_user("BD", email="gone@medops.test", password="right-password", is_active=False)
    response = await client.post("/api/v1/auth/login", json={"email": "gone@medops.test", "password": "right-password"})
    assert response.status_code == 401
    assert response.json()["detail"] == "User account is inactive"


async def test_me_requires_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
