"""
Integration tests for authentication endpoints.
"""

from httpx import AsyncClient

from marketplace.models.user import User
from tests.conftest import TEST_PASSWORD, auth_headers


class TestRegistration:
    """Signup flow."""

    async def test_register_returns_session(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/register", json={
            "name": "New Seller",
            "email": "New.Seller@Example.com",
            "phone": "9876543210",
            "password": "strongpass1",
            "user_type": "seller",
        })

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["user_type"] == "seller"
        assert body["data"]["user"]["email"] == "new.seller@example.com"
        assert body["data"]["access_token"]
        assert body["data"]["refresh_token"]

    async def test_register_duplicate_email(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.post("/api/auth/register", json={
            "name": "Someone Else",
            "email": test_seller.email,
            "password": "strongpass1",
        })

        assert response.status_code == 409
        assert response.json()["success"] is False

    async def test_register_admin_not_allowed(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/register", json={
            "name": "Sneaky",
            "email": "sneaky@example.com",
            "password": "strongpass1",
            "user_type": "admin",
        })

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_register_short_password(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/register", json={
            "name": "Short",
            "email": "short@example.com",
            "password": "abc",
        })

        assert response.status_code == 422


class TestLogin:
    """Login, refresh and profile."""

    async def test_login_success(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.post("/api/auth/login", json={
            "email": test_seller.email,
            "password": TEST_PASSWORD,
        })

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token_type"] == "bearer"
        assert data["user"]["id"] == str(test_seller.id)

    async def test_login_wrong_password(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.post("/api/auth/login", json={
            "email": test_seller.email,
            "password": "wrong-password",
        })

        assert response.status_code == 401
        assert response.json()["success"] is False

    async def test_refresh(self, async_client: AsyncClient, test_seller: User):
        login = await async_client.post("/api/auth/login", json={
            "email": test_seller.email,
            "password": TEST_PASSWORD,
        })
        refresh_token = login.json()["data"]["refresh_token"]

        response = await async_client.post("/api/auth/refresh", json={"refresh_token": refresh_token})

        assert response.status_code == 200
        assert response.json()["data"]["user"]["email"] == test_seller.email

    async def test_refresh_rejects_access_token(self, async_client: AsyncClient, test_seller: User):
        access_token = auth_headers(test_seller)["Authorization"].split()[1]

        response = await async_client.post("/api/auth/refresh", json={"refresh_token": access_token})

        assert response.status_code == 401

    async def test_me(self, async_client: AsyncClient, test_buyer: User):
        response = await async_client.get("/api/auth/me", headers=auth_headers(test_buyer))

        assert response.status_code == 200
        assert response.json()["data"]["user_type"] == "buyer"

    async def test_me_requires_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/auth/me")

        assert response.status_code == 401

    async def test_update_profile(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.put(
            "/api/auth/me", json={"name": "Renamed Seller"}, headers=auth_headers(test_seller)
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Renamed Seller"
