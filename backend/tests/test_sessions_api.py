"""
Alpha Tower Backend — Session, Health and Middleware Tests
============================================================

What:  POST /sessions login, GET / and GET /health, request-id propagation
       and the catch-all 500 handler.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from alpha_tower.security import decode_access_token


class TestSessions:

    @pytest.mark.asyncio
    async def test_login_returns_usable_token(self, test_client, user, password, settings):
        response = await test_client.post(
            "/sessions", json={"email": "ada@example.com", "password": password},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["id"] == user["id"]
        assert "password" not in body["user"]
        assert str(decode_access_token(body["token"], settings)) == user["id"]

        products = await test_client.get(
            "/products", headers={"Authorization": f"Bearer {body['token']}"},
        )
        assert products.status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email,secret", [
        ("ada@example.com", "wrong-pass"),
        ("nobody@example.com", "s3cret-pass"),
    ])
    async def test_bad_credentials(self, test_client, user, email, secret):
        response = await test_client.post("/sessions", json={"email": email, "password": secret})

        assert response.status_code == 401
        assert response.json() == {
            "status": "error",
            "message": "Incorrect email/password combination.",
        }

    @pytest.mark.asyncio
    async def test_malformed_authorization_header(self, test_client, auth_headers):
        token = auth_headers["Authorization"].split(" ", 1)[1]

        response = await test_client.get("/users", headers={"Authorization": f"Token {token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid JWT Token."


class TestIndexAndHealth:

    @pytest.mark.asyncio
    async def test_banner(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.json() == "Alpha Tower Sales System"

    @pytest.mark.asyncio
    async def test_health_connected(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_health_disconnected(self, app, test_client, monkeypatch):
        async def failing_ping():
            return False

        monkeypatch.setattr(app.state.database, "ping", failing_ping)

        response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_unknown_route(self, test_client):
        response = await test_client.get("/nothing-here")

        assert response.status_code == 404
        assert response.json()["status"] == "error"


class TestMiddleware:

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "abc12345"})

        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.get("/")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic_500(self, app, monkeypatch):
        async def exploding_ping():
            raise RuntimeError("secret internals")

        monkeypatch.setattr(app.state.database, "ping", exploding_ping)
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health")

        assert response.status_code == 500
        assert response.json() == {"status": "error", "message": "Internal server error"}
