"""
Alpha Tower Backend — Products API Integration Tests
======================================================

What:  /products routes end to end: routing, auth gate, validation, status
       codes and error bodies, over the per-test SQLite database.
"""

from uuid import uuid4

import pytest

WIDGET = {"name": "Widget", "description": "A widget", "price": 9.99, "quantity": 5}


async def create_product(client, headers, **overrides):
    body = {**WIDGET, **overrides}
    response = await client.post("/products", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestProductsAuth:

    @pytest.mark.asyncio
    async def test_missing_token(self, test_client):
        response = await test_client.get("/products")

        assert response.status_code == 401
        assert response.json() == {"status": "error", "message": "JWT Token is missing."}

    @pytest.mark.asyncio
    async def test_invalid_token(self, test_client):
        response = await test_client.get(
            "/products", headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid JWT Token."

    @pytest.mark.asyncio
    async def test_create_without_token_persists_nothing(self, test_client, auth_headers):
        response = await test_client.post("/products", json=WIDGET)
        assert response.status_code == 401

        listing = await test_client.get("/products", headers=auth_headers)
        assert listing.json() == []


class TestProductsCrud:

    @pytest.mark.asyncio
    async def test_create_returns_product(self, test_client, auth_headers):
        product = await create_product(test_client, auth_headers)

        assert product["id"]
        assert product["name"] == "Widget"
        assert product["description"] == "A widget"
        assert product["price"] == 9.99
        assert product["quantity"] == 5

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, test_client, auth_headers):
        await create_product(test_client, auth_headers)

        response = await test_client.post(
            "/products", json={**WIDGET, "price": 1, "quantity": 1}, headers=auth_headers,
        )

        assert response.status_code == 409
        assert response.json() == {
            "status": "error",
            "message": "There is already one product with this name",
        }

    @pytest.mark.asyncio
    async def test_list_and_show(self, test_client, auth_headers):
        product = await create_product(test_client, auth_headers)

        listing = await test_client.get("/products", headers=auth_headers)
        shown = await test_client.get(f"/products/{product['id']}", headers=auth_headers)

        assert [p["id"] for p in listing.json()] == [product["id"]]
        assert shown.status_code == 200
        assert shown.json()["name"] == "Widget"

    @pytest.mark.asyncio
    async def test_update_overwrites_and_clears_description(self, test_client, auth_headers):
        product = await create_product(test_client, auth_headers)

        response = await test_client.put(
            f"/products/{product['id']}",
            json={"name": "Widget2", "price": 19.9, "quantity": 2},
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == product["id"]
        assert body["name"] == "Widget2"
        assert body["description"] is None
        assert body["price"] == 19.9

    @pytest.mark.asyncio
    async def test_update_keeping_own_name(self, test_client, auth_headers):
        product = await create_product(test_client, auth_headers)

        response = await test_client.put(
            f"/products/{product['id']}", json={**WIDGET, "quantity": 7}, headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["quantity"] == 7

    @pytest.mark.asyncio
    async def test_update_to_taken_name(self, test_client, auth_headers):
        await create_product(test_client, auth_headers, name="Taken")
        product = await create_product(test_client, auth_headers, name="Mine")

        response = await test_client.put(
            f"/products/{product['id']}", json={**WIDGET, "name": "Taken"}, headers=auth_headers,
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_delete_then_not_found(self, test_client, auth_headers):
        product = await create_product(test_client, auth_headers)
        url = f"/products/{product['id']}"

        deleted = await test_client.delete(url, headers=auth_headers)
        assert deleted.status_code == 204
        assert deleted.content == b""

        assert (await test_client.get(url, headers=auth_headers)).status_code == 404
        assert (await test_client.delete(url, headers=auth_headers)).status_code == 404


class TestProductsValidation:

    @pytest.mark.asyncio
    async def test_unknown_id(self, test_client, auth_headers):
        response = await test_client.get(f"/products/{uuid4()}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"status": "error", "message": "Product not found."}

    @pytest.mark.asyncio
    async def test_malformed_id(self, test_client, auth_headers):
        response = await test_client.get("/products/not-a-uuid", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["status"] == "error"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"price": 1, "quantity": 1},
        {"name": "", "price": 1, "quantity": 1},
        {"name": "Widget", "price": -1, "quantity": 1},
        {"name": "Widget", "price": 1, "quantity": -3},
        {"name": "Widget", "price": "abc", "quantity": 1},
    ])
    async def test_invalid_body(self, test_client, auth_headers, body):
        response = await test_client.post("/products", json=body, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["status"] == "error"

    @pytest.mark.asyncio
    async def test_price_rounded_to_cents(self, test_client, auth_headers):
        product = await create_product(test_client, auth_headers, price="2.345")

        assert product["price"] == 2.35

    @pytest.mark.asyncio
    @pytest.mark.parametrize("price,expected", [
        (0.30000000000000004, 0.3),
        (19.990000000000002, 19.99),
        ("9.9999999999999", 10.0),
    ])
    async def test_float_noise_is_rounded_not_rejected(
        self, test_client, auth_headers, price, expected,
    ):
        product = await create_product(test_client, auth_headers, price=price)

        assert product["price"] == expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("price", ["99999999.995", "1e30"])
    async def test_price_above_column_range(self, test_client, auth_headers, price):
        response = await test_client.post(
            "/products", json={**WIDGET, "price": price}, headers=auth_headers,
        )

        assert response.status_code == 400
        assert "price" in response.json()["message"]
