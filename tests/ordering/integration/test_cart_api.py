"""Integration tests for the cart endpoints."""

import pytest


@pytest.fixture()
def shopper(make_user):
    return make_user()


@pytest.fixture()
def headers(shopper, auth_headers):
    return auth_headers(shopper)


class TestCartApi:
    def test_requires_authentication(self, client):
        assert client.get("/cart").status_code == 401

    def test_no_cart_yet(self, client, headers):
        response = client.get("/cart", headers=headers)
        assert response.status_code == 404

    def test_add_and_view(self, client, headers, make_product):
        product = make_product(price=30.0)
        response = client.post(
            "/cart/add",
            json={"product_id": str(product.id), "size": 10, "quantity": 2},
            headers=headers,
        )
        assert response.status_code == 201
        cart = response.json()
        assert cart["total"] == 60.0
        assert cart["items"][0]["size"] == "10"
        assert cart["items"][0]["line_total"] == 60.0

        assert client.get("/cart", headers=headers).json()["id"] == cart["id"]

    def test_adding_same_line_merges(self, client, headers, make_product):
        product = make_product()
        line = {"product_id": str(product.id), "size": "9", "quantity": 1}
        client.post("/cart/add", json=line, headers=headers)
        cart = client.post("/cart/add", json=line, headers=headers).json()
        assert len(cart["items"]) == 1
        assert cart["items"][0]["quantity"] == 2

    def test_adding_beyond_stock_conflicts(self, client, headers, make_product):
        product = make_product(quantity=1)
        response = client.post(
            "/cart/add",
            json={"product_id": str(product.id), "size": "9", "quantity": 2},
            headers=headers,
        )
        assert response.status_code == 409

    def test_unavailable_size(self, client, headers, make_product):
        product = make_product(sizes=["9"])
        response = client.post(
            "/cart/add",
            json={"product_id": str(product.id), "size": "12", "quantity": 1},
            headers=headers,
        )
        assert response.status_code == 400

    def test_update_and_remove_line(self, client, headers, make_product):
        product = make_product(price=10.0)
        cart = client.post(
            "/cart/add",
            json={"product_id": str(product.id), "size": "9", "quantity": 1},
            headers=headers,
        ).json()
        item_id = cart["items"][0]["id"]

        updated = client.put("/cart/update", json={"item_id": item_id, "quantity": 3}, headers=headers)
        assert updated.status_code == 200
        assert updated.json()["total"] == 30.0

        removed = client.delete(f"/cart/item/{item_id}", headers=headers)
        assert removed.status_code == 200
        assert removed.json()["items"] == []

    def test_update_unknown_line(self, client, headers, make_product):
        product = make_product()
        client.post("/cart/add", json={"product_id": str(product.id), "size": "9"}, headers=headers)
        response = client.put(
            "/cart/update",
            json={"item_id": "5b0ab7d4-8c43-4c4f-9a39-3f3c3c8b1e11", "quantity": 2},
            headers=headers,
        )
        assert response.status_code == 404

    def test_clear(self, client, headers, make_product):
        product = make_product()
        client.post("/cart/add", json={"product_id": str(product.id), "size": "9"}, headers=headers)
        response = client.delete("/cart/clear", headers=headers)
        assert response.status_code == 200
        assert response.json()["items"] == []
        assert response.json()["total"] == 0.0

    def test_clear_without_cart(self, client, headers):
        response = client.delete("/cart/clear", headers=headers)
        assert response.status_code == 200
        assert response.json()["items"] == []
