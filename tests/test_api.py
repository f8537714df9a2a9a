"""
End-to-end tests through the HTTP layer.

Routers, services and repositories all run for real against an in-memory
SQLite database; Celery tasks execute eagerly.
"""
from decimal import Decimal

import pytest


@pytest.fixture
def product(client):
    def _create(name="Shirt", price="9.99", quantity=10):
        response = client.post(
            "/api/products",
            json={"name": name, "price": price, "quantity": quantity, "category": "apparel"},
        )
        assert response.status_code == 201
        return response.json()

    return _create


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestProducts:
    def test_crud(self, client, product):
        created = product()
        assert created["name"] == "Shirt"
        assert Decimal(created["price"]) == Decimal("9.99")

        assert [p["id"] for p in client.get("/api/products").json()] == [created["id"]]
        assert client.get(f"/api/products/{created['id']}").json()["category"] == "apparel"

        response = client.put(
            f"/api/products/{created['id']}",
            json={"name": "Shirt v2", "price": "11.00"},
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Shirt v2"
        assert response.json()["category"] is None

        assert client.delete(f"/api/products/{created['id']}").status_code == 200
        assert client.get(f"/api/products/{created['id']}").status_code == 404
        # deleting again is fine
        assert client.delete(f"/api/products/{created['id']}").status_code == 200

    def test_update_missing(self, client):
        response = client.put("/api/products/999", json={"name": "x", "price": "1.00"})
        assert response.status_code == 404

    @pytest.mark.parametrize("body", [{"name": "x", "price": "-1"}, {"name": "", "price": "1"}])
    def test_invalid_product_rejected(self, client, body):
        assert client.post("/api/products", json=body).status_code == 422


class TestCart:
    def test_get_creates_empty_cart(self, client):
        first = client.get("/api/cart/1").json()
        second = client.get("/api/cart/1").json()

        assert first["id"] == second["id"]
        assert first["userId"] == 1
        assert first["items"] == []
        assert Decimal(first["totalAmount"]) == Decimal("0")

    def test_add_update_remove_flow(self, client, product):
        shirt = product("Shirt", "9.99")
        socks = product("Socks", "4.50")

        client.post("/api/cart/1/items", json={"productId": shirt["id"], "quantity": 1})
        client.post("/api/cart/1/items", json={"productId": shirt["id"], "quantity": 1})
        cart = client.post("/api/cart/1/items", json={"productId": socks["id"], "quantity": 1}).json()

        assert len(cart["items"]) == 2
        assert Decimal(cart["totalAmount"]) == Decimal("24.48")
        assert Decimal(client.get("/api/cart/1/total").json()["total"]) == Decimal("24.48")

        shirt_line = next(i for i in cart["items"] if i["productId"] == shirt["id"])
        assert shirt_line["quantity"] == 2
        assert shirt_line["productName"] == "Shirt"

        cart = client.put(f"/api/cart/1/items/{shirt_line['id']}", json={"quantity": 0}).json()
        assert [i["productId"] for i in cart["items"]] == [socks["id"]]
        assert Decimal(cart["totalAmount"]) == Decimal("4.50")

        cart = client.delete(f"/api/cart/1/products/{socks['id']}").json()
        assert cart["items"] == []
        assert Decimal(cart["totalAmount"]) == Decimal("0")

    def test_add_unknown_product(self, client):
        response = client.post("/api/cart/1/items", json={"productId": 999, "quantity": 1})
        assert response.status_code == 404
        assert response.json()["detail"] == "Product 999 not found"

    def test_add_rejects_zero_quantity(self, client, product):
        shirt = product()
        response = client.post("/api/cart/1/items", json={"productId": shirt["id"], "quantity": 0})
        assert response.status_code == 422

    def test_foreign_item_is_forbidden(self, client, product):
        shirt = product()
        theirs = client.post("/api/cart/2/items", json={"productId": shirt["id"], "quantity": 3}).json()
        client.get("/api/cart/1")
        item_id = theirs["items"][0]["id"]

        assert client.delete(f"/api/cart/1/items/{item_id}").status_code == 403
        assert client.put(f"/api/cart/1/items/{item_id}", json={"quantity": 1}).status_code == 403

        after = client.get("/api/cart/2").json()
        assert after["items"][0]["quantity"] == 3
        assert client.get("/api/cart/1").json()["items"] == []

    def test_clear(self, client, product):
        shirt = product()
        client.post("/api/cart/1/items", json={"productId": shirt["id"], "quantity": 2})

        response = client.delete("/api/cart/1/clear")

        assert response.status_code == 200
        assert response.json() == {"message": "Cart cleared successfully"}
        assert client.get("/api/cart/1").json()["items"] == []

    def test_total_without_cart(self, client):
        assert client.get("/api/cart/5/total").status_code == 404


class TestOrders:
    def _fill_cart(self, client, product, user_id=1):
        shirt = product("Shirt", "9.99")
        socks = product("Socks", "4.50")
        client.post(f"/api/cart/{user_id}/items", json={"productId": shirt["id"], "quantity": 2})
        client.post(f"/api/cart/{user_id}/items", json={"productId": socks["id"], "quantity": 1})

    def test_checkout(self, client, product):
        self._fill_cart(client, product)

        response = client.post(
            "/api/orders/checkout/1",
            json={"fullName": "Ada", "address": "1 Main St", "city": "Springfield", "postal": "12345",
                  "paymentMethod": "card", "card": "4111111111111111"},
        )

        assert response.status_code == 201
        order = response.json()
        assert order["status"] == "pending"
        assert Decimal(order["total"]) == Decimal("24.48")
        assert order["orderSummary"] == "Shirt x2, Socks x1"
        assert order["fullName"] == "Ada"
        assert order["card"] == "**** **** **** 1111"
        assert len(order["items"]) == 2

        cart = client.get("/api/cart/1").json()
        assert cart["items"] == []
        assert Decimal(cart["totalAmount"]) == Decimal("0")

    def test_checkout_without_body_defaults_payment(self, client, product):
        self._fill_cart(client, product)
        order = client.post("/api/orders/checkout/1").json()
        assert order["paymentMethod"] == "cod"

    def test_checkout_empty_cart(self, client):
        client.get("/api/cart/1")

        response = client.post("/api/orders/checkout/1", json={})

        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"
        assert client.get("/api/orders").json() == []

    def test_queries_and_lifecycle(self, client, product):
        self._fill_cart(client, product)
        order_id = client.post("/api/orders/checkout/1", json={}).json()["id"]

        assert client.get(f"/api/orders/{order_id}").json()["id"] == order_id
        assert [o["id"] for o in client.get("/api/orders/user/1").json()] == [order_id]
        assert [o["id"] for o in client.get("/api/orders/status/pending").json()] == [order_id]
        assert client.get("/api/orders/status/bogus").status_code == 422

        response = client.put(f"/api/orders/{order_id}/status", json={"status": "processing"})
        assert response.json()["status"] == "processing"

        response = client.put(f"/api/orders/{order_id}/status", json={"status": "delivered"})
        assert response.status_code == 400

        assert client.put(f"/api/orders/{order_id}/cancel").json()["status"] == "cancelled"
        assert client.put(f"/api/orders/{order_id}/cancel").status_code == 400

        assert client.delete(f"/api/orders/{order_id}").status_code == 200
        assert client.get(f"/api/orders/{order_id}").status_code == 404

    def test_missing_order(self, client):
        assert client.get("/api/orders/404").status_code == 404
        assert client.put("/api/orders/404/cancel").status_code == 404


class TestUsers:
    def test_signup_and_login(self, client):
        creds = {"email": "ada@example.com", "password": "s3cret"}

        response = client.post("/api/users/signup", json=creds)
        assert response.status_code == 201
        assert "password" not in response.json()

        response = client.post("/api/users/login", json=creds)
        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "ada@example.com"
        assert set(body) == {"id", "email", "createdAt"}

    def test_duplicate_signup(self, client):
        creds = {"email": "ada@example.com", "password": "s3cret"}
        client.post("/api/users/signup", json=creds)

        response = client.post("/api/users/signup", json={"email": "ada@example.com", "password": "other"})

        assert response.status_code == 409
        assert client.post("/api/users/login", json=creds).status_code == 200

    def test_login_failures(self, client):
        client.post("/api/users/signup", json={"email": "ada@example.com", "password": "s3cret"})

        wrong = client.post("/api/users/login", json={"email": "ada@example.com", "password": "nope"})
        assert wrong.status_code == 401
        assert wrong.json() == {"detail": "Invalid password"}

        unknown = client.post("/api/users/login", json={"email": "bob@example.com", "password": "x"})
        assert unknown.status_code == 404
