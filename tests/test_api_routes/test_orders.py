"""
Tests for order routes.
"""


def product_named(client, name):
    return next(p for p in client.get("/api/products").json() if p["name"] == name)


class TestOrderRoutes:
    def test_order_cart(self, client):
        """Test that ordering with no body buys the cart, decrements stock and clears the cart."""
        watch = product_named(client, "Smart Fitness Watch")
        client.post("/api/cart", json={"product_id": watch["id"], "quantity": 2})

        response = client.post("/api/orders")

        assert response.status_code == 201
        order = response.json()
        assert order["status"] == "pending"
        assert order["total"] == "599.98"
        assert order["items"] == [{
            "product_id": watch["id"],
            "name": "Smart Fitness Watch",
            "quantity": 2,
            "price": "299.99",
        }]
        assert client.get("/api/cart").json() == []
        assert client.get(f"/api/products/{watch['id']}").json()["stock"] == 28

    def test_order_explicit_items(self, client):
        lens = product_named(client, "Professional Camera Lens")

        response = client.post("/api/orders", json={"items": [{"product_id": lens["id"], "quantity": 1}]})

        assert response.status_code == 201
        assert response.json()["total"] == "799.99"

    def test_empty_cart_rejected(self, client):
        response = client.post("/api/orders", json={"items": []})

        assert response.status_code == 400
        assert "no items" in response.json()["detail"]

    def test_insufficient_stock(self, client):
        lens = product_named(client, "Professional Camera Lens")

        response = client.post("/api/orders", json={"items": [{"product_id": lens["id"], "quantity": 16}]})

        assert response.status_code == 400
        assert "Insufficient stock" in response.json()["detail"]
        assert client.get(f"/api/products/{lens['id']}").json()["stock"] == 15

    def test_list_get_and_status(self, client):
        lens = product_named(client, "Professional Camera Lens")
        order = client.post("/api/orders", json={"items": [{"product_id": lens["id"]}]}).json()

        assert [o["id"] for o in client.get("/api/orders").json()] == [order["id"]]
        assert client.get(f"/api/orders/{order['id']}").json()["id"] == order["id"]

        updated = client.put(f"/api/orders/{order['id']}/status", json={"status": "shipped"})
        assert updated.status_code == 200
        assert updated.json()["status"] == "shipped"

    def test_invalid_status(self, client):
        lens = product_named(client, "Professional Camera Lens")
        order = client.post("/api/orders", json={"items": [{"product_id": lens["id"]}]}).json()

        response = client.put(f"/api/orders/{order['id']}/status", json={"status": "lost"})

        assert response.status_code == 422

    def test_unknown_order(self, client):
        assert client.get("/api/orders/missing").status_code == 404
        assert client.put("/api/orders/missing/status", json={"status": "shipped"}).status_code == 404
