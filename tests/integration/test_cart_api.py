"""Integration tests for Cart and Wishlist API endpoints via TestClient."""


class TestCartApi:
    def test_empty_cart(self, client, as_customer):
        response = client.get("/cart", headers=as_customer)
        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 0.0}

    def test_add_update_remove(self, client, as_customer, make_product):
        product_id = make_product(name="Apples", price=120.0, stock=5)

        added = client.post("/cart", json={"productId": product_id, "quantity": 2}, headers=as_customer)
        assert added.status_code == 200
        assert added.json()["total"] == 240.0
        assert added.json()["items"][0]["product"] == product_id

        updated = client.put(f"/cart/{product_id}", json={"quantity": 3}, headers=as_customer)
        assert updated.json()["items"][0]["quantity"] == 3

        removed = client.delete(f"/cart/{product_id}", headers=as_customer)
        assert removed.json()["items"] == []

    def test_out_of_stock(self, client, as_customer, make_product):
        product_id = make_product(stock=1)
        response = client.post("/cart", json={"productId": product_id, "quantity": 2}, headers=as_customer)
        assert response.status_code == 409
        assert response.json()["kind"] == "OutOfStock"

    def test_zero_quantity_update(self, client, as_customer, make_product):
        product_id = make_product()
        client.post("/cart", json={"productId": product_id}, headers=as_customer)

        response = client.put(f"/cart/{product_id}", json={"quantity": 0}, headers=as_customer)

        assert response.status_code == 400
        assert response.json()["kind"] == "InvalidQuantity"

    def test_clear(self, client, as_customer, make_product):
        client.post("/cart", json={"productId": make_product()}, headers=as_customer)
        assert client.delete("/cart", headers=as_customer).json() == {"status": "cleared"}
        assert client.get("/cart", headers=as_customer).json()["items"] == []

    def test_vendor_has_no_cart(self, client, as_vendor):
        assert client.get("/cart", headers=as_vendor).status_code == 403


class TestWishlistApi:
    def test_add_and_remove(self, client, as_customer, make_product):
        product_id = make_product(name="Saffron")

        added = client.post("/wishlist", json={"productId": product_id}, headers=as_customer)
        assert added.status_code == 201
        assert added.json()["items"][0]["name"] == "Saffron"

        duplicate = client.post("/wishlist", json={"productId": product_id}, headers=as_customer)
        assert duplicate.status_code == 409

        removed = client.delete(f"/wishlist/{product_id}", headers=as_customer)
        assert removed.json()["items"] == []

    def test_remove_absent(self, client, as_customer):
        response = client.delete("/wishlist/prod-404", headers=as_customer)
        assert response.status_code == 404
