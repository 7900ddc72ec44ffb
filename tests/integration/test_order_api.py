"""Integration tests for Order API endpoints via TestClient."""

import pytest

from marketplace.catalogue.lookup import fetch_product


def _order_body(product_id, quantity=2, **overrides):
    body = {
        "items": [{"product": product_id, "name": "Mangoes", "price": 100.0, "quantity": quantity, "unit": "kg"}],
        "shippingAddress": {"houseNo": "12B", "city": "Pune", "state": "MH", "pinCode": "411001"},
        "paymentMethod": "UPI",
        "totalPrice": 100.0 * quantity,
    }
    body.update(overrides)
    return body


@pytest.fixture()
def placed(client, as_customer, make_product):
    product_id = make_product(price=100.0, stock=10)
    response = client.post("/orders", json=_order_body(product_id), headers=as_customer)
    assert response.status_code == 201
    return response.json()


class TestPlaceOrder:
    def test_created_order(self, placed):
        assert placed["orderStatus"] == "Pending"
        assert placed["totalPrice"] == 200.0
        assert len(placed["deliveryCode"]) == 6
        assert placed["transactionId"].startswith("TXN-")
        assert placed["items"][0]["quantity"] == 2
        assert placed["shippingAddress"]["pinCode"] == "411001"

    def test_snake_case_payload_is_accepted(self, client, as_customer, make_product):
        product_id = make_product()
        response = client.post(
            "/orders",
            json={
                "items": [{"product": product_id, "quantity": 1}],
                "shipping_address": {"house_no": "1", "city": "Pune", "state": "MH", "pin_code": "411001"},
                "payment_method": "CashOnDelivery",
            },
            headers=as_customer,
        )
        assert response.status_code == 201
        assert response.json()["transactionId"] is None

    def test_coupon_applied(self, client, as_customer, make_product, make_coupon):
        make_coupon(code="NEWUSER10", is_new_user_only=True)
        product_id = make_product(price=100.0)

        response = client.post(
            "/orders", json=_order_body(product_id, couponCode="NEWUSER10"), headers=as_customer
        )

        body = response.json()
        assert response.status_code == 201
        assert body["subtotal"] == 200.0
        assert body["totalPrice"] == 180.0
        assert body["coupon"]["discountAmount"] == 20.0

    def test_empty_items(self, client, as_customer):
        body = _order_body("x")
        body["items"] = []
        response = client.post("/orders", json=body, headers=as_customer)
        assert response.status_code == 400
        assert response.json()["kind"] == "EmptyCart"

    def test_insufficient_stock_is_conflict(self, client, as_customer, make_product):
        product_id = make_product(stock=1)
        response = client.post("/orders", json=_order_body(product_id, quantity=3), headers=as_customer)

        body = response.json()
        assert response.status_code == 409
        assert body["kind"] == "InsufficientStock"
        assert body["category"] == "Conflict"
        assert "Available: 1" in body["message"]

    def test_mixed_store_is_conflict(self, client, as_customer, make_product, other_store_id):
        ours = make_product()
        theirs = make_product(store=other_store_id)
        body = _order_body(ours)
        body["items"].append({"product": theirs, "quantity": 1})

        response = client.post("/orders", json=body, headers=as_customer)

        assert response.status_code == 409
        assert response.json()["kind"] == "MixedStoreOrder"
        assert fetch_product(ours).stock == 10

    def test_vendor_cannot_place(self, client, as_vendor, make_product):
        response = client.post("/orders", json=_order_body(make_product()), headers=as_vendor)
        assert response.status_code == 403

    def test_missing_identity(self, client, make_product):
        response = client.post("/orders", json=_order_body(make_product()))
        assert response.status_code == 401

    @pytest.mark.parametrize("pin_code", ["41100", "4110011", "PUNE01"])
    def test_pin_code_must_be_six_digits(self, client, as_customer, make_product, pin_code):
        body = _order_body(make_product(stock=10))
        body["shippingAddress"]["pinCode"] = pin_code

        response = client.post("/orders", json=body, headers=as_customer)

        assert response.status_code == 422

    def test_unknown_role(self, client, make_product):
        response = client.post(
            "/orders",
            json=_order_body(make_product()),
            headers={"X-Actor-Id": "u-1", "X-Actor-Role": "wizard"},
        )
        assert response.status_code == 401


class TestViewOrders:
    def test_customer_sees_code(self, client, as_customer, placed):
        response = client.get(f"/orders/{placed['id']}", headers=as_customer)
        assert response.status_code == 200
        assert response.json()["deliveryCode"] == placed["deliveryCode"]

    def test_vendor_sees_order_without_code(self, client, as_vendor, placed):
        response = client.get(f"/orders/{placed['id']}", headers=as_vendor)
        assert response.status_code == 200
        assert response.json()["deliveryCode"] is None

    def test_stranger_is_forbidden(self, client, as_other_customer, placed):
        assert client.get(f"/orders/{placed['id']}", headers=as_other_customer).status_code == 403

    def test_unknown_order(self, client, as_customer):
        response = client.get("/orders/order-404", headers=as_customer)
        assert response.status_code == 404
        assert response.json()["kind"] == "OrderNotFound"

    def test_my_orders(self, client, as_customer, placed):
        response = client.get("/orders/mine", headers=as_customer)
        body = response.json()
        assert response.status_code == 200
        assert [o["id"] for o in body["orders"]] == [placed["id"]]
        assert body["page"] == 1
        assert body["pages"] == 1

    def test_store_orders_for_owner(self, client, as_vendor, vendor, placed):
        response = client.get(f"/orders/store/{vendor.store_id}?status=Pending", headers=as_vendor)
        assert response.status_code == 200
        assert [o["id"] for o in response.json()["orders"]] == [placed["id"]]

    def test_my_orders_search(self, client, as_customer, placed):
        hit = client.get("/orders/mine?search=MANGO", headers=as_customer).json()
        miss = client.get("/orders/mine?search=durian", headers=as_customer).json()

        assert [o["id"] for o in hit["orders"]] == [placed["id"]]
        assert miss["orders"] == []
        assert miss["pages"] == 0

    def test_store_orders_search_by_customer(self, client, as_vendor, vendor, placed):
        url = f"/orders/store/{vendor.store_id}"
        by_email = client.get(f"{url}?search=asha@example", headers=as_vendor).json()
        by_other_name = client.get(f"{url}?search=vikram", headers=as_vendor).json()

        assert [o["id"] for o in by_email["orders"]] == [placed["id"]]
        assert by_other_name["orders"] == []

    def test_store_orders_for_other_vendor(self, client, as_other_vendor, vendor, placed):
        response = client.get(f"/orders/store/{vendor.store_id}", headers=as_other_vendor)
        assert response.status_code == 403


class TestUpdateStatus:
    def test_vendor_advances(self, client, as_vendor, placed):
        response = client.put(f"/orders/{placed['id']}/status", json={"status": "Processing"}, headers=as_vendor)
        assert response.status_code == 200
        assert response.json()["orderStatus"] == "Processing"

    def test_invalid_transition(self, client, as_vendor, placed):
        response = client.put(f"/orders/{placed['id']}/status", json={"status": "Delivered"}, headers=as_vendor)
        assert response.status_code == 409
        assert response.json()["kind"] == "InvalidTransition"

    def test_customer_forbidden(self, client, as_customer, placed):
        response = client.put(f"/orders/{placed['id']}/status", json={"status": "Cancelled"}, headers=as_customer)
        assert response.status_code == 403

    def test_unknown_status(self, client, as_admin, placed):
        response = client.put(f"/orders/{placed['id']}/status", json={"status": "Lost"}, headers=as_admin)
        assert response.status_code == 400


class TestConfirmDelivery:
    def test_confirm_with_code(self, client, as_vendor, placed):
        response = client.post(
            f"/orders/{placed['id']}/confirm-delivery",
            json={"otp": placed["deliveryCode"]},
            headers=as_vendor,
        )
        body = response.json()
        assert response.status_code == 200
        assert body["message"] == "Order delivered successfully"
        assert body["order"]["orderStatus"] == "Delivered"
        assert body["order"]["deliveredAt"] is not None

    def test_replay_fails(self, client, as_vendor, placed):
        url = f"/orders/{placed['id']}/confirm-delivery"
        client.post(url, json={"otp": placed["deliveryCode"]}, headers=as_vendor)

        response = client.post(url, json={"otp": placed["deliveryCode"]}, headers=as_vendor)

        assert response.status_code == 409
        assert response.json()["kind"] == "InvalidCode"

    def test_other_vendor(self, client, as_other_vendor, placed):
        response = client.post(
            f"/orders/{placed['id']}/confirm-delivery",
            json={"otp": placed["deliveryCode"]},
            headers=as_other_vendor,
        )
        assert response.status_code == 403

    @pytest.mark.parametrize("otp", ["12345", "1234567", "12a456"])
    def test_code_must_be_six_digits(self, client, as_vendor, placed, otp):
        response = client.post(f"/orders/{placed['id']}/confirm-delivery", json={"otp": otp}, headers=as_vendor)

        assert response.status_code == 422
        assert client.get(f"/orders/{placed['id']}", headers=as_vendor).json()["orderStatus"] == "Pending"
