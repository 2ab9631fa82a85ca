"""Integration tests for checkout, order and coupon endpoints via TestClient."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from protean.integrations.fastapi import register_exception_handlers

from storefront.catalogue.product.product import Product
from storefront.ordering.api.routes import cart_router, coupon_router, order_router


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(coupon_router)
    app.include_router(order_router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def headers(auth_headers):
    return auth_headers("user-001")


def _fill_cart(client, headers, product, quantity=1):
    response = client.post("/cart", json={"product_id": str(product.id), "quantity": quantity}, headers=headers)
    assert response.status_code == 201


def _checkout(client, headers, address, **extra):
    return client.post("/orders", json={"shipping_address": address, **extra}, headers=headers)


class TestCheckoutEndpoint:
    def test_discounted_checkout(self, client, headers, make_product, make_coupon, shipping_address):
        make_coupon(max_discount=10000)
        _fill_cart(client, headers, make_product(price=60000, stock=10), 2)

        response = _checkout(client, headers, shipping_address, coupon_code="HEMAT10")

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["payment_status"] == "unpaid"
        assert body["discount"] == 10000
        assert body["tax"] == 12100
        assert body["total"] == 122100
        assert body["shipping_address"]["city"] == "Bandung"
        assert len(body["items"]) == 1

    def test_checkout_without_coupon(self, client, headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product(price=50000))

        body = _checkout(client, headers, shipping_address).json()

        assert body["shipping_cost"] == 15000
        assert body["total"] == 70500

    def test_empty_cart_is_400(self, client, headers, shipping_address):
        response = _checkout(client, headers, shipping_address)
        assert response.status_code == 400
        assert "Cart is empty" in response.text

    def test_incomplete_address_is_400(self, client, headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product())
        shipping_address["phone"] = ""

        assert _checkout(client, headers, shipping_address).status_code == 400

    def test_expired_coupon_is_400(self, client, headers, make_product, make_coupon, shipping_address):
        make_coupon(expires_at=datetime.now(UTC) - timedelta(days=1))
        _fill_cart(client, headers, make_product(price=60000), 2)

        response = _checkout(client, headers, shipping_address, coupon_code="HEMAT10")

        assert response.status_code == 400
        assert "coupon_expired" in response.text

    def test_requires_token(self, client, shipping_address):
        assert client.post("/orders", json={"shipping_address": shipping_address}).status_code == 401


class TestOrderReads:
    def test_list_own_orders(self, client, headers, auth_headers, make_product, shipping_address):
        product = make_product(stock=10)
        for _ in range(2):
            _fill_cart(client, headers, product)
            _checkout(client, headers, shipping_address)

        body = client.get("/orders", headers=headers).json()
        assert body["pagination"]["total"] == 2
        assert len(body["orders"]) == 2

        other = client.get("/orders", headers=auth_headers("user-002")).json()
        assert other["orders"] == []

    def test_filter_by_status(self, client, headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product())
        _checkout(client, headers, shipping_address)

        assert client.get("/orders?status=pending", headers=headers).json()["pagination"]["total"] == 1
        assert client.get("/orders?status=shipped", headers=headers).json()["pagination"]["total"] == 0

    def test_get_order(self, client, headers, auth_headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product())
        order_id = _checkout(client, headers, shipping_address).json()["id"]

        assert client.get(f"/orders/{order_id}", headers=headers).status_code == 200
        assert client.get(f"/orders/{order_id}", headers=auth_headers("user-002")).status_code == 404


class TestCancelEndpoint:
    def test_cancel(self, client, headers, make_product, shipping_address):
        product = make_product(stock=10)
        _fill_cart(client, headers, product, 3)
        order_id = _checkout(client, headers, shipping_address).json()["id"]

        response = client.put(f"/orders/{order_id}/cancel", headers=headers)

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert current_domain.repository_for(Product).get(product.id).stock == 10

    def test_cancel_shipped_order_is_400(self, client, headers, admin_headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product())
        order_id = _checkout(client, headers, shipping_address).json()["id"]
        client.put(f"/orders/admin/{order_id}/status", json={"status": "confirmed"}, headers=admin_headers)
        client.put(f"/orders/admin/{order_id}/status", json={"status": "shipped"}, headers=admin_headers)

        response = client.put(f"/orders/{order_id}/cancel", headers=headers)

        assert response.status_code == 400


class TestAdminOrderEndpoints:
    def test_customer_is_forbidden(self, client, headers):
        response = client.get("/orders/admin/all", headers=headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"

    def test_list_all_and_search(self, client, headers, auth_headers, admin_headers, make_product, shipping_address):
        product = make_product(stock=10)
        _fill_cart(client, headers, product)
        order = _checkout(client, headers, shipping_address).json()
        other = auth_headers("user-002")
        _fill_cart(client, other, product)
        _checkout(client, other, shipping_address)

        assert client.get("/orders/admin/all", headers=admin_headers).json()["pagination"]["total"] == 2

        suffix = order["order_number"][-8:].lower()
        found = client.get(f"/orders/admin/all?search={suffix}", headers=admin_headers).json()
        assert [o["id"] for o in found["orders"]] == [order["id"]]

    def test_update_status(self, client, headers, admin_headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product())
        order_id = _checkout(client, headers, shipping_address).json()["id"]

        response = client.put(
            f"/orders/admin/{order_id}/status",
            json={"status": "confirmed", "payment_status": "paid", "tracking_number": "JNE-001"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "confirmed"
        assert body["payment_status"] == "paid"
        assert body["tracking_number"] == "JNE-001"

    def test_invalid_transition_is_400(self, client, headers, admin_headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product())
        order_id = _checkout(client, headers, shipping_address).json()["id"]

        response = client.put(f"/orders/admin/{order_id}/status", json={"status": "delivered"}, headers=admin_headers)

        assert response.status_code == 400

    def test_stats(self, client, headers, admin_headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product(price=50000, stock=10))
        paid_id = _checkout(client, headers, shipping_address).json()["id"]
        _fill_cart(client, headers, make_product(name="Kaos B", price=50000, stock=10))
        _checkout(client, headers, shipping_address)
        client.put(f"/orders/admin/{paid_id}/status", json={"payment_status": "paid"}, headers=admin_headers)

        stats = client.get("/orders/admin/stats", headers=admin_headers).json()

        assert stats["total_orders"] == 2
        assert stats["pending_orders"] == 2
        assert stats["total_revenue"] == 70500
        assert stats["total_products"] == 2
        assert stats["total_users"] == 2


class TestCouponEndpoints:
    def test_validate_anonymously(self, client, make_coupon):
        make_coupon(max_discount=10000)

        response = client.post("/coupons/validate", json={"code": "hemat10", "subtotal": 120000})

        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is True
        assert body["discount"] == 10000
        assert body["coupon"]["code"] == "HEMAT10"

    def test_validate_unknown_is_404(self, client):
        response = client.post("/coupons/validate", json={"code": "NOPE", "subtotal": 120000})
        assert response.status_code == 404

    def test_validate_below_minimum_is_400(self, client, make_coupon):
        make_coupon(min_purchase=200000)

        response = client.post("/coupons/validate", json={"code": "HEMAT10", "subtotal": 150000})

        assert response.status_code == 400
        assert "coupon_below_minimum" in response.text

    def test_validate_missing_code_is_400(self, client):
        assert client.post("/coupons/validate", json={"subtotal": 1000}).status_code == 400

    def test_admin_lifecycle(self, client, admin_headers):
        created = client.post(
            "/coupons",
            json={"code": "potong25k", "discount_type": "flat", "discount_value": 25000, "min_purchase": 200000},
            headers=admin_headers,
        )
        assert created.status_code == 201
        coupon_id = created.json()["coupon_id"]

        listing = client.get("/coupons", headers=admin_headers).json()["coupons"]
        assert [c["code"] for c in listing] == ["POTONG25K"]

        assert client.delete(f"/coupons/{coupon_id}", headers=admin_headers).status_code == 200
        assert client.post("/coupons/validate", json={"code": "POTONG25K", "subtotal": 300000}).status_code == 404

    def test_create_requires_admin(self, client, headers):
        response = client.post(
            "/coupons", json={"code": "X", "discount_type": "flat", "discount_value": 1}, headers=headers
        )
        assert response.status_code == 403
