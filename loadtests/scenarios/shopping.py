"""Signed-in shopper journey: browse, fill the cart, apply a coupon, check out.

Uses ``dev-<user id>`` tokens, so the API must run with the fake identity
provider. Every simulated user gets a fresh id, and therefore a fresh
profile and cart.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import SEEDED_COUPONS, checkout_data, shopper_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState


class CheckoutJourney(SequentialTaskSet):
    """Listing -> Product Page -> Add to Cart (x2) -> View Cart -> Validate Coupon
    -> Place Order -> Order History.
    """

    def on_start(self):
        self.state = ShopperState(user_id=shopper_id())

    @task
    def browse(self):
        with self.client.get(
            "/api/products",
            params={"limit": 24, "sort": random.choice(["created_at", "price", "sold_count"])},
            catch_response=True,
            name="GET /api/products",
        ) as resp:
            products = resp.json().get("products", []) if resp.status_code == 200 else []
            in_stock = [p for p in products if p.get("stock", 0) > 0]
            if not in_stock:
                resp.failure("No products in stock, seed the catalogue first")
                self.interrupt()
                return
            picks = random.sample(in_stock, k=min(2, len(in_stock)))
            self.state.product_ids = [p["id"] for p in picks]
            self.state.product_slugs = [p["slug"] for p in picks]

    @task
    def view_product(self):
        self.client.get(
            f"/api/products/{self.state.product_slugs[0]}",
            headers=self.state.headers,
            name="GET /api/products/{slug}",
        )

    @task
    def add_to_cart(self):
        for product_id in self.state.product_ids:
            with self.client.post(
                "/api/cart",
                json={"product_id": product_id, "quantity": 1},
                headers=self.state.headers,
                catch_response=True,
                name="POST /api/cart",
            ) as resp:
                if resp.status_code == 201:
                    self.state.cart_item_ids.append(resp.json()["item_id"])
                else:
                    resp.failure(f"Add to cart failed ({resp.status_code}): {extract_error_detail(resp)}")

        if not self.state.cart_item_ids:
            self.interrupt()

    @task
    def view_cart(self):
        with self.client.get("/api/cart", headers=self.state.headers, catch_response=True, name="GET /api/cart") as resp:
            if resp.status_code == 200:
                self.state.subtotal = resp.json()["summary"]["subtotal"]
            else:
                resp.failure(f"View cart failed ({resp.status_code}): {extract_error_detail(resp)}")

    @task
    def validate_coupon(self):
        code = random.choice(SEEDED_COUPONS)
        with self.client.post(
            "/api/coupons/validate",
            json={"code": code, "subtotal": self.state.subtotal},
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/coupons/validate",
        ) as resp:
            if resp.status_code == 200:
                self.state.coupon_code = code
            elif resp.status_code == 400:
                # Below the coupon's minimum purchase or used up: check out without it
                resp.success()
            else:
                resp.failure(f"Validate coupon failed ({resp.status_code}): {extract_error_detail(resp)}")

    @task
    def place_order(self):
        with self.client.post(
            "/api/orders",
            json=checkout_data(self.state.coupon_code),
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["id"])
            elif resp.status_code == 400:
                # Lost a race for the last units in stock
                resp.success()
            else:
                resp.failure(f"Place order failed ({resp.status_code}): {extract_error_detail(resp)}")

    @task
    def order_history(self):
        self.client.get("/api/orders", headers=self.state.headers, name="GET /api/orders")
        for order_id in self.state.order_ids:
            self.client.get(f"/api/orders/{order_id}", headers=self.state.headers, name="GET /api/orders/{id}")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    wait_time = between(1, 3)
    weight = 1
    tasks = [CheckoutJourney]
