"""Anonymous catalogue browsing: home page, listings and product pages."""

import random

from locust import HttpUser, between, task

from loadtests.data_generators import product_listing_params


class BrowsingUser(HttpUser):
    """Visitor who never signs in. Read-only traffic against the catalogue."""

    wait_time = between(0.5, 2)
    weight = 3

    def on_start(self):
        self.slugs = []

    @task(2)
    def home_page(self):
        self.client.get("/api/banners", name="GET /api/banners")
        self.client.get("/api/categories", name="GET /api/categories")
        self.client.get("/api/products/featured", name="GET /api/products/featured")
        self.client.get("/api/products/bestsellers", name="GET /api/products/bestsellers")

    @task(5)
    def browse_listing(self):
        resp = self.client.get("/api/products", params=product_listing_params(), name="GET /api/products")
        if resp.status_code == 200:
            self.slugs = [p["slug"] for p in resp.json()["products"]] or self.slugs

    @task(3)
    def view_product(self):
        if not self.slugs:
            return
        self.client.get(f"/api/products/{random.choice(self.slugs)}", name="GET /api/products/{slug}")
