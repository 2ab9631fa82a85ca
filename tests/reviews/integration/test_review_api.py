"""Integration tests for Reviews API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers

from storefront.reviews.api.routes import review_router


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(review_router)
    register_exception_handlers(app)
    return TestClient(app)


def _submit(client, headers, product_id, **overrides):
    payload = {"product_id": str(product_id), "rating": 5, "title": "Mantap", "comment": "Bahannya adem."}
    payload.update(overrides)
    return client.post("/reviews", json=payload, headers=headers)


class TestSubmitReviewAPI:
    def test_submit_returns_201(self, client, auth_headers, make_product):
        response = _submit(client, auth_headers(), make_product().id)

        assert response.status_code == 201
        assert "review_id" in response.json()

    def test_requires_token(self, client, make_product):
        response = client.post("/reviews", json={"product_id": str(make_product().id), "rating": 5})
        assert response.status_code == 401

    def test_rating_out_of_range_is_400(self, client, auth_headers, make_product):
        assert _submit(client, auth_headers(), make_product().id, rating=0).status_code == 400

    def test_missing_rating_is_400(self, client, auth_headers, make_product):
        response = client.post("/reviews", json={"product_id": str(make_product().id)}, headers=auth_headers())
        assert response.status_code == 400

    def test_duplicate_is_400(self, client, auth_headers, make_product):
        product = make_product()
        _submit(client, auth_headers(), product.id)

        assert _submit(client, auth_headers(), product.id, rating=1).status_code == 400


class TestListReviewsAPI:
    def test_list_with_author_names(self, client, fake_identity, make_product):
        fake_identity.register("token-siti", "user-siti", full_name="Siti Aminah")
        product = make_product()
        _submit(client, {"Authorization": "Bearer token-siti"}, product.id, rating=4)

        body = client.get(f"/reviews/{product.id}").json()

        assert body["reviews"][0]["author_name"] == "Siti Aminah"
        assert body["rating_breakdown"]["4"] == 1
        assert body["pagination"]["total"] == 1

    def test_unknown_product_is_404(self, client):
        assert client.get("/reviews/missing").status_code == 404

    def test_author_without_name(self, client, auth_headers, make_product):
        product = make_product()
        _submit(client, auth_headers("user-001"), product.id)

        assert client.get(f"/reviews/{product.id}").json()["reviews"][0]["author_name"] is None


class TestDeleteReviewAPI:
    def test_delete_own_review(self, client, auth_headers, make_product):
        product = make_product()
        review_id = _submit(client, auth_headers(), product.id).json()["review_id"]

        assert client.delete(f"/reviews/{review_id}", headers=auth_headers()).status_code == 200
        assert client.get(f"/reviews/{product.id}").json()["reviews"] == []

    def test_cannot_delete_others_review(self, client, auth_headers, make_product):
        review_id = _submit(client, auth_headers(), make_product().id).json()["review_id"]

        assert client.delete(f"/reviews/{review_id}", headers=auth_headers("user-002")).status_code == 404
