"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names expected by the API's Pydantic request
schemas and pass the domain's validation rules.
"""

import random
import uuid

from faker import Faker

fake = Faker("id_ID")

SEEDED_COUPONS = ["HEMAT10", "POTONG25K"]
SEARCH_TERMS = ["dummy", "produk", "001", "01"]
CATEGORY_SLUGS = ["elektronik", "fashion", "rumah-tangga", "kesehatan", "olahraga"]


def shopper_id() -> str:
    """Generate load-test user ids like 'lt-a1b2c3d4'."""
    return f"lt-{uuid.uuid4().hex[:8]}"


def product_listing_params() -> dict:
    params = {"page": random.randint(1, 3), "limit": 12}
    choice = random.random()
    if choice < 0.3:
        params["category"] = random.choice(CATEGORY_SLUGS)
    elif choice < 0.5:
        params["search"] = random.choice(SEARCH_TERMS)
    elif choice < 0.7:
        params["sort"] = "price"
        params["order"] = random.choice(["asc", "desc"])
    return params


def shipping_address() -> dict:
    """Generate an address with every required field filled."""
    return {
        "recipient_name": fake.name()[:100],
        "phone": fake.phone_number()[:20],
        "street": fake.street_address()[:255],
        "city": fake.city()[:100],
        "province": fake.state()[:100],
        "postal_code": fake.postcode()[:10],
    }


def checkout_data(coupon_code: str | None = None) -> dict:
    return {
        "shipping_address": shipping_address(),
        "payment_method": random.choice(["transfer", "cod", "ewallet"]),
        "notes": fake.sentence(nb_words=6) if random.random() < 0.3 else None,
        "coupon_code": coupon_code,
    }
