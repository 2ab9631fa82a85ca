import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    """Run every test inside the domain context and start it from empty stores."""
    from protean import current_domain

    from storefront.identity.provider import reset_identity_provider

    with storefront_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()
    reset_identity_provider()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def shipping_address():
    return {
        "recipient_name": "Budi Santoso",
        "phone": "081234567890",
        "street": "Jl. Merdeka No. 10",
        "city": "Bandung",
        "province": "Jawa Barat",
        "postal_code": "40111",
    }


@pytest.fixture()
def make_product():
    """Persist a product; ``variants`` is a list of add_variant kwargs."""
    from protean import current_domain

    from storefront.catalogue.product.product import Product

    def _make(name="Kaos Polos", price=50000, stock=10, variants=(), **kwargs):
        kwargs.setdefault("images", [{"url": f"https://cdn.example.test/{name.lower().replace(' ', '-')}.jpg"}])
        product = Product.create(name=name, price=price, stock=stock, **kwargs)
        for variant in variants:
            product.add_variant(**variant)
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def make_coupon():
    from protean import current_domain

    from storefront.ordering.coupon.coupon import Coupon

    def _make(code="HEMAT10", discount_type="percentage", discount_value=10, **kwargs):
        coupon = Coupon.create(code=code, discount_type=discount_type, discount_value=discount_value, **kwargs)
        current_domain.repository_for(Coupon).add(coupon)
        return coupon

    return _make


@pytest.fixture()
def fake_identity():
    """A fresh fake identity provider installed for the duration of the test."""
    from storefront.identity.provider import set_identity_provider
    from storefront.identity.provider.fake_adapter import FakeIdentityProvider

    provider = FakeIdentityProvider()
    set_identity_provider(provider)
    return provider


@pytest.fixture()
def auth_headers():
    """Bearer headers for a ``dev-`` token accepted by the fake identity provider."""

    def _headers(user_id="user-001"):
        return {"Authorization": f"Bearer dev-{user_id}"}

    return _headers


@pytest.fixture()
def admin_headers(auth_headers):
    from protean import current_domain

    from storefront.identity.management import AssignRole, ProvisionProfile

    current_domain.process(ProvisionProfile(user_id="admin-001", email="admin@example.test"), asynchronous=False)
    current_domain.process(AssignRole(user_id="admin-001", role="admin"), asynchronous=False)
    return auth_headers("admin-001")
