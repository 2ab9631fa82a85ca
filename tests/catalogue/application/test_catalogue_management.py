"""Application tests for product, category and banner commands."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.catalogue.banner.banner import CreateBanner, list_active_banners
from storefront.catalogue.category.category import Category
from storefront.catalogue.category.management import (
    CreateCategory,
    DeactivateCategory,
    UpdateCategory,
    find_category_by_slug,
    list_active_categories,
)
from storefront.catalogue.product.creation import CreateProduct
from storefront.catalogue.product.management import AddVariant, DeactivateProduct, UpdateProduct
from storefront.catalogue.product.product import Product


def _create_product(**kwargs):
    defaults = {"name": "Kaos Polos", "price": 50000, "stock": 10}
    defaults.update(kwargs)
    return current_domain.process(CreateProduct(**defaults), asynchronous=False)


def _create_category(name="Fashion", **kwargs):
    return current_domain.process(CreateCategory(name=name, **kwargs), asynchronous=False)


class TestCreateProduct:
    def test_create(self):
        product_id = _create_product(
            tags=json.dumps(["promo"]),
            images=json.dumps([{"url": "https://cdn.example.test/kaos.jpg"}]),
        )

        product = current_domain.repository_for(Product).get(product_id)
        assert product.slug == "kaos-polos"
        assert product.tag_list == ["promo"]
        assert product.primary_image_url == "https://cdn.example.test/kaos.jpg"

    def test_duplicate_slug_rejected(self):
        _create_product()
        with pytest.raises(ValidationError) as exc:
            _create_product()
        assert "slug" in exc.value.messages

    def test_unknown_category_rejected(self):
        with pytest.raises(ObjectNotFoundError):
            _create_product(category_id="missing")

    def test_with_category(self):
        category_id = _create_category()
        product = current_domain.repository_for(Product).get(_create_product(category_id=category_id))
        assert str(product.category_id) == category_id


class TestManageProduct:
    def test_update(self):
        product_id = _create_product()

        current_domain.process(
            UpdateProduct(product_id=product_id, price=55000, tags=json.dumps(["baru"])), asynchronous=False
        )

        product = current_domain.repository_for(Product).get(product_id)
        assert product.price == 55000
        assert product.tag_list == ["baru"]
        assert product.name == "Kaos Polos"

    def test_update_to_taken_slug_rejected(self):
        _create_product(name="Kaos A")
        product_id = _create_product(name="Kaos B")

        with pytest.raises(ValidationError):
            current_domain.process(UpdateProduct(product_id=product_id, slug="kaos-a"), asynchronous=False)

    def test_add_variant(self):
        product_id = _create_product()

        variant_id = current_domain.process(
            AddVariant(product_id=product_id, name="XL", price=60000, stock=4, attributes=json.dumps({"size": "XL"})),
            asynchronous=False,
        )

        product = current_domain.repository_for(Product).get(product_id)
        variant = product.variant_for(variant_id)
        assert variant.name == "XL"
        assert json.loads(variant.attributes) == {"size": "XL"}

    def test_deactivate_is_soft(self):
        product_id = _create_product()
        current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)

        repo = current_domain.repository_for(Product)
        assert repo.get(product_id).is_active is False
        assert repo.find_by_slug("kaos-polos") is None
        assert repo.find_by_slug("kaos-polos", active_only=False) is not None


class TestCategories:
    def test_listing_in_sort_order(self):
        _create_category("Olahraga", sort_order=2)
        _create_category("Elektronik", sort_order=1)

        assert [c.name for c in list_active_categories()] == ["Elektronik", "Olahraga"]

    def test_duplicate_slug_rejected(self):
        _create_category()
        with pytest.raises(ValidationError):
            _create_category()

    def test_update(self):
        category_id = _create_category()
        current_domain.process(UpdateCategory(category_id=category_id, description="Baju"), asynchronous=False)
        assert current_domain.repository_for(Category).get(category_id).description == "Baju"

    def test_own_parent_rejected(self):
        category_id = _create_category()
        with pytest.raises(ValidationError):
            current_domain.process(UpdateCategory(category_id=category_id, parent_id=category_id), asynchronous=False)

    def test_deactivated_category_is_hidden(self):
        category_id = _create_category()
        current_domain.process(DeactivateCategory(category_id=category_id), asynchronous=False)

        assert list_active_categories() == []
        with pytest.raises(ObjectNotFoundError):
            find_category_by_slug("fashion")


class TestBanners:
    def test_create_and_list(self):
        current_domain.process(
            CreateBanner(title="Promo", image_url="https://cdn.example.test/b.jpg", sort_order=1), asynchronous=False
        )
        assert [b.title for b in list_active_banners()] == ["Promo"]
