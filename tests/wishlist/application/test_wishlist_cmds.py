"""Application tests for wishlist toggling and removal."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError

from storefront.wishlist.entry import WishlistEntry
from storefront.wishlist.toggle import RemoveWishlistEntry, ToggleWishlist, is_wishlisted

USER = "user-001"


def _toggle(product_id, user_id=USER):
    return current_domain.process(ToggleWishlist(user_id=user_id, product_id=product_id), asynchronous=False)


class TestToggle:
    def test_toggle_on_then_off(self, make_product):
        product = make_product()

        assert _toggle(product.id) is True
        assert is_wishlisted(USER, product.id) is True

        assert _toggle(product.id) is False
        assert is_wishlisted(USER, product.id) is False

    def test_one_entry_per_product(self, make_product):
        product = make_product()
        _toggle(product.id)
        _toggle(product.id, user_id="user-002")

        assert len(current_domain.repository_for(WishlistEntry).for_user(USER)) == 1

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            _toggle("missing")


class TestRemove:
    def test_remove(self, make_product):
        product = make_product()
        _toggle(product.id)
        entry = current_domain.repository_for(WishlistEntry).find(USER, product.id)

        current_domain.process(RemoveWishlistEntry(user_id=USER, entry_id=entry.id), asynchronous=False)

        assert is_wishlisted(USER, product.id) is False

    def test_cannot_remove_someone_elses_entry(self, make_product):
        product = make_product()
        _toggle(product.id)
        entry = current_domain.repository_for(WishlistEntry).find(USER, product.id)

        with pytest.raises(ObjectNotFoundError):
            current_domain.process(RemoveWishlistEntry(user_id="user-002", entry_id=entry.id), asynchronous=False)
