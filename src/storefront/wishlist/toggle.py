"""Wishlist commands."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.wishlist.entry import WishlistEntry


@storefront.command(part_of="WishlistEntry")
class ToggleWishlist:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="WishlistEntry")
class RemoveWishlistEntry:
    user_id = Identifier(required=True)
    entry_id = Identifier(required=True)


@storefront.command_handler(part_of=WishlistEntry)
class WishlistHandler:
    @handle(ToggleWishlist)
    def toggle(self, command):
        """Add the product if it is not wishlisted, remove it if it is. Returns the new state."""
        repo = current_domain.repository_for(WishlistEntry)
        existing = repo.find(command.user_id, command.product_id)
        if existing is not None:
            repo._dao.delete(existing)
            return False

        current_domain.repository_for(Product).get(command.product_id)
        repo.add(WishlistEntry.create(command.user_id, command.product_id))
        return True

    @handle(RemoveWishlistEntry)
    def remove(self, command):
        repo = current_domain.repository_for(WishlistEntry)
        entry = repo.get(command.entry_id)
        if str(entry.user_id) != str(command.user_id):
            raise ObjectNotFoundError(f"Wishlist entry `{command.entry_id}` does not exist")
        repo._dao.delete(entry)


def is_wishlisted(user_id, product_id) -> bool:
    return current_domain.repository_for(WishlistEntry).find(user_id, product_id) is not None
