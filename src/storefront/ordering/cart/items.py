"""Cart item commands: add, change quantity, remove, clear."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.ordering.cart.cart import Cart


@storefront.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_id = Identifier()
    quantity = Integer(default=1)


@storefront.command(part_of="Cart")
class UpdateCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


def load_cart(user_id, create=False):
    """Return the user's cart. A missing cart is created when ``create`` is set, else None."""
    repo = current_domain.repository_for(Cart)
    try:
        return repo.get(user_id)
    except ObjectNotFoundError:
        return Cart.create(user_id) if create else None


def _sellable_product(product_id, variant_id=None):
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError(f"Product `{product_id}` does not exist") from None
    if not product.is_active:
        raise ObjectNotFoundError(f"Product `{product_id}` does not exist")
    variant = product.variant_for(variant_id)
    if variant_id and variant is None:
        raise ObjectNotFoundError(f"Variant `{variant_id}` does not exist")
    return product, variant


@storefront.command_handler(part_of=Cart)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product, variant = _sellable_product(command.product_id, command.variant_id)
        cart = load_cart(command.user_id, create=True)
        item = cart.add_item(
            product_id=str(product.id),
            variant_id=str(variant.id) if variant else None,
            quantity=command.quantity if command.quantity is not None else 1,
            available_stock=product.stock_for(variant),
        )
        current_domain.repository_for(Cart).add(cart)
        return str(item.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        cart = load_cart(command.user_id)
        if cart is None:
            raise ObjectNotFoundError(f"Cart item `{command.item_id}` does not exist")
        item = cart.item(command.item_id)
        product = current_domain.repository_for(Product).get(item.product_id)
        variant = product.variant_for(item.variant_id)
        available = product.stock_for(variant) if variant or not item.variant_id else 0
        cart.update_item_quantity(item.id, command.quantity, available_stock=available)
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = load_cart(command.user_id)
        if cart is None:
            return
        cart.remove_item(command.item_id)
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = load_cart(command.user_id)
        if cart is None:
            return
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
