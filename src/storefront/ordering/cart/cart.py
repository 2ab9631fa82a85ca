"""Cart aggregate: one per user, lines keyed by product and variant.

Quantities are checked against authoritative stock when they are written.
Stock can still drop below a line's quantity afterwards; checkout re-checks.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.domain import storefront
from storefront.ordering.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemQuantityUpdated,
    CartItemRemoved,
)


def _same(a, b) -> bool:
    return str(a or "") == str(b or "")


@storefront.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    variant_id = Identifier()
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class Cart:
    user_id = Identifier(identifier=True)
    items = HasMany(CartItem)
    updated_at = DateTime()

    @classmethod
    def create(cls, user_id):
        return cls(user_id=user_id, updated_at=datetime.now(UTC))

    @property
    def item_count(self) -> int:
        return sum(i.quantity for i in self.items)

    def find_line(self, product_id, variant_id=None):
        return next(
            (i for i in self.items if _same(i.product_id, product_id) and _same(i.variant_id, variant_id)),
            None,
        )

    def item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError(f"Cart item `{item_id}` does not exist")
        return item

    def add_item(self, product_id, quantity, available_stock, variant_id=None):
        """Insert a line, or grow the existing line for the same product and variant."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.find_line(product_id, variant_id)
        requested = quantity + (existing.quantity if existing else 0)
        if requested > available_stock:
            raise ValidationError({"quantity": [f"Requested quantity exceeds available stock ({available_stock})"]})

        now = datetime.now(UTC)
        if existing:
            existing.quantity = requested
            item = existing
        else:
            item = CartItem(product_id=product_id, variant_id=variant_id, quantity=quantity, added_at=now)
            self.add_items(item)
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                user_id=str(self.user_id),
                item_id=str(item.id),
                product_id=str(product_id),
                variant_id=str(variant_id) if variant_id else None,
                quantity=quantity,
            )
        )
        return item

    def update_item_quantity(self, item_id, quantity, available_stock):
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        item = self.item(item_id)
        if quantity > available_stock:
            raise ValidationError({"quantity": [f"Requested quantity exceeds available stock ({available_stock})"]})

        previous = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemQuantityUpdated(
                user_id=str(self.user_id),
                item_id=str(item.id),
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )

    def remove_item(self, item_id):
        """Remove a line; removing a line that is not in the cart does nothing."""
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            return
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartItemRemoved(user_id=str(self.user_id), item_id=str(item_id)))

    def clear(self):
        count = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        if count:
            self.raise_(CartCleared(user_id=str(self.user_id), items_removed=count))
