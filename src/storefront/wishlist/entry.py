"""Wishlist entries: a (user, product) pair that is toggled on and off."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier

from storefront.domain import storefront


@storefront.aggregate
class WishlistEntry:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    created_at = DateTime()

    @classmethod
    def create(cls, user_id, product_id):
        return cls(user_id=user_id, product_id=product_id, created_at=datetime.now(UTC))


@storefront.repository(part_of=WishlistEntry)
class WishlistRepository:
    def find(self, user_id, product_id):
        items = self._dao.query.filter(user_id=str(user_id), product_id=str(product_id)).limit(1).all().items
        return items[0] if items else None

    def for_user(self, user_id):
        return self._dao.query.filter(user_id=str(user_id)).order_by("-created_at").all().items
