"""Domain events for the Review aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="Review")
class ReviewPosted:
    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    is_verified = Boolean()
    posted_at = DateTime(required=True)
