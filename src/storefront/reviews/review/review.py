"""Review aggregate: one rating per customer per product."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.reviews.review.events import ReviewPosted

MIN_RATING = 1
MAX_RATING = 5


def check_rating(rating):
    if rating is None or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError({"rating": [f"Rating must be between {MIN_RATING} and {MAX_RATING}"]})


@storefront.aggregate
class Review:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    order_id = Identifier()
    rating = Integer(required=True, min_value=MIN_RATING, max_value=MAX_RATING)
    title = String(max_length=200)
    comment = Text()
    is_verified = Boolean(default=False)
    created_at = DateTime()

    @classmethod
    def post(cls, user_id, product_id, rating, is_verified, order_id=None, title=None, comment=None):
        check_rating(rating)
        now = datetime.now(UTC)
        review = cls(
            user_id=user_id,
            product_id=product_id,
            order_id=order_id,
            rating=rating,
            title=title,
            comment=comment,
            is_verified=is_verified,
            created_at=now,
        )
        review.raise_(
            ReviewPosted(
                review_id=review.id,
                product_id=str(product_id),
                user_id=str(user_id),
                rating=rating,
                is_verified=is_verified,
                posted_at=now,
            )
        )
        return review
