"""PostReview: a customer rates a product.

One review per customer and product. ``is_verified`` is derived here, never
taken from the request: it is set only when the referenced order belongs to
the reviewer and has been delivered.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.ordering.order.order import Order, OrderStatus
from storefront.reviews.review.review import Review, check_rating
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Review")
class PostReview:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rating = Integer()
    order_id = Identifier()
    title = String(max_length=200)
    comment = Text()


def is_verified_purchase(order_id, user_id) -> bool:
    if not order_id:
        return False
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        return False
    return str(order.user_id) == str(user_id) and order.status == OrderStatus.DELIVERED.value


@storefront.command_handler(part_of=Review)
class PostReviewHandler:
    @handle(PostReview)
    def post_review(self, command):
        check_rating(command.rating)

        product_repo = current_domain.repository_for(Product)
        product = product_repo.get(command.product_id)

        repo = current_domain.repository_for(Review)
        existing = repo._dao.query.filter(
            user_id=str(command.user_id),
            product_id=str(command.product_id),
        ).all()
        if existing.items:
            raise ValidationError({"review": ["You have already reviewed this product"]})

        review = Review.post(
            user_id=command.user_id,
            product_id=command.product_id,
            rating=command.rating,
            is_verified=is_verified_purchase(command.order_id, command.user_id),
            order_id=command.order_id,
            title=command.title,
            comment=command.comment,
        )
        repo.add(review)

        product.record_rating(review.rating)
        product_repo.add(product)

        logger.info(
            "Review posted",
            review_id=str(review.id),
            product_id=str(command.product_id),
            rating=review.rating,
            verified=review.is_verified,
        )
        return str(review.id)
