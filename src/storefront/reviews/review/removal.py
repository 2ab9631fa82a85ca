"""DeleteReview: customers can take back their own review."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.reviews.review.review import Review


@storefront.command(part_of="Review")
class DeleteReview:
    user_id = Identifier(required=True)
    review_id = Identifier(required=True)


@storefront.command_handler(part_of=Review)
class DeleteReviewHandler:
    @handle(DeleteReview)
    def delete_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        if str(review.user_id) != str(command.user_id):
            raise ObjectNotFoundError(f"Review `{command.review_id}` does not exist")

        product_repo = current_domain.repository_for(Product)
        try:
            product = product_repo.get(review.product_id)
        except ObjectNotFoundError:
            product = None
        if product is not None:
            product.withdraw_rating(review.rating)
            product_repo.add(product)

        repo._dao.delete(review)
