"""Product review listings with a rating breakdown."""

from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.reviews.review.review import Review
from storefront.shared.paging import Page, fetch_page

SORTABLE_FIELDS = ("created_at", "rating")


def reviews_for_product(product_id, page: Page, sort="created_at", order="desc"):
    """Return (reviews, rating breakdown, pagination meta) for a product.

    The breakdown comes from the product's running rating distribution.
    """
    product = current_domain.repository_for(Product).get(product_id)

    field = sort if sort in SORTABLE_FIELDS else "created_at"
    ordering = field if order == "asc" else f"-{field}"
    query = current_domain.repository_for(Review)._dao.query.filter(product_id=str(product_id)).order_by(ordering)
    result = fetch_page(query, page)

    breakdown = {int(rating): count for rating, count in product.distribution.items()}
    return result.items, breakdown, page.meta(result.total)


def latest_reviews(product_id, limit=10):
    query = current_domain.repository_for(Review)._dao.query.filter(product_id=str(product_id))
    return query.order_by("-created_at").limit(limit).all().items
