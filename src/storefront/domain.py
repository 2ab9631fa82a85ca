"""Storefront bounded context.

A single domain owns the catalogue, carts, coupons, orders, reviews,
wishlists and customer profiles, so checkout and cancellation commit every
aggregate they touch inside one unit of work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
