"""Loads the domain elements that live below the first package level.

``Domain.init()`` discovers modules in this folder and its direct
subfolders only. Aggregates, handlers and repositories under
``<context>/<module>/`` are pulled in from here so every command handler
and custom repository is wired before the domain initializes.
"""

from storefront.catalogue.banner import banner  # noqa: F401
from storefront.catalogue.category import category, management as category_management  # noqa: F401
from storefront.catalogue.product import creation, events as product_events  # noqa: F401
from storefront.catalogue.product import management as product_management  # noqa: F401
from storefront.catalogue.product import product, repository as product_repository  # noqa: F401
from storefront.ordering.cart import cart, events as cart_events, items  # noqa: F401
from storefront.ordering.coupon import coupon, events as coupon_events  # noqa: F401
from storefront.ordering.coupon import management as coupon_management  # noqa: F401
from storefront.ordering.coupon import repository as coupon_repository  # noqa: F401
from storefront.ordering.order import administration, cancellation, checkout  # noqa: F401
from storefront.ordering.order import events as order_events, order  # noqa: F401
from storefront.ordering.order import repository as order_repository  # noqa: F401
from storefront.reviews.review import events as review_events, removal, review, submission  # noqa: F401
