"""Order cancellation by the customer, with stock returned to the shelf."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.ordering.order.order import Order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)


def restore_stock(order):
    """Return every item's quantity to its variant (or product) stock."""
    repo = current_domain.repository_for(Product)
    products: dict[str, Product] = {}
    for item in order.items:
        key = str(item.product_id)
        if key not in products:
            try:
                products[key] = repo.get(key)
            except ObjectNotFoundError:
                logger.warning("Product missing while restoring stock", order_id=str(order.id), product_id=key)
                continue
        products[key].restock(item.quantity, variant_id=item.variant_id, reason="cancellation")
    for product in products.values():
        repo.add(product)


def get_order_for_user(order_id, user_id) -> Order:
    """Load an order owned by ``user_id``; other users' orders are reported as missing."""
    order = current_domain.repository_for(Order).get(order_id)
    if str(order.user_id) != str(user_id):
        raise ObjectNotFoundError(f"Order `{order_id}` does not exist")
    return order


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = get_order_for_user(command.order_id, command.user_id)
        order.cancel(cancelled_by="customer")
        current_domain.repository_for(Order).add(order)
        restore_stock(order)
        logger.info("Order cancelled", order_id=str(order.id), user_id=str(command.user_id))
