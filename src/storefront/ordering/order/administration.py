"""Admin order updates: status, payment status and tracking number."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.cancellation import restore_stock
from storefront.ordering.order.order import Order, OrderStatus
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(max_length=20)
    payment_status = String(max_length=20)
    tracking_number = String(max_length=100)


@storefront.command_handler(part_of=Order)
class OrderAdministrationHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if command.status and command.status != order.status:
            if command.status == OrderStatus.CANCELLED.value:
                order.cancel(cancelled_by="admin")
                restore_stock(order)
            else:
                order.transition_to(command.status)
        if command.payment_status:
            order.set_payment_status(command.payment_status)
        if command.tracking_number is not None:
            order.set_tracking_number(command.tracking_number)

        repo.add(order)
        logger.info(
            "Order updated by admin",
            order_id=str(order.id),
            status=order.status,
            payment_status=order.payment_status,
        )
