"""Order aggregate: header, shipping address and an immutable line snapshot.

Order items copy product name, image, variant name and price at purchase
time; later catalogue edits never reach placed orders.

Status transitions:
    pending    -> confirmed | processing | cancelled
    confirmed  -> processing | shipped | cancelled
    processing -> shipped | cancelled
    shipped    -> delivered
    delivered  -> refunded
    cancelled  -> refunded
    refunded   (terminal)
Customers may cancel only while the order is pending or confirmed.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.ordering.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    PaymentStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.REFUNDED},
    OrderStatus.CANCELLED: {OrderStatus.REFUNDED},
    OrderStatus.REFUNDED: set(),
}

CUSTOMER_CANCELLABLE = {OrderStatus.PENDING, OrderStatus.CONFIRMED}

_REQUIRED_ADDRESS_FIELDS = ("recipient_name", "phone", "street", "city", "province")


def allowed_transitions(status) -> set:
    return _VALID_TRANSITIONS[OrderStatus(status)]


def generate_order_number(now=None) -> str:
    now = now or datetime.now(UTC)
    return f"ORD-{now:%Y%m%d}-{uuid4().hex[:8].upper()}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    recipient_name = String(required=True, max_length=150)
    phone = String(required=True, max_length=30)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    province = String(required=True, max_length=100)
    postal_code = String(max_length=20)

    @classmethod
    def from_dict(cls, data) -> "ShippingAddress":
        """Build an address, rejecting blank or missing required fields."""
        data = data or {}
        missing = [f for f in _REQUIRED_ADDRESS_FIELDS if not str(data.get(f) or "").strip()]
        if missing:
            raise ValidationError({"shipping_address": [f"Shipping address is incomplete: missing {', '.join(missing)}"]})
        return cls(
            **{f: str(data[f]).strip() for f in _REQUIRED_ADDRESS_FIELDS},
            postal_code=str(data.get("postal_code") or "").strip() or None,
        )

    def to_dict(self) -> dict:
        return {
            "recipient_name": self.recipient_name,
            "phone": self.phone,
            "street": self.street,
            "city": self.city,
            "province": self.province,
            "postal_code": self.postal_code,
        }


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    variant_id = Identifier()
    product_name = String(required=True, max_length=255)
    product_image = String(max_length=500)
    variant_name = String(max_length=100)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    subtotal = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=30)
    user_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.UNPAID.value)
    payment_method = String(max_length=50)
    subtotal = Float(required=True, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    shipping_cost = Float(default=0.0, min_value=0.0)
    tax = Float(default=0.0)
    total = Float(required=True)
    coupon_code = String(max_length=50)
    shipping_address = ValueObject(ShippingAddress)
    notes = Text()
    tracking_number = String(max_length=100)
    items = HasMany(OrderItem)
    created_at = DateTime()
    updated_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()

    @invariant.post
    def total_must_balance(self):
        expected = (self.subtotal or 0) - (self.discount or 0) + (self.shipping_cost or 0) + (self.tax or 0)
        if abs(expected - (self.total or 0)) > 0.005:
            raise ValidationError({"total": ["Total must equal subtotal - discount + shipping + tax"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, lines, shipping_address, totals, payment_method, notes=None, coupon_code=None):
        """Create a pending, unpaid order.

        Args:
            lines: dicts with product_id, variant_id, product_name,
                product_image, variant_name, price, quantity, subtotal.
            shipping_address: a ShippingAddress.
            totals: an OrderTotals from the pricing rules.
        """
        if not lines:
            raise ValidationError({"cart": ["Cart is empty"]})

        now = datetime.now(UTC)
        order = cls(
            order_number=generate_order_number(now),
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.UNPAID.value,
            payment_method=payment_method,
            subtotal=totals.subtotal,
            discount=totals.discount,
            shipping_cost=totals.shipping_cost,
            tax=totals.tax,
            total=totals.total,
            coupon_code=coupon_code,
            shipping_address=shipping_address,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(OrderItem(**line))

        order.raise_(
            OrderPlaced(
                order_id=order.id,
                order_number=order.order_number,
                user_id=str(user_id),
                item_count=sum(line["quantity"] for line in lines),
                subtotal=order.subtotal,
                discount=order.discount,
                shipping_cost=order.shipping_cost,
                tax=order.tax,
                total=order.total,
                coupon_code=coupon_code,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target: OrderStatus):
        current = OrderStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

    def transition_to(self, status):
        try:
            target = OrderStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status '{status}'"]}) from None
        self._assert_can_transition(target)

        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        if target == OrderStatus.SHIPPED:
            self.shipped_at = now
        elif target == OrderStatus.DELIVERED:
            self.delivered_at = now
        elif target == OrderStatus.CANCELLED:
            self.cancelled_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )

    def cancel(self, cancelled_by="customer"):
        """Cancel the order. Customers can only cancel pending or confirmed orders."""
        if cancelled_by == "customer" and OrderStatus(self.status) not in CUSTOMER_CANCELLABLE:
            raise ValidationError({"status": ["Order can no longer be cancelled"]})

        self.transition_to(OrderStatus.CANCELLED)
        self.raise_(
            OrderCancelled(
                order_id=self.id,
                user_id=str(self.user_id),
                cancelled_by=cancelled_by,
                cancelled_at=self.cancelled_at,
            )
        )

    # -------------------------------------------------------------------
    # Payment and fulfilment details
    # -------------------------------------------------------------------
    def set_payment_status(self, payment_status):
        try:
            target = PaymentStatus(payment_status)
        except ValueError:
            raise ValidationError({"payment_status": [f"Unknown payment status '{payment_status}'"]}) from None
        if target.value == self.payment_status:
            return

        previous = self.payment_status
        self.payment_status = target.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            PaymentStatusChanged(
                order_id=self.id,
                previous_status=previous,
                new_status=target.value,
            )
        )

    def set_tracking_number(self, tracking_number):
        self.tracking_number = tracking_number
        self.updated_at = datetime.now(UTC)
