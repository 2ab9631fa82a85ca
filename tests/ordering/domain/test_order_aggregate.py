"""Tests for the Order aggregate: placement, address validation and status transitions."""

import pytest
from protean.exceptions import ValidationError

from storefront.ordering.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from storefront.ordering.order.order import (
    Order,
    OrderStatus,
    PaymentStatus,
    ShippingAddress,
    allowed_transitions,
    generate_order_number,
)
from storefront.ordering.pricing import price_order


def _line(**overrides):
    line = {
        "product_id": "prod-001",
        "variant_id": None,
        "product_name": "Kaos Polos",
        "product_image": "https://cdn.example.test/kaos.jpg",
        "variant_name": None,
        "price": 60000,
        "quantity": 2,
        "subtotal": 120000,
    }
    line.update(overrides)
    return line


@pytest.fixture()
def order(shipping_address):
    return Order.place(
        user_id="user-001",
        lines=[_line()],
        shipping_address=ShippingAddress.from_dict(shipping_address),
        totals=price_order(120000, 10000),
        payment_method="transfer",
        coupon_code="HEMAT10",
    )


class TestShippingAddress:
    def test_from_dict(self, shipping_address):
        address = ShippingAddress.from_dict(shipping_address)
        assert address.city == "Bandung"
        assert address.to_dict() == shipping_address

    def test_postal_code_optional(self, shipping_address):
        shipping_address.pop("postal_code")
        assert ShippingAddress.from_dict(shipping_address).postal_code is None

    @pytest.mark.parametrize("field", ["recipient_name", "phone", "street", "city", "province"])
    def test_required_field_missing(self, shipping_address, field):
        shipping_address[field] = "   "

        with pytest.raises(ValidationError) as exc:
            ShippingAddress.from_dict(shipping_address)

        assert "shipping_address" in exc.value.messages

    def test_no_address(self):
        with pytest.raises(ValidationError):
            ShippingAddress.from_dict(None)


class TestPlacement:
    def test_starts_pending_and_unpaid(self, order):
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.UNPAID.value

    def test_totals_copied(self, order):
        assert order.subtotal == 120000
        assert order.discount == 10000
        assert order.shipping_cost == 0
        assert order.tax == 12100
        assert order.total == 122100

    def test_items_snapshot(self, order):
        assert len(order.items) == 1
        assert order.items[0].product_name == "Kaos Polos"
        assert order.items[0].price == 60000

    def test_order_number_format(self, order):
        assert order.order_number.startswith("ORD-")
        assert len(order.order_number) == len("ORD-20260101-ABCDEF12")

    def test_order_numbers_differ(self):
        assert generate_order_number() != generate_order_number()

    def test_raises_order_placed(self, order):
        event = order._events[-1]
        assert isinstance(event, OrderPlaced)
        assert event.total == 122100
        assert event.item_count == 2

    def test_empty_lines_rejected(self, shipping_address):
        with pytest.raises(ValidationError):
            Order.place(
                user_id="user-001",
                lines=[],
                shipping_address=ShippingAddress.from_dict(shipping_address),
                totals=price_order(0),
                payment_method="transfer",
            )


class TestTransitions:
    def test_happy_path(self, order):
        for status in ("confirmed", "processing", "shipped", "delivered"):
            order.transition_to(status)

        assert order.status == OrderStatus.DELIVERED.value
        assert order.shipped_at is not None
        assert order.delivered_at is not None

    def test_skipping_to_delivered_rejected(self, order):
        with pytest.raises(ValidationError):
            order.transition_to("delivered")
        assert order.status == OrderStatus.PENDING.value

    def test_unknown_status_rejected(self, order):
        with pytest.raises(ValidationError):
            order.transition_to("teleported")

    def test_refunded_is_terminal(self, order):
        order.transition_to("cancelled")
        order.transition_to("refunded")
        assert allowed_transitions(order.status) == set()

    def test_raises_status_changed(self, order):
        order.transition_to("confirmed")

        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "pending"
        assert event.new_status == "confirmed"


class TestCancellation:
    @pytest.mark.parametrize("path", [[], ["confirmed"]])
    def test_customer_cancels_early_order(self, order, path):
        for status in path:
            order.transition_to(status)
        order.cancel()

        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancelled_at is not None
        assert isinstance(order._events[-1], OrderCancelled)

    @pytest.mark.parametrize("path", [["processing"], ["confirmed", "shipped"], ["processing", "shipped", "delivered"]])
    def test_customer_cannot_cancel_later(self, order, path):
        for status in path:
            order.transition_to(status)

        with pytest.raises(ValidationError) as exc:
            order.cancel()

        assert exc.value.messages == {"status": ["Order can no longer be cancelled"]}

    def test_admin_can_cancel_processing_order(self, order):
        order.transition_to("processing")
        order.cancel(cancelled_by="admin")
        assert order.status == OrderStatus.CANCELLED.value

    def test_cancelled_order_cannot_be_cancelled_again(self, order):
        order.cancel()
        with pytest.raises(ValidationError):
            order.cancel()


class TestPayment:
    def test_set_payment_status(self, order):
        order.set_payment_status("paid")
        assert order.payment_status == PaymentStatus.PAID.value

    def test_unknown_payment_status(self, order):
        with pytest.raises(ValidationError):
            order.set_payment_status("maybe")
