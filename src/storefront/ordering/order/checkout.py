"""PlaceOrder: turn the caller's cart into an order.

The handler validates everything first (address, cart, availability, stock,
coupon), then places the order, redeems the coupon, takes stock and clears
the cart. All of it runs in the handler's unit of work, so a failure at any
step leaves no order, no stock movement and the cart untouched.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.ordering.cart.cart import Cart
from storefront.ordering.cart.summary import cart_lines
from storefront.ordering.coupon.coupon import Coupon, normalize_code
from storefront.ordering.order.order import Order, ShippingAddress
from storefront.ordering.pricing import DEFAULT_PAYMENT_METHOD, price_order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    shipping_address = Text()  # JSON: recipient_name, phone, street, city, province, postal_code
    payment_method = String(max_length=50)
    notes = Text()
    coupon_code = String(max_length=50)


def _snapshot(line) -> dict:
    product, variant = line.product, line.variant
    return {
        "product_id": str(product.id),
        "variant_id": str(variant.id) if variant is not None else None,
        "product_name": product.name,
        "product_image": product.primary_image_url,
        "variant_name": variant.name if variant is not None else None,
        "price": line.unit_price,
        "quantity": line.quantity,
        "subtotal": line.line_total,
    }


def _check_line(line):
    product = line.product
    if not product.is_active or (line.variant_id and line.variant is None):
        raise ValidationError({"product": [f'Product "{product.name}" is no longer available']})
    if line.quantity > line.available_stock:
        raise ValidationError(
            {"stock": [f'Insufficient stock for "{product.name}" (available: {line.available_stock})']}
        )


def _coupon_discount(code, subtotal):
    coupon = current_domain.repository_for(Coupon).find_by_code(code)
    if coupon is None:
        raise ValidationError({"coupon_code": [f"Coupon {code} is not valid. Please check the code and try again"]})
    return coupon, coupon.quote(subtotal)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        raw_address = command.shipping_address
        address = ShippingAddress.from_dict(json.loads(raw_address) if isinstance(raw_address, str) else raw_address)

        lines = cart_lines(command.user_id)
        if not lines:
            raise ValidationError({"cart": ["Cart is empty"]})

        snapshot = []
        subtotal = 0
        for line in lines:
            _check_line(line)
            subtotal += line.line_total
            snapshot.append(_snapshot(line))

        coupon, discount = None, 0
        coupon_code = normalize_code(command.coupon_code) or None
        if coupon_code:
            coupon, discount = _coupon_discount(coupon_code, subtotal)

        totals = price_order(subtotal, discount)

        order = Order.place(
            user_id=command.user_id,
            lines=snapshot,
            shipping_address=address,
            totals=totals,
            payment_method=command.payment_method or DEFAULT_PAYMENT_METHOD,
            notes=command.notes,
            coupon_code=coupon_code if coupon else None,
        )
        current_domain.repository_for(Order).add(order)

        if coupon is not None:
            coupon.redeem()
            current_domain.repository_for(Coupon).add(coupon)

        products: dict[str, Product] = {}
        for line in lines:
            product = products.setdefault(str(line.product.id), line.product)
            product.sell(line.quantity, variant_id=line.variant_id)
        product_repo = current_domain.repository_for(Product)
        for product in products.values():
            product_repo.add(product)

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.get(command.user_id)
        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=str(command.user_id),
            total=order.total,
            coupon_code=order.coupon_code,
        )
        return str(order.id)
