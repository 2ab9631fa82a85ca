"""Shared BDD fixtures and step definitions for checkout."""

import json
from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when

from storefront.catalogue.product.product import Product
from storefront.ordering.cart.cart import Cart
from storefront.ordering.cart.items import AddToCart
from storefront.ordering.coupon.coupon import Coupon
from storefront.ordering.order.checkout import PlaceOrder
from storefront.ordering.order.order import Order

CUSTOMER = "cust-bdd-001"


@pytest.fixture()
def products():
    """Products created by the scenario, keyed by name."""
    return {}


@pytest.fixture()
def checkout():
    """Container for the checkout outcome."""
    return {"order_id": None, "exc": None}


def _product(products, name):
    return current_domain.repository_for(Product).get(products[name])


def _coupon(code):
    return current_domain.repository_for(Coupon).find_by_code(code, active_only=False)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:d} with {stock:d} in stock'))
def product_in_stock(make_product, products, name, price, stock):
    products[name] = str(make_product(name=name, price=price, stock=stock).id)


@given(parsers.cfparse('a percentage coupon "{code}" of {value:d} capped at {cap:d}'))
def capped_coupon(make_coupon, code, value, cap):
    make_coupon(code=code, discount_value=value, max_discount=cap)


@given(parsers.cfparse('an expired percentage coupon "{code}" of {value:d}'))
def expired_coupon(make_coupon, code, value):
    make_coupon(code=code, discount_value=value, expires_at=datetime.now(UTC) - timedelta(days=1))


@given(parsers.cfparse('the customer has {quantity:d} "{name}" in the cart'))
def cart_holds(products, quantity, name):
    current_domain.process(
        AddToCart(user_id=CUSTOMER, product_id=products[name], quantity=quantity),
        asynchronous=False,
    )


@given(parsers.cfparse('"{name}" stock is set to {stock:d}'))
def stock_changed(products, name, stock):
    product = _product(products, name)
    product.update_details(stock=stock)
    current_domain.repository_for(Product).add(product)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
def _place_order(checkout, address, coupon_code=None):
    try:
        checkout["order_id"] = current_domain.process(
            PlaceOrder(user_id=CUSTOMER, shipping_address=json.dumps(address), coupon_code=coupon_code),
            asynchronous=False,
        )
    except ValidationError as exc:
        checkout["exc"] = exc


@when("the customer checks out")
def checks_out(checkout, shipping_address):
    _place_order(checkout, shipping_address)


@when(parsers.cfparse('the customer checks out with coupon "{code}"'))
def checks_out_with_coupon(checkout, shipping_address, code):
    _place_order(checkout, shipping_address, coupon_code=code)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
def _order(checkout):
    assert checkout["exc"] is None, checkout["exc"]
    return current_domain.repository_for(Order).get(checkout["order_id"])


@then(parsers.cfparse("the order total is {total:d}"))
def order_total(checkout, total):
    assert _order(checkout).total == total


@then(parsers.cfparse("the order tax is {tax:d}"))
def order_tax(checkout, tax):
    assert _order(checkout).tax == tax


@then(parsers.cfparse("shipping costs {amount:d}"))
def shipping_cost(checkout, amount):
    assert _order(checkout).shipping_cost == amount


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock(products, name, stock):
    assert _product(products, name).stock == stock


@then("the cart is empty")
def cart_empty():
    assert current_domain.repository_for(Cart).get(CUSTOMER).items == []


@then(parsers.cfparse("the cart still holds {count:d} line"))
def cart_lines(count):
    assert len(current_domain.repository_for(Cart).get(CUSTOMER).items) == count


@then(parsers.cfparse('coupon "{code}" has been used {count:d} time'))
def coupon_used(code, count):
    assert _coupon(code).used_count == count


@then(parsers.cfparse('the checkout is rejected with "{key}"'))
def checkout_rejected(checkout, key):
    assert checkout["exc"] is not None
    assert key in checkout["exc"].messages


@then("no order exists")
def no_order():
    assert current_domain.repository_for(Order)._dao.query.all().items == []
