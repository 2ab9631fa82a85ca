"""The custom repositories and command handlers are registered with the domain."""

from protean import current_domain

from storefront.catalogue.product.product import Product
from storefront.catalogue.product.repository import ProductRepository
from storefront.ordering.coupon.coupon import Coupon
from storefront.ordering.coupon.repository import CouponRepository
from storefront.ordering.order.checkout import PlaceOrder, PlaceOrderHandler
from storefront.ordering.order.order import Order
from storefront.ordering.order.repository import OrderRepository


class TestRepositories:
    def test_coupon_repository(self):
        assert isinstance(current_domain.repository_for(Coupon), CouponRepository)

    def test_order_repository(self):
        assert isinstance(current_domain.repository_for(Order), OrderRepository)

    def test_product_repository(self):
        assert isinstance(current_domain.repository_for(Product), ProductRepository)


class TestCommandHandlers:
    def test_place_order_has_a_handler(self):
        assert current_domain.command_handler_for(PlaceOrder(user_id="user-001")) is PlaceOrderHandler
