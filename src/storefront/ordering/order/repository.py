"""Order queries for customers and the admin dashboard."""

from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.identity.profile import Profile
from storefront.ordering.order.order import Order, OrderStatus, PaymentStatus
from storefront.shared.paging import Page, fetch_page, iterate_all


def _count(query) -> int:
    return query.limit(1).all().total


@storefront.repository(part_of=Order)
class OrderRepository:
    def for_user(self, user_id, page: Page, status=None):
        query = self._dao.query.filter(user_id=str(user_id))
        if status:
            query = query.filter(status=status)
        result = fetch_page(query.order_by("-created_at"), page)
        return result.items, page.meta(result.total)

    def admin_listing(self, page: Page, status=None, search=None):
        query = self._dao.query
        if status:
            query = query.filter(status=status)
        if search:
            query = query.filter(order_number__contains=search.strip().upper())
        result = fetch_page(query.order_by("-created_at"), page)
        return result.items, page.meta(result.total)

    def dashboard_stats(self) -> dict:
        """Headline numbers for the admin dashboard; revenue counts paid orders only."""
        orders = self._dao.query
        paid = orders.filter(payment_status=PaymentStatus.PAID.value).order_by("created_at")
        revenue = sum(order.total or 0 for order in iterate_all(paid))
        return {
            "total_orders": _count(orders.filter()),
            "pending_orders": _count(orders.filter(status=OrderStatus.PENDING.value)),
            "total_revenue": revenue,
            "total_products": _count(current_domain.repository_for(Product)._dao.query.filter(is_active=True)),
            "total_users": _count(current_domain.repository_for(Profile)._dao.query.filter()),
        }
