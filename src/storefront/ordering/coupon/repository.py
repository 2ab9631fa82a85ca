from storefront.domain import storefront
from storefront.ordering.coupon.coupon import Coupon, normalize_code


@storefront.repository(part_of=Coupon)
class CouponRepository:
    def find_by_code(self, code, active_only=True):
        filters = {"code": normalize_code(code)}
        if active_only:
            filters["is_active"] = True
        items = self._dao.query.filter(**filters).limit(1).all().items
        return items[0] if items else None

    def listing(self):
        return self._dao.query.order_by("-created_at").all().items
