"""Coupon validation against a cart subtotal.

``validate_coupon`` is read-only: it never counts a use. The usage counter
moves only when an order that applies the coupon is placed, so a coupon can
pass validation and still be rejected at checkout once it runs out.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.ordering.coupon.coupon import Coupon, normalize_code


@dataclass(frozen=True)
class CouponQuote:
    valid: bool
    discount: float
    coupon: Coupon


def find_active_coupon(code) -> Coupon:
    normalized = normalize_code(code)
    if not normalized:
        raise ValidationError({"code": ["Coupon code is required"]})
    coupon = current_domain.repository_for(Coupon).find_by_code(normalized)
    if coupon is None:
        raise ObjectNotFoundError("Invalid coupon")
    return coupon


def validate_coupon(code, subtotal, now=None) -> CouponQuote:
    """Check ``code`` against ``subtotal`` and compute the discount it would give.

    Raises ObjectNotFoundError for unknown or inactive codes and
    ValidationError when the coupon is expired, used up, or the subtotal is
    below its minimum purchase.
    """
    coupon = find_active_coupon(code)
    discount = coupon.quote(subtotal or 0, now=now)
    return CouponQuote(valid=True, discount=discount, coupon=coupon)
