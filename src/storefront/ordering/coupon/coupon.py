"""Coupon aggregate and its evaluation rules.

Evaluation checks, in order: expiry, usage limit, minimum purchase; then
computes the discount. A percentage discount is capped by ``max_discount``;
any discount is capped by the subtotal so the discounted amount never goes
below zero.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from storefront.domain import storefront
from storefront.ordering.coupon.events import CouponCreated, CouponDeactivated, CouponRedeemed
from storefront.shared.money import format_currency


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FLAT = "flat"


class CouponRejection(Enum):
    """Error keys for coupons that exist but cannot be applied."""

    EXPIRED = "coupon_expired"
    EXHAUSTED = "coupon_exhausted"
    BELOW_MINIMUM = "coupon_below_minimum"


def normalize_code(code) -> str:
    return (code or "").strip().upper()


def _as_utc(moment: datetime) -> datetime:
    # Naive timestamps are stored in UTC
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


@storefront.aggregate
class Coupon:
    code = String(required=True, max_length=50)
    description = Text()
    discount_type = String(choices=DiscountType, required=True)
    discount_value = Float(required=True, min_value=0.0)
    max_discount = Float(min_value=0.0)
    min_purchase = Float(min_value=0.0)
    usage_limit = Integer(min_value=0)
    used_count = Integer(default=0, min_value=0)
    expires_at = DateTime()
    is_active = Boolean(default=True)
    created_at = DateTime()

    @invariant.post
    def used_count_within_usage_limit(self):
        if self.usage_limit is not None and (self.used_count or 0) > self.usage_limit:
            raise ValidationError({CouponRejection.EXHAUSTED.value: ["Coupon usage limit reached"]})

    @invariant.post
    def percentage_cannot_exceed_hundred(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and self.discount_value > 100:
            raise ValidationError({"discount_value": ["Percentage discount cannot exceed 100"]})

    @classmethod
    def create(
        cls,
        code,
        discount_type,
        discount_value,
        description=None,
        max_discount=None,
        min_purchase=None,
        usage_limit=None,
        expires_at=None,
    ):
        coupon = cls(
            code=normalize_code(code),
            description=description,
            discount_type=discount_type,
            discount_value=discount_value,
            max_discount=max_discount,
            min_purchase=min_purchase,
            usage_limit=usage_limit,
            used_count=0,
            expires_at=expires_at,
            created_at=datetime.now(UTC),
        )
        coupon.raise_(
            CouponCreated(coupon_id=coupon.id, code=coupon.code, discount_type=coupon.discount_type)
        )
        return coupon

    # -------------------------------------------------------------------
    # Evaluation (read-only)
    # -------------------------------------------------------------------
    def is_expired(self, now=None) -> bool:
        if self.expires_at is None:
            return False
        return _as_utc(self.expires_at) < _as_utc(now or datetime.now(UTC))

    @property
    def is_exhausted(self) -> bool:
        return self.usage_limit is not None and (self.used_count or 0) >= self.usage_limit

    def ensure_applicable(self, subtotal, now=None):
        """Raise ValidationError when the coupon cannot be used on ``subtotal``."""
        if self.is_expired(now):
            raise ValidationError({CouponRejection.EXPIRED.value: ["Coupon has expired"]})
        if self.is_exhausted:
            raise ValidationError({CouponRejection.EXHAUSTED.value: ["Coupon usage limit reached"]})
        if self.min_purchase and subtotal < self.min_purchase:
            raise ValidationError(
                {
                    CouponRejection.BELOW_MINIMUM.value: [
                        f"Minimum purchase of {format_currency(self.min_purchase)} required for this coupon"
                    ]
                }
            )

    def discount_for(self, subtotal) -> float:
        if self.discount_type == DiscountType.PERCENTAGE.value:
            discount = subtotal * self.discount_value / 100
            if self.max_discount:
                discount = min(discount, self.max_discount)
        else:
            discount = self.discount_value
        return max(min(discount, subtotal), 0)

    def quote(self, subtotal, now=None) -> float:
        self.ensure_applicable(subtotal, now)
        return self.discount_for(subtotal)

    def summary(self) -> dict:
        return {
            "id": str(self.id),
            "code": self.code,
            "description": self.description,
            "discount_type": self.discount_type,
            "discount_value": self.discount_value,
            "max_discount": self.max_discount,
            "min_purchase": self.min_purchase,
        }

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def redeem(self):
        """Count one use; a coupon at its usage limit cannot be redeemed again."""
        if self.is_exhausted:
            raise ValidationError({CouponRejection.EXHAUSTED.value: ["Coupon usage limit reached"]})
        self.used_count = (self.used_count or 0) + 1
        self.raise_(CouponRedeemed(coupon_id=self.id, code=self.code, used_count=self.used_count))

    def deactivate(self):
        self.is_active = False
        self.raise_(CouponDeactivated(coupon_id=self.id, code=self.code))
