"""Admin coupon commands."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.coupon.coupon import Coupon, normalize_code
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Coupon")
class CreateCoupon:
    code = String(required=True, max_length=50)
    description = Text()
    discount_type = String(required=True, max_length=20)
    discount_value = Float(required=True, min_value=0.0)
    max_discount = Float(min_value=0.0)
    min_purchase = Float(min_value=0.0)
    usage_limit = Integer(min_value=0)
    expires_at = DateTime()


@storefront.command(part_of="Coupon")
class DeactivateCoupon:
    coupon_id = Identifier(required=True)


@storefront.command_handler(part_of=Coupon)
class ManageCouponHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        code = normalize_code(command.code)
        if repo.find_by_code(code, active_only=False) is not None:
            raise ValidationError({"code": [f"Coupon code '{code}' already exists"]})

        coupon = Coupon.create(
            code=code,
            description=command.description,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
            max_discount=command.max_discount,
            min_purchase=command.min_purchase,
            usage_limit=command.usage_limit,
            expires_at=command.expires_at,
        )
        repo.add(coupon)
        logger.info("Coupon created", coupon_code=code, discount_type=coupon.discount_type)
        return str(coupon.id)

    @handle(DeactivateCoupon)
    def deactivate_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.get(command.coupon_id)
        coupon.deactivate()
        repo.add(coupon)
