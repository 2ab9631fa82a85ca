"""Application tests for coupon validation and admin coupon commands."""

from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.ordering.coupon.coupon import Coupon
from storefront.ordering.coupon.management import CreateCoupon, DeactivateCoupon
from storefront.ordering.coupon.validation import validate_coupon


class TestValidateCoupon:
    def test_valid_coupon_quotes_discount(self, make_coupon):
        make_coupon(max_discount=10000)

        quote = validate_coupon("hemat10", 120000)

        assert quote.valid is True
        assert quote.discount == 10000
        assert quote.coupon.code == "HEMAT10"

    def test_validation_never_counts_a_use(self, make_coupon):
        coupon = make_coupon(usage_limit=1)

        validate_coupon("HEMAT10", 100000)
        validate_coupon("HEMAT10", 100000)

        assert current_domain.repository_for(Coupon).get(coupon.id).used_count == 0

    def test_unknown_code(self):
        with pytest.raises(ObjectNotFoundError):
            validate_coupon("NOPE", 100000)

    def test_blank_code(self):
        with pytest.raises(ValidationError) as exc:
            validate_coupon("  ", 100000)
        assert exc.value.messages == {"code": ["Coupon code is required"]}

    def test_inactive_coupon_is_unknown(self, make_coupon):
        coupon = make_coupon()
        current_domain.process(DeactivateCoupon(coupon_id=coupon.id), asynchronous=False)

        with pytest.raises(ObjectNotFoundError):
            validate_coupon("HEMAT10", 100000)

    def test_expired(self, make_coupon):
        make_coupon(expires_at=datetime.now(UTC) - timedelta(days=1))

        with pytest.raises(ValidationError) as exc:
            validate_coupon("HEMAT10", 100000)
        assert "coupon_expired" in exc.value.messages

    def test_explicit_evaluation_instant(self, make_coupon):
        make_coupon(expires_at=datetime(2026, 3, 1, tzinfo=UTC))

        quote = validate_coupon("HEMAT10", 100000, now=datetime(2026, 2, 1, tzinfo=UTC))
        assert quote.discount == 10000


class TestCreateCoupon:
    def test_create(self):
        coupon_id = current_domain.process(
            CreateCoupon(code="potong25k", discount_type="flat", discount_value=25000, min_purchase=200000),
            asynchronous=False,
        )

        coupon = current_domain.repository_for(Coupon).get(coupon_id)
        assert coupon.code == "POTONG25K"
        assert coupon.min_purchase == 200000

    def test_duplicate_code_rejected(self, make_coupon):
        make_coupon()

        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                CreateCoupon(code="HEMAT10", discount_type="percentage", discount_value=5),
                asynchronous=False,
            )
        assert "code" in exc.value.messages
