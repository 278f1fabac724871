"""Tests for core domain models - custom validators and helpers only."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from core.models import (
    AppliedPromo, DurationDiscountRowCreate, OrderPricingResult, PerUnitAddOnCreate,
    PromoRejection, PromoResult, SubscriptionPlan,
)


class TestDurationDiscountRowCreate:

    def test_percent_bounded(self):
        with pytest.raises(ValidationError, match="discount_percent"):
            DurationDiscountRowCreate(duration_months=12, discount_percent=Decimal("101"))

    def test_months_positive(self):
        with pytest.raises(ValidationError, match="duration_months"):
            DurationDiscountRowCreate(duration_months=0)


class TestPerUnitAddOnCreate:

    def test_cap_below_step_rejected(self):
        with pytest.raises(ValidationError, match="at least one unit_step"):
            PerUnitAddOnCreate(
                label="Pages", price_per_unit=Decimal("5"),
                unit_step=Decimal("5"), max_quantity=Decimal("3"),
            )

    def test_zero_cap_allowed(self):
        """A zero cap disables the add-on without deleting it."""
        item = PerUnitAddOnCreate(label="Pages", price_per_unit=Decimal("5"), max_quantity=Decimal("0"))
        assert item.max_quantity == Decimal("0")


class TestSubscriptionPlan:

    def test_months(self):
        assert SubscriptionPlan(years=3).months == 36

    def test_negative_override_rejected(self):
        with pytest.raises(ValidationError):
            SubscriptionPlan(years=1, price_base_override=Decimal("-1"))


class TestOrderPricingResult:

    def test_pre_promo_total(self):
        result = OrderPricingResult(
            months=12, subtotal_base=Decimal("100"), add_ons_base=Decimal("12"),
            total_base=Decimal("112"), base_currency="USD", display_currency="IDR",
        )
        assert result.pre_promo_total_base == Decimal("112")
        assert result.is_available

    def test_unavailable(self):
        result = OrderPricingResult(months=12, base_currency="USD", display_currency="IDR")
        assert result.pre_promo_total_base is None
        assert not result.is_available


class TestAppliedPromo:

    def _accepted(self, subtotal="100"):
        return PromoResult(
            ok=True, code="HEMAT", promo_id="p1", discount_base=Decimal("10"),
            final_total_base=Decimal(subtotal) - 10, subtotal_base=Decimal(subtotal),
        )

    def test_from_accepted_result(self):
        applied = AppliedPromo.from_result(self._accepted())
        assert applied.code == "HEMAT"
        assert applied.subtotal_base == Decimal("100")

    def test_from_rejected_result_raises(self):
        with pytest.raises(ValueError, match="rejected promo"):
            AppliedPromo.from_result(PromoResult(ok=False, reason=PromoRejection.NOT_FOUND))

    def test_stale_when_subtotal_changes(self):
        applied = AppliedPromo.from_result(self._accepted())
        assert not applied.is_stale_for(Decimal("100"))
        assert applied.is_stale_for(Decimal("150"))
        assert applied.is_stale_for(None)
