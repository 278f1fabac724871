"""
Order pricing pipeline.

Wires the pricing steps together:

    base price + duration discounts -> subscription subtotal
    subscription subtotal + add-ons -> pre-promo total
    pre-promo total - promo (floored at zero) -> total_base
    total_base x exchange rate (rounded once) -> total_display

Every call takes a fresh snapshot and returns a fresh result. Nothing is
cached between calls and nothing is mutated, so identical inputs always give
equal results.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Mapping

from core.config import PricingConfig
from core.models import (
    DurationDiscountRow, DurationOption, FlatAddOn, OrderPricingResult, PerUnitAddOn,
    PriceConfiguration, PromoCode, SubscriptionPlan, UnavailableReason,
)
from core.pricing.add_ons import BUILTIN_PER_UNIT_ADD_ONS, merge_builtin_add_ons, sum_add_ons
from core.pricing.base_price import MONTHS_PER_YEAR, resolve_base_annual
from core.pricing.currency import to_display
from core.pricing.durations import DurationDiscountTable
from core.pricing.promo import apply_promo, normalize_code
from core.pricing.totals import compute_subscription_total
from utils.money import is_finite, settle, working_precision

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricingSnapshot:
    """Everything the engine reads for one package, captured at one instant."""

    package_id: str
    price: PriceConfiguration | None = None
    duration_rows: tuple[DurationDiscountRow, ...] = ()
    plans: tuple[SubscriptionPlan, ...] = ()
    flat_add_ons: tuple[FlatAddOn, ...] = ()
    per_unit_add_ons: tuple[PerUnitAddOn, ...] = ()
    promo_codes: tuple[PromoCode, ...] = ()

    @property
    def discount_table(self) -> DurationDiscountTable:
        return DurationDiscountTable.from_rows(
            r for r in self.duration_rows if r.package_id == self.package_id
        )

    @property
    def per_unit_catalog(self) -> list[PerUnitAddOn]:
        """Per-unit add-ons with the built-ins merged in."""
        return merge_builtin_add_ons(self.per_unit_add_ons, BUILTIN_PER_UNIT_ADD_ONS)


@dataclass(frozen=True)
class OrderSelection:
    """What the customer picked."""

    months: int
    selected_add_ons: Mapping[str, bool] = field(default_factory=dict)
    add_on_quantities: Mapping[str, object] = field(default_factory=dict)
    promo_code: str | None = None

    def __post_init__(self):
        if isinstance(self.months, bool) or not isinstance(self.months, int) or self.months < 1:
            raise ValueError(f"months must be a positive integer, got {self.months!r}")

    @classmethod
    def from_years(cls, years: int, **kwargs) -> "OrderSelection":
        return cls(months=years * MONTHS_PER_YEAR, **kwargs)


class PricingEngine:
    """
    Computes order prices from configuration snapshots.

    Usage:
        engine = PricingEngine(PricingConfig())
        result = engine.quote(snapshot, OrderSelection.from_years(2, promo_code="HEMAT"))
        if result.is_available:
            charge(result.total_base)
    """

    def __init__(self, config: PricingConfig | None = None):
        self.config = config or PricingConfig()

    def _unavailable(self, months: int, reason: UnavailableReason, **fields) -> OrderPricingResult:
        logger.info(f"Order total unavailable for {months} months: {reason.value}")
        return OrderPricingResult(
            months=months,
            base_currency=self.config.base_currency,
            display_currency=self.config.display_currency,
            unavailable_reason=reason,
            **fields,
        )

    def _display(self, amount_base: Decimal | None) -> Decimal | None:
        """Display amount, None when it cannot be represented."""
        try:
            return to_display(
                amount_base,
                self.config.exchange_rate,
                self.config.display_fraction_digits,
            )
        except ArithmeticError:
            logger.warning(f"Display conversion failed for {amount_base!r}")
            return None

    def no_package(self, selection: OrderSelection) -> OrderPricingResult:
        """Result for a checkout that has no package selected yet."""
        return self._unavailable(selection.months, UnavailableReason.NO_PACKAGE)

    def quote(
        self,
        snapshot: PricingSnapshot,
        selection: OrderSelection,
        at: datetime | None = None,
    ) -> OrderPricingResult:
        """
        Price an order.

        Args:
            snapshot: Configuration for the selected package
            selection: Duration, add-ons and promo code text
            at: Instant for promo validity windows (defaults to now)

        Returns:
            OrderPricingResult. When the base price is missing or any amount
            is not finite, totals are None and unavailable_reason is set.
        """
        months = selection.months
        logger.debug(f"Quoting package {snapshot.package_id} for {months} months")

        try:
            add_ons = sum_add_ons(
                snapshot.flat_add_ons,
                snapshot.per_unit_catalog,
                selection.selected_add_ons,
                selection.add_on_quantities,
            )
        except ArithmeticError:
            logger.exception(f"Arithmetic failure summing add-ons for package {snapshot.package_id}")
            return self._unavailable(months, UnavailableReason.NON_FINITE)

        base = resolve_base_annual(snapshot.price)
        if base is None:
            promo = None
            if normalize_code(selection.promo_code):
                promo = apply_promo(selection.promo_code, None, snapshot.promo_codes, at)
            return self._unavailable(
                months,
                UnavailableReason.PRICE_MISSING,
                add_ons_base=add_ons.amount,
                add_on_lines=list(add_ons.lines),
                promo=promo,
            )

        try:
            subscription = compute_subscription_total(
                base, snapshot.discount_table, snapshot.plans, months,
            )
            with working_precision():
                pre_promo = subscription.amount + add_ons.amount
            pre_promo = settle(pre_promo)
        except ArithmeticError:
            logger.exception(f"Arithmetic failure pricing package {snapshot.package_id}")
            return self._unavailable(months, UnavailableReason.NON_FINITE)

        if not is_finite(pre_promo):
            return self._unavailable(months, UnavailableReason.NON_FINITE, mode=subscription.mode)

        promo = None
        discount = Decimal("0")
        total = pre_promo
        if normalize_code(selection.promo_code):
            promo = apply_promo(selection.promo_code, pre_promo, snapshot.promo_codes, at)
            if promo.ok:
                discount = promo.discount_base
                total = promo.final_total_base

        total_display = self._display(total)
        if total_display is None:
            return self._unavailable(months, UnavailableReason.NON_FINITE, mode=subscription.mode)

        return OrderPricingResult(
            months=months,
            mode=subscription.mode,
            discount_percent=subscription.discount_percent,
            subtotal_base=subscription.amount,
            add_ons_base=add_ons.amount,
            add_on_lines=list(add_ons.lines),
            discount_applied=discount,
            promo=promo,
            total_base=total,
            total_display=total_display,
            base_currency=self.config.base_currency,
            display_currency=self.config.display_currency,
        )

    def duration_options(
        self,
        snapshot: PricingSnapshot,
        plans: list[SubscriptionPlan] | None = None,
    ) -> list[DurationOption]:
        """
        Choices for the duration picker, one per active plan.

        Totals exclude add-ons and promo, and use the same mode chain as
        quote() so the picker and the payment page always agree.
        """
        plans = plans if plans is not None else list(snapshot.plans)
        base = resolve_base_annual(snapshot.price)
        table = snapshot.discount_table

        options = []
        for plan in sorted(plans, key=lambda p: (p.sort_order, p.years)):
            if not plan.is_active:
                continue

            try:
                subscription = compute_subscription_total(base, table, plans, plan.months)
            except ArithmeticError:
                logger.exception(f"Arithmetic failure pricing {plan.years}-year option")
                subscription = None

            total_display = self._display(subscription.amount) if subscription else None
            if total_display is None:
                # An option is shown with both totals or neither
                subscription = None

            options.append(DurationOption(
                years=plan.years,
                months=plan.months,
                label=plan.label,
                discount_percent=table.lookup(plan.months),
                mode=subscription.mode if subscription else None,
                total_base=subscription.amount if subscription else None,
                total_display=total_display,
            ))

        return options
