"""
Subscription totals.

Exactly one pricing mode applies per computation, chosen in this order:

1. The package has any active duration discount row: monthly price x months,
   less that duration's discount (0% when the duration has no row).
2. A legacy plan override exists for the requested year count: the override
   is the subtotal.
3. Otherwise (domain + package) x years.

No currency rounding happens here. Display rounding is done once, in
core.pricing.currency.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from core.models import PricingMode, SubscriptionPlan
from core.pricing.base_price import BaseAnnualPrice, MONTHS_PER_YEAR
from core.pricing.durations import DurationDiscountTable, clamp_percent
from utils.money import settle, to_decimal, working_precision

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def compute_discounted_total(monthly_price, months: int, discount_percent) -> Decimal:
    """
    Discounted total for a subscription length.

    Args:
        monthly_price: Price per month in the base currency (>= 0)
        months: Subscription length (> 0)
        discount_percent: Discount, clamped to [0, 100]

    Returns:
        monthly_price * months * (1 - discount_percent / 100), unrounded.

    Raises:
        ValueError: If monthly_price is negative or not finite, or months < 1
    """
    monthly = to_decimal(monthly_price)
    if monthly is None or monthly < 0:
        raise ValueError(f"monthly_price must be a finite non-negative number, got {monthly_price!r}")
    if isinstance(months, bool) or not isinstance(months, int) or months < 1:
        raise ValueError(f"months must be a positive integer, got {months!r}")

    percent = clamp_percent(discount_percent)

    with working_precision():
        raw = monthly * months
        total = raw * (_HUNDRED - percent) / _HUNDRED

    return settle(total)


@dataclass(frozen=True)
class SubscriptionTotal:
    """Subscription subtotal and the mode that produced it."""

    amount: Decimal
    mode: PricingMode
    discount_percent: Decimal = _ZERO


def find_plan_override(plans: Iterable[SubscriptionPlan], months: int) -> Decimal | None:
    """Override price for the plan whose year count matches months, if any."""
    if months % MONTHS_PER_YEAR:
        return None

    override = None
    for plan in plans:
        if not plan.is_active or plan.months != months:
            continue
        if plan.price_base_override is not None:
            override = to_decimal(plan.price_base_override)
    return override


def compute_subscription_total(
    base: BaseAnnualPrice | None,
    table: DurationDiscountTable,
    plans: Iterable[SubscriptionPlan],
    months: int,
) -> SubscriptionTotal | None:
    """
    Subscription subtotal before add-ons and promo.

    Args:
        base: Resolved annual prices, or None when unavailable
        table: Active duration discounts for the package
        plans: Legacy subscription plans
        months: Requested subscription length

    Returns:
        SubscriptionTotal, or None when the base price is unavailable.
        The base price must be sound for every mode, including overrides.
    """
    if months < 1:
        raise ValueError(f"months must be positive, got {months}")

    if base is None:
        return None

    if table.has_any_active_row:
        percent = table.lookup(months)
        return SubscriptionTotal(
            amount=compute_discounted_total(base.monthly, months, percent),
            mode=PricingMode.DURATION_TABLE,
            discount_percent=percent,
        )

    override = find_plan_override(plans, months)
    if override is not None:
        return SubscriptionTotal(amount=settle(override), mode=PricingMode.PLAN_OVERRIDE)

    with working_precision():
        years = Decimal(months) / MONTHS_PER_YEAR
        amount = base.annual * years

    return SubscriptionTotal(amount=settle(amount), mode=PricingMode.LINEAR)
