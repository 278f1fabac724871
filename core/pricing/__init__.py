"""Order pricing and discount engine. Pure functions, no I/O."""

from core.pricing.durations import DurationDiscountTable, lookup_discount, clamp_percent
from core.pricing.base_price import BaseAnnualPrice, resolve_base_annual, MONTHS_PER_YEAR
from core.pricing.totals import (
    SubscriptionTotal, compute_discounted_total, compute_subscription_total, find_plan_override,
)
from core.pricing.add_ons import (
    AddOnTotal, BUILTIN_PER_UNIT_ADD_ONS, merge_builtin_add_ons, normalize_quantity, sum_add_ons,
)
from core.pricing.promo import CODE_PADDING, apply_promo, find_promo, normalize_code
from core.pricing.currency import PLACEHOLDER, format_amount, to_display
from core.pricing.engine import OrderSelection, PricingEngine, PricingSnapshot
