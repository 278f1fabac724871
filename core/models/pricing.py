"""Order pricing result models.

Results are derived, never persisted. A result whose total could not be
computed carries None amounts and an unavailable_reason; it never carries
zero or NaN.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel

from core.models.add_on import AddOnKind
from core.models.promo import PromoResult


class PricingMode(str, Enum):
    """Which rule produced the subscription subtotal."""

    DURATION_TABLE = "duration_table"  # Monthly price x months, less duration discount
    PLAN_OVERRIDE = "plan_override"    # Legacy flat price for the year count
    LINEAR = "linear"                  # (domain + package) x years


class UnavailableReason(str, Enum):
    """Why a total could not be computed."""

    PRICE_MISSING = "price_missing"
    NON_FINITE = "non_finite"
    NO_PACKAGE = "no_package"


class AddOnLine(BaseModel):
    """One add-on's contribution to the order."""

    id: str
    label: str
    kind: AddOnKind
    quantity: Decimal
    amount_base: Decimal

    model_config = {"frozen": True}


class OrderPricingResult(BaseModel):
    """Breakdown of an order's price at one point in time."""

    months: int
    mode: PricingMode | None = None
    discount_percent: Decimal = Decimal("0")
    subtotal_base: Decimal | None = None
    add_ons_base: Decimal | None = None
    add_on_lines: list[AddOnLine] = []
    discount_applied: Decimal | None = None
    promo: PromoResult | None = None
    total_base: Decimal | None = None
    total_display: Decimal | None = None
    base_currency: str
    display_currency: str
    unavailable_reason: UnavailableReason | None = None

    model_config = {"frozen": True}

    @property
    def is_available(self) -> bool:
        """Whether the total can be charged."""
        return self.total_base is not None

    @property
    def pre_promo_total_base(self) -> Decimal | None:
        if self.subtotal_base is None or self.add_ons_base is None:
            return None
        return self.subtotal_base + self.add_ons_base


class DurationOption(BaseModel):
    """One choice on the plan duration picker."""

    years: int
    months: int
    label: str | None = None
    discount_percent: Decimal
    mode: PricingMode | None = None
    total_base: Decimal | None = None
    total_display: Decimal | None = None

    model_config = {"frozen": True}
