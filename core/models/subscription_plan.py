"""Legacy subscription plan models.

Plans are kept as a JSON list in the website settings store. A plan may carry
a flat price override for its year count; that override is only consulted
when the package has no active duration discount rows at all.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


class SubscriptionPlan(BaseModel):
    """Selectable subscription length with optional legacy price override."""

    years: int = Field(..., ge=1)
    label: str | None = None
    price_base_override: Decimal | None = Field(None, ge=0)
    is_active: bool = True
    sort_order: int = 0

    model_config = {"frozen": True}

    @property
    def months(self) -> int:
        return self.years * 12
