"""Promo code models.

Codes are matched case-insensitively after trimming. The discount rule is a
flat base-currency amount or a percentage of the pre-promo subtotal,
optionally capped.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class PromoDiscountType(str, Enum):
    """How a promo code discounts the subtotal."""

    FLAT = "flat"        # Fixed base-currency amount
    PERCENT = "percent"  # Percentage of the pre-promo subtotal


class PromoRejection(str, Enum):
    """Why a promo code was not applied."""

    EMPTY = "empty"              # Blank code after trimming
    NOT_FOUND = "not_found"      # No active, currently valid code matches
    UNAVAILABLE = "unavailable"  # Subtotal not computable yet


class PromoCode(BaseModel):
    """Promo code record as stored."""

    id: str
    code: str = Field(..., min_length=1, max_length=64)
    promo_name: str | None = None
    is_active: bool = True
    discount_type: PromoDiscountType
    discount_value: Decimal = Field(..., ge=0)
    max_discount_base: Decimal | None = Field(None, ge=0)
    valid_from: datetime | None = None
    valid_until: datetime | None = None

    model_config = {"from_attributes": True, "frozen": True}

    @model_validator(mode="after")
    def validate_rule(self) -> "PromoCode":
        """Percent promos cannot exceed 100% and windows must be aware and ordered."""
        for bound in (self.valid_from, self.valid_until):
            if bound is not None and bound.tzinfo is None:
                raise ValueError("Promo validity window must be timezone-aware")
        if self.discount_type == PromoDiscountType.PERCENT and self.discount_value > 100:
            raise ValueError("Percent discount_value must be between 0 and 100")
        if (
            self.valid_from is not None
            and self.valid_until is not None
            and self.valid_until < self.valid_from
        ):
            raise ValueError("valid_until must not be before valid_from")
        return self


class PromoResult(BaseModel):
    """
    Outcome of checking a promo code against a subtotal.

    Rejections are data, not exceptions. The caller decides how to word them.
    """

    ok: bool
    code: str | None = None
    promo_id: str | None = None
    promo_name: str | None = None
    discount_base: Decimal | None = None
    final_total_base: Decimal | None = None
    subtotal_base: Decimal | None = None
    reason: PromoRejection | None = None

    model_config = {"frozen": True}


class AppliedPromo(BaseModel):
    """A promo the checkout is currently holding, with the subtotal it was priced against."""

    promo_id: str
    code: str
    promo_name: str | None = None
    discount_base: Decimal
    subtotal_base: Decimal

    model_config = {"frozen": True}

    @classmethod
    def from_result(cls, result: PromoResult) -> "AppliedPromo":
        if not result.ok:
            raise ValueError(f"Cannot hold a rejected promo ({result.reason.value})")
        return cls(
            promo_id=result.promo_id,
            code=result.code,
            promo_name=result.promo_name,
            discount_base=result.discount_base,
            subtotal_base=result.subtotal_base,
        )

    def is_stale_for(self, subtotal_base: Decimal | None) -> bool:
        """True when the subtotal moved and the promo must be checked again."""
        return subtotal_base is None or subtotal_base != self.subtotal_base
