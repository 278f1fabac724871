"""Duration discount models.

One row maps a subscription length in months to a percentage discount for a
package. Rows are edited by admins and read-only to the pricing engine.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class DurationDiscountRowCreate(BaseModel):
    """Data required to create a duration discount row."""

    duration_months: int = Field(..., ge=1, le=1200)
    discount_percent: Decimal = Field(Decimal("0"), ge=0, le=100)
    is_active: bool = True


class DurationDiscountRowUpdate(BaseModel):
    """Data that can be updated on a duration row. All fields optional."""

    duration_months: int | None = Field(None, ge=1, le=1200)
    discount_percent: Decimal | None = Field(None, ge=0, le=100)
    is_active: bool | None = None


class DurationDiscountRow(BaseModel):
    """Duration discount row as read by the pricing engine."""

    package_id: str
    duration_months: int
    discount_percent: Decimal = Decimal("0")
    is_active: bool = True

    model_config = {"from_attributes": True, "frozen": True}


class StoredDurationDiscountRow(DurationDiscountRow):
    """Full duration row entity as stored."""

    id: UUID
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
