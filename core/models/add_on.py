"""Add-on catalog models.

Two kinds of add-on exist:
- Flat: charged once at price_base when the customer ticks it.
- Per unit: charged price_per_unit for every unit of quantity picked.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class AddOnKind(str, Enum):
    """How an add-on is charged."""

    FLAT = "flat"
    PER_UNIT = "per_unit"


class FlatAddOn(BaseModel):
    """Add-on included at full price when selected."""

    id: str
    label: str
    description: str | None = None
    price_base: Decimal = Field(..., ge=0)
    is_active: bool = True
    sort_order: int = 0

    model_config = {"from_attributes": True, "frozen": True}


class PerUnitAddOn(BaseModel):
    """Add-on charged per unit of quantity."""

    id: str
    label: str
    price_per_unit: Decimal = Field(..., ge=0)
    unit: str | None = None
    unit_step: Decimal = Field(Decimal("1"), gt=0)
    max_quantity: Decimal | None = Field(None, ge=0)
    sort_order: int = 0

    model_config = {"from_attributes": True, "frozen": True}


class PerUnitAddOnCreate(BaseModel):
    """Data required to create a per-unit add-on for a package."""

    label: str = Field(..., min_length=1, max_length=255)
    price_per_unit: Decimal = Field(..., ge=0)
    unit: str | None = Field(None, max_length=50)
    unit_step: Decimal = Field(Decimal("1"), gt=0)
    max_quantity: Decimal | None = Field(None, ge=0)
    is_active: bool = True
    sort_order: int = 0

    @model_validator(mode="after")
    def validate_max_quantity(self) -> "PerUnitAddOnCreate":
        """A cap below one step would make the add-on unpurchasable."""
        if self.max_quantity is not None and 0 < self.max_quantity < self.unit_step:
            raise ValueError("max_quantity must be at least one unit_step")
        return self


class PerUnitAddOnUpdate(BaseModel):
    """Data that can be updated on a per-unit add-on. All fields optional."""

    label: str | None = Field(None, min_length=1, max_length=255)
    price_per_unit: Decimal | None = Field(None, ge=0)
    unit: str | None = Field(None, max_length=50)
    unit_step: Decimal | None = Field(None, gt=0)
    max_quantity: Decimal | None = Field(None, ge=0)
    is_active: bool | None = None
    sort_order: int | None = None


class StoredPerUnitAddOn(PerUnitAddOn):
    """Full per-unit add-on entity as stored."""

    package_id: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
