"""Pricing configuration."""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


class PricingConfig(BaseModel):
    """
    Pricing configuration injected into the engine.

    All catalog prices are stored in the base currency. The display currency
    is derived through a fixed exchange rate that can be changed here without
    touching any arithmetic.
    """

    base_currency: str = Field(
        default="USD",
        description="Currency the catalog prices are stored in",
        min_length=3,
        max_length=3,
    )
    display_currency: str = Field(
        default="IDR",
        description="Currency shown to the customer and charged by the gateway",
        min_length=3,
        max_length=3,
    )
    exchange_rate: Decimal = Field(
        default=Decimal("16000"),
        description="Display currency units per one base currency unit",
        gt=0,
    )
    display_fraction_digits: int = Field(
        default=0,  # whole rupiah
        description="Digits after the decimal point in the display currency",
        ge=0,
        le=4,
    )
    locale: str = Field(
        default="id_ID",
        description="Locale used to format display amounts",
    )
    base_locale: str = Field(
        default="en_US",
        description="Locale used to format base currency amounts",
    )

    @field_validator("base_currency", "display_currency")
    @classmethod
    def upper_currency(cls, value: str) -> str:
        return value.upper()
