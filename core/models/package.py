"""Package price configuration models.

Prices are Decimal amounts in the base currency. Either price may be missing
while the settings store is still loading or was never configured; the
pricing engine treats that as "unavailable", never as zero.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


class PriceConfiguration(BaseModel):
    """Annual domain + package price for one package and domain."""

    package_id: str
    domain: str | None = None
    tld: str | None = None
    domain_price_base: Decimal | None = Field(None, allow_inf_nan=True)
    package_price_base: Decimal | None = Field(None, allow_inf_nan=True)

    model_config = {"from_attributes": True, "frozen": True}
