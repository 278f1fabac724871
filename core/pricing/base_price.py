"""
Base price resolution.

The annual base price is domain + package in the base currency. The monthly
price derived from it is the only input to monthly-mode duration totals.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from core.models import PriceConfiguration
from utils.money import to_decimal, working_precision

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class BaseAnnualPrice:
    """Resolved, finite annual prices for one package."""

    domain_price_base: Decimal
    package_price_base: Decimal

    @property
    def annual(self) -> Decimal:
        return self.domain_price_base + self.package_price_base

    @property
    def monthly(self) -> Decimal:
        """Annual price spread over twelve months, at working precision."""
        with working_precision():
            return self.annual / MONTHS_PER_YEAR


def resolve_base_annual(config: PriceConfiguration | None) -> BaseAnnualPrice | None:
    """
    Resolve the annual base prices for a package.

    Returns None (unavailable) when the configuration is missing or either
    price is missing, non-finite or negative.
    """
    if config is None:
        return None

    domain = to_decimal(config.domain_price_base)
    package = to_decimal(config.package_price_base)

    if domain is None or package is None:
        logger.debug(
            f"Base price unavailable for package {config.package_id} "
            f"(domain={config.domain_price_base!r}, package={config.package_price_base!r})"
        )
        return None

    if domain < 0 or package < 0:
        logger.warning(f"Negative base price configured for package {config.package_id}")
        return None

    return BaseAnnualPrice(domain_price_base=domain, package_price_base=package)
