"""
Duration discount lookup.

Maps a subscription length in months to a discount percentage for one
package. Only active rows count. When two active rows share a duration, the
row later in scan order wins.
"""

from decimal import Decimal
from typing import Iterable

from core.models import DurationDiscountRow
from utils.money import to_decimal

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def clamp_percent(value) -> Decimal:
    """Clamp a percentage to [0, 100]. Non-finite or missing values become 0."""
    percent = to_decimal(value)
    if percent is None:
        return _ZERO
    return min(max(percent, _ZERO), _HUNDRED)


class DurationDiscountTable:
    """
    Active duration discounts for a single package.

    Usage:
        table = DurationDiscountTable.from_rows(rows)
        table.lookup(24)          # Decimal("15") or Decimal("0")
        table.has_any_active_row  # decides if plan overrides may apply
    """

    def __init__(self, discounts: dict[int, Decimal]):
        self._discounts = dict(discounts)

    @classmethod
    def from_rows(cls, rows: Iterable[DurationDiscountRow]) -> "DurationDiscountTable":
        discounts: dict[int, Decimal] = {}
        for row in rows:
            if not row.is_active:
                continue
            if row.duration_months <= 0:
                continue
            # Last active row for a duration wins.
            discounts[row.duration_months] = clamp_percent(row.discount_percent)
        return cls(discounts)

    @property
    def has_any_active_row(self) -> bool:
        return bool(self._discounts)

    @property
    def durations(self) -> list[int]:
        """Configured durations in months, ascending."""
        return sorted(self._discounts)

    def lookup(self, duration_months: int) -> Decimal:
        """Discount percent for an exact duration match, 0 when absent."""
        return self._discounts.get(duration_months, _ZERO)


def lookup_discount(
    rows: Iterable[DurationDiscountRow],
    package_id: str,
    duration_months: int,
) -> Decimal:
    """
    Discount percent for a package and duration.

    Args:
        rows: Duration rows, possibly for several packages, in scan order
        package_id: Package to look up
        duration_months: Requested subscription length

    Returns:
        Percent in [0, 100]; 0 when no active row matches exactly.
    """
    if duration_months <= 0:
        raise ValueError(f"duration_months must be positive, got {duration_months}")

    table = DurationDiscountTable.from_rows(r for r in rows if r.package_id == package_id)
    return table.lookup(duration_months)
