"""
Add-on aggregation.

Flat add-ons count at full price when selected. Per-unit add-ons count
price_per_unit x quantity, with quantity clamped to [0, max_quantity] and
floored to a whole number of unit_steps. Nothing is included implicitly:
an add-on absent from the selections contributes zero.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR
from typing import Iterable, Mapping, TypeVar

from core.models import AddOnKind, AddOnLine, FlatAddOn, PerUnitAddOn
from utils.money import settle, to_decimal, working_precision

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")

# Always offered, even when the package catalog is empty. Priced in the base
# currency.
BUILTIN_PER_UNIT_ADD_ONS: tuple[PerUnitAddOn, ...] = (
    PerUnitAddOn(
        id="__builtin_editing_website",
        label="Website editing service",
        price_per_unit=Decimal("31.25"),
        unit="package",
        unit_step=Decimal("1"),
        max_quantity=Decimal("1"),
        sort_order=-100,
    ),
)

AddOnT = TypeVar("AddOnT", FlatAddOn, PerUnitAddOn)


def merge_builtin_add_ons(
    catalog: Iterable[AddOnT],
    builtins: Iterable[AddOnT] = (),
) -> list[AddOnT]:
    """
    Merge built-in add-ons into an external catalog.

    Catalog entries win over built-ins with the same id. Duplicate ids inside
    the catalog keep the first entry. The result is sorted by sort_order,
    ties keeping catalog order.
    """
    merged: list[AddOnT] = []
    seen: set[str] = set()

    for item in catalog:
        if item.id in seen:
            logger.warning(f"Duplicate add-on id '{item.id}' in catalog, keeping first")
            continue
        seen.add(item.id)
        merged.append(item)

    for item in builtins:
        if item.id in seen:
            continue
        seen.add(item.id)
        merged.append(item)

    merged.sort(key=lambda item: item.sort_order)
    return merged


def normalize_quantity(item: PerUnitAddOn, requested) -> Decimal:
    """
    Quantity actually charged for a per-unit add-on.

    Negative, missing or non-finite requests become 0. The request is capped
    at max_quantity and then floored to a multiple of unit_step, so the
    customer is never charged for more than they asked for.
    """
    quantity = to_decimal(requested)
    if quantity is None or quantity <= 0:
        return _ZERO

    if item.max_quantity is not None:
        quantity = min(quantity, item.max_quantity)

    with working_precision():
        steps = (quantity / item.unit_step).to_integral_value(rounding=ROUND_FLOOR)
        quantity = steps * item.unit_step

    return settle(quantity)


@dataclass(frozen=True)
class AddOnTotal:
    """Sum of add-on charges with per-line detail."""

    amount: Decimal
    lines: tuple[AddOnLine, ...]


def sum_add_ons(
    flat_items: Iterable[FlatAddOn] = (),
    per_unit_items: Iterable[PerUnitAddOn] = (),
    selected: Mapping[str, bool] | None = None,
    quantities: Mapping[str, object] | None = None,
) -> AddOnTotal:
    """
    Total add-on charge.

    Args:
        flat_items: Flat add-on catalog
        per_unit_items: Per-unit add-on catalog (built-ins already merged)
        selected: Flat add-on id -> ticked
        quantities: Per-unit add-on id -> requested quantity

    Returns:
        AddOnTotal; lines only include add-ons that contribute.
    """
    selected = selected or {}
    quantities = quantities or {}

    total = _ZERO
    lines: list[AddOnLine] = []

    with working_precision():
        for item in flat_items:
            if not item.is_active or not selected.get(item.id):
                continue
            total += item.price_base
            lines.append(AddOnLine(
                id=item.id,
                label=item.label,
                kind=AddOnKind.FLAT,
                quantity=Decimal("1"),
                amount_base=settle(item.price_base),
            ))

        for item in per_unit_items:
            quantity = normalize_quantity(item, quantities.get(item.id))
            if quantity == 0:
                continue
            amount = item.price_per_unit * quantity
            total += amount
            lines.append(AddOnLine(
                id=item.id,
                label=item.label,
                kind=AddOnKind.PER_UNIT,
                quantity=quantity,
                amount_base=settle(amount),
            ))

    return AddOnTotal(amount=settle(total), lines=tuple(lines))
