"""
Promo code resolution.

apply_promo is stateless: the same code, subtotal, catalog and instant always
give the same result. It must be called again whenever the subtotal changes;
a previously accepted promo is not carried over to a new subtotal.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable

from core.models import (
    PromoCode, PromoDiscountType, PromoRejection, PromoResult,
)
from utils.money import settle, to_decimal, working_precision
from utils.timezone import now_utc, to_utc

_HUNDRED = Decimal("100")


# Characters trimmed from both ends of a code. The store query passes the
# same set to btrim() so SQL and Python agree on what matches.
CODE_PADDING = " \t\n\r\f\v"


def normalize_code(code: str | None) -> str:
    """Promo code trimmed of CODE_PADDING and lower-cased, as the store query does."""
    return (code or "").strip(CODE_PADDING).lower()


def is_currently_valid(promo: PromoCode, at: datetime) -> bool:
    """Whether promo is active and inside its validity window at instant at."""
    if not promo.is_active:
        return False
    if promo.valid_from is not None and at < to_utc(promo.valid_from):
        return False
    if promo.valid_until is not None and at > to_utc(promo.valid_until):
        return False
    return True


def find_promo(
    code: str | None,
    promo_codes: Iterable[PromoCode],
    at: datetime | None = None,
) -> PromoCode | None:
    """First active, currently valid promo whose normalized code matches."""
    wanted = normalize_code(code)
    if not wanted:
        return None

    at = to_utc(at) if at is not None else now_utc()
    for promo in promo_codes:
        if normalize_code(promo.code) == wanted and is_currently_valid(promo, at):
            return promo
    return None


def compute_rule_discount(promo: PromoCode, subtotal: Decimal) -> Decimal:
    """Raw discount from the promo's rule, before clamping to the subtotal."""
    with working_precision():
        if promo.discount_type == PromoDiscountType.PERCENT:
            discount = subtotal * promo.discount_value / _HUNDRED
        else:
            discount = promo.discount_value

        if promo.max_discount_base is not None:
            discount = min(discount, promo.max_discount_base)

    return max(discount, Decimal("0"))


def apply_promo(
    code: str | None,
    pre_discount_subtotal,
    promo_codes: Iterable[PromoCode],
    at: datetime | None = None,
) -> PromoResult:
    """
    Check a promo code against a pre-promo subtotal.

    Args:
        code: Code as typed by the customer
        pre_discount_subtotal: Subtotal in the base currency, None if unknown
        promo_codes: Promo code records to match against
        at: Instant used for validity windows (defaults to now)

    Returns:
        PromoResult. On success the discount is clamped so the final total
        is never negative. Rejections carry a reason instead of raising.
    """
    normalized = normalize_code(code)
    if not normalized:
        return PromoResult(ok=False, reason=PromoRejection.EMPTY)

    subtotal = to_decimal(pre_discount_subtotal)
    if subtotal is None or subtotal < 0:
        # Never guess a discount against an unknown base.
        return PromoResult(ok=False, code=normalized, reason=PromoRejection.UNAVAILABLE)

    promo = find_promo(normalized, promo_codes, at)
    if promo is None:
        return PromoResult(ok=False, code=normalized, reason=PromoRejection.NOT_FOUND)

    effective = min(compute_rule_discount(promo, subtotal), subtotal)
    with working_precision():
        remaining = subtotal - effective

    return PromoResult(
        ok=True,
        code=promo.code,
        promo_id=promo.id,
        promo_name=promo.promo_name,
        discount_base=settle(effective),
        final_total_base=settle(remaining),
        subtotal_base=settle(subtotal),
    )
