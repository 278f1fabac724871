"""Decimal helpers for money arithmetic.

Amounts are Decimal end to end. Floats are accepted at the edges and
converted through their string form so 0.1 stays 0.1.
"""

from contextlib import contextmanager
from decimal import Decimal, InvalidOperation, localcontext

# Guard digits carried through intermediate arithmetic (1000 / 12 * 12 must
# come back as 1000 once settled).
WORKING_PRECISION = 50
RESULT_PRECISION = 28


def to_decimal(value) -> Decimal | None:
    """
    Coerce a number-like value to a finite Decimal.

    Returns None for None, booleans, unparseable strings, NaN and infinities.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None

    if not result.is_finite():
        return None
    return result


def is_finite(value) -> bool:
    """Whether value coerces to a finite Decimal."""
    return to_decimal(value) is not None


@contextmanager
def working_precision():
    """Decimal context for intermediate pricing arithmetic."""
    with localcontext() as ctx:
        ctx.prec = WORKING_PRECISION
        yield ctx


def settle(value: Decimal) -> Decimal:
    """
    Reduce a working-precision result to RESULT_PRECISION significant digits.

    Strips trailing zeros without changing the value. Not a currency
    rounding: display rounding lives in core.pricing.currency.

    Raises:
        decimal.InvalidOperation: If a whole amount needs more than
            RESULT_PRECISION digits. Callers pricing an order treat any
            ArithmeticError as an unavailable total.
    """
    with localcontext() as ctx:
        ctx.prec = RESULT_PRECISION
        value = +value

    if value == value.to_integral_value():
        return value.quantize(Decimal(1))
    return value.normalize()
