"""
Currency conversion and formatting.

to_display is the single rounding point of the pricing pipeline. Formatting
is presentation only: a formatted string is never parsed back into a number.
"""

from decimal import Decimal, ROUND_HALF_UP

from babel.numbers import format_currency

from utils.money import to_decimal, working_precision

PLACEHOLDER = "—"


def to_display(amount_base, rate, fraction_digits: int = 0) -> Decimal | None:
    """
    Convert a base-currency amount to the display currency.

    Args:
        amount_base: Amount in the base currency, None if unavailable
        rate: Display units per base unit (> 0)
        fraction_digits: Smallest denomination of the display currency
            (0 for whole units)

    Returns:
        amount_base * rate rounded half-up to the smallest denomination and
        floored at zero, or None when either input is missing or not finite.

    Raises:
        ValueError: If the rate is zero or negative
    """
    amount = to_decimal(amount_base)
    factor = to_decimal(rate)
    if amount is None or factor is None:
        return None
    if factor <= 0:
        raise ValueError(f"Exchange rate must be positive, got {rate!r}")

    quantum = Decimal(1).scaleb(-fraction_digits)
    with working_precision():
        converted = (amount * factor).quantize(quantum, rounding=ROUND_HALF_UP)

    return max(converted, Decimal(0).quantize(quantum))


def format_amount(
    amount,
    currency_code: str,
    locale: str,
    fraction_digits: int | None = None,
) -> str:
    """
    Format an amount for display.

    Args:
        amount: Amount to format, None renders the placeholder
        currency_code: ISO 4217 code
        locale: Babel locale identifier (e.g. "id_ID", "en_US")
        fraction_digits: Digits after the decimal point; None uses two

    Returns:
        Locale-formatted string such as "Rp1.250.000" or "$78.13".
    """
    value = to_decimal(amount)
    if value is None:
        return PLACEHOLDER

    digits = 2 if fraction_digits is None else fraction_digits
    pattern = "¤#,##0" if digits == 0 else "¤#,##0." + "0" * digits

    return format_currency(
        value,
        currency_code,
        format=pattern,
        locale=locale,
        currency_digits=False,
    )
