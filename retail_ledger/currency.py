"""
Currency Amount Module

Single-currency amount helpers. Amounts are always Decimal and rounded with
ROUND_HALF_UP to cents. NEVER uses float for monetary values.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, getcontext
from typing import Union

getcontext().prec = 28

CENT = Decimal('0.01')
ZERO = Decimal('0')


def to_amount(value: Union[Decimal, int, str]) -> Decimal:
    """
    Convert a stored or supplied value to Decimal

    Raises:
        ValueError: If the value is a float or not a number
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        raise ValueError("Monetary values must not be floats")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal")


def round_currency(value: Decimal) -> Decimal:
    """Round to cents using half-up rounding"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """Format for display with exactly two decimal places"""
    return f"{round_currency(value):.2f}"
