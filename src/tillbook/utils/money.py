"""Money parsing and arithmetic utilities.

All monetary values are ``Decimal`` with exactly two fractional digits. Binary
floats are never accumulated; a float handed in by a caller is converted
through its ``str`` form first.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Union

from tillbook.domain.errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest magnitude a Numeric(12, 2) column stores without loss
MAX_MONEY = Decimal("9999999999.99")

MoneyLike = Union[Decimal, int, float, str]


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "Rp 123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValidationError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"(?i)rp\.?|[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValidationError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValidationError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def to_money(value: MoneyLike, field_name: str = "amount") -> Decimal:
    """Convert a value into a two-digit Decimal.

    Raises:
        ValidationError: If the value is not numeric, carries more than two
            fractional digits, or exceeds MAX_MONEY in magnitude.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        amount = parse_amount(value)
    else:
        raise ValidationError(f"{field_name} must be a number")

    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    # Trailing zeros such as "10.000" are not extra precision
    exponent = amount.normalize().as_tuple().exponent
    if isinstance(exponent, int) and exponent < -2:
        raise ValidationError(f"{field_name} must have at most two decimal places (got {amount})")
    return check_money_range(amount, field_name).quantize(CENT)


def check_money_range(amount: Decimal, field_name: str = "amount") -> Decimal:
    """Reject amounts the store cannot hold exactly.

    Raises:
        ValidationError: If the magnitude exceeds MAX_MONEY.
    """
    if abs(amount) > MAX_MONEY:
        raise ValidationError(f"{field_name} must not exceed {MAX_MONEY} in magnitude (got {amount})")
    return amount


def sum_money(values: Iterable[Decimal]) -> Decimal:
    """Sum Decimal amounts exactly, starting from 0.00."""
    total = ZERO
    for value in values:
        total += value
    return total.quantize(CENT)


def divide_money(amount: Decimal, count: int) -> Decimal:
    """Divide an amount by a count, rounding half up to cents."""
    if count == 0:
        return ZERO
    return (amount / count).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal) -> str:
    """Format an amount for display, e.g. ``1,234.50``."""
    return f"{amount:,.2f}"
