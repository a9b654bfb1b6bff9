"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from bizsplit.domain.errors import ValidationError, unparseable_amount

CENTS = Decimal("100")


def parse_currency_input(value: str) -> Decimal:
    """Parse masked currency input where every typed digit is a cent.

    All non-digit characters, decimal separators included, are dropped and
    the remaining digits are read as cents:
    - "R$ 1.234,56" -> 1234.56
    - "1500" -> 15.00
    - "7" -> 0.07

    Raises:
        ValidationError: If the input contains no digits
    """
    digits = re.sub(r"[^0-9]", "", value or "")
    if not digits:
        raise ValidationError(unparseable_amount(value or ""))
    return Decimal(int(digits)) / CENTS


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "R$123.45"
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
    amount_str = re.sub(r"R\$|[$€£]", "", amount_str)

    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValidationError(unparseable_amount(amount_str))
    if not amount.is_finite():
        raise ValidationError(unparseable_amount(amount_str))
    return -amount if is_negative else amount
