"""Amount and rate parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

DECIMAL_COMMA = re.compile(r"^[+-]?\d+,\d{1,2}$")


def parse_amount(amount: str | int | float | Decimal) -> Decimal:
    """Parse an amount into a finite Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45" or "123.45 €"
    - "1,234.56" (comma as thousands separator)
    - "12,5" or "12,50" (comma as decimal separator)
    - numbers (int, float, Decimal)

    Args:
        amount: Amount string or number

    Returns:
        Decimal amount

    Raises:
        ValueError: If the amount cannot be parsed or is not finite
    """
    if isinstance(amount, bool):
        raise ValueError(f"Could not parse amount '{amount}'")

    if isinstance(amount, Decimal):
        value = amount
    elif isinstance(amount, (int, float)):
        value = Decimal(str(amount))
    else:
        if amount is None or not str(amount).strip():
            raise ValueError("Empty amount string")

        amount_str = re.sub(r"[$€£¥₽]", "", str(amount)).strip()
        # One or two digits after a lone comma make it a decimal comma
        if DECIMAL_COMMA.match(amount_str):
            amount_str = amount_str.replace(",", ".")
        else:
            amount_str = amount_str.replace(",", "")

        try:
            value = Decimal(amount_str)
        except InvalidOperation as e:
            raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not value.is_finite():
        raise ValueError(f"Amount must be a finite number, got '{amount}'")
    return value


def parse_positive(amount: str | int | float | Decimal, what: str = "amount") -> Decimal:
    """Parse an amount that must be strictly greater than zero.

    Raises:
        ValueError: If the value cannot be parsed or is not positive
    """
    value = parse_amount(amount)
    if value <= 0:
        raise ValueError(f"The {what} must be positive, got {value}")
    return value


def parse_rate(rate: str | int | float | Decimal) -> Decimal:
    """Parse an exchange rate (a finite positive number)."""
    return parse_positive(rate, what="rate")
