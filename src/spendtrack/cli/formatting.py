"""Display helpers shared by CLI commands."""

from decimal import Decimal

from spendtrack.domain.entities import Currency


def format_money(amount: Decimal, currency: Currency) -> str:
    """Format an amount with two decimals and the currency symbol."""
    return f"{amount:,.2f} {currency.symbol}"


def format_rate(rate: Decimal) -> str:
    """Format an exchange rate without trailing zeros."""
    text = f"{rate:.6f}".rstrip("0").rstrip(".")
    return text or "0"
