"""Utility functions for spendtrack."""

from spendtrack.utils.date_parser import parse_date, parse_timestamp, format_day, ensure_aware
from spendtrack.utils.amount_parser import parse_amount, parse_positive, parse_rate

__all__ = [
    "parse_date",
    "parse_timestamp",
    "format_day",
    "ensure_aware",
    "parse_amount",
    "parse_positive",
    "parse_rate",
]
