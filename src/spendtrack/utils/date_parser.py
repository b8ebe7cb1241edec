"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Optional
from dateutil import parser as date_parser

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", "15.1.2024", etc.
    - Relative dates: "today", "yesterday", "last friday", "3 days ago"

    Args:
        date_str: Date string in various formats
        today: Reference day for relative dates (defaults to the current day)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    if today is None:
        today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period in WEEKDAYS:
            target_day = WEEKDAYS.index(period)
            days_ago = (today.weekday() - target_day) % 7
            if days_ago == 0:
                days_ago = 7
            return today - timedelta(days=days_ago)
        if period == "week":
            return today - timedelta(days=7)

    if date_str.endswith(" days ago"):
        count = date_str[: -len(" days ago")].strip()
        if count.isdigit():
            return today - timedelta(days=int(count))

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    # Day-first so that "2.5.2024" matches the D.M.YYYY display format
    try:
        dt = date_parser.parse(date_str, dayfirst=True)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_timestamp(date_str: Optional[str], now: Optional[datetime] = None) -> datetime:
    """Parse an expense timestamp.

    A bare day keeps the current time of day so that several expenses on the
    same day stay distinguishable. ``None`` means now.

    Raises:
        ValueError: If date string cannot be parsed
    """
    if now is None:
        now = datetime.now().astimezone()
    if date_str is None or not date_str.strip():
        return now

    day = parse_date(date_str, today=now.date())
    return datetime.combine(day, now.timetz())


def format_day(value: date | datetime) -> str:
    """Format a day the way expense groups are labelled (D.M.YYYY)."""
    return f"{value.day}.{value.month}.{value.year}"


def ensure_aware(value: datetime) -> datetime:
    """Return ``value`` with a UTC offset, reading naive values as local time."""
    if value.tzinfo is None:
        return value.astimezone()
    return value
