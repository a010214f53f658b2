"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("this-month", "last-month", "this-year", "last-year", "last-6-months")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Accepts ISO dates ("2024-01-15"), free-form dates ("15 Jan 2024") and the
    words "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    if not text:
        raise ValueError("Empty date string")

    today = date.today()
    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    try:
        return date_parser.parse(text, yearfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def month_start(day: date) -> date:
    """First day of the month containing ``day``."""
    return day.replace(day=1)


def month_end(day: date) -> date:
    """Last day of the month containing ``day``."""
    return month_start(day) + relativedelta(months=1, days=-1)


def trailing_months_range(months: int, today: Optional[date] = None) -> tuple[date, date]:
    """Range covering ``months`` whole calendar months ending with today's month.

    Args:
        months: Number of months, at least 1
        today: Reference date (defaults to the current date)

    Returns:
        Tuple of (first day of the oldest month, last day of today's month)
    """
    if months < 1:
        raise ValueError(f"Number of months must be at least 1, got {months}")
    today = today or date.today()
    start = month_start(today) - relativedelta(months=months - 1)
    return start, month_end(today)


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of this-month, last-month, this-year, last-year, last-6-months
        today: Reference date (defaults to the current date)

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return month_start(today), month_end(today)
    if period == "last-month":
        previous = today - relativedelta(months=1)
        return month_start(previous), month_end(previous)
    if period == "this-year":
        return today.replace(month=1, day=1), today.replace(month=12, day=31)
    if period == "last-year":
        return date(today.year - 1, 1, 1), date(today.year - 1, 12, 31)
    if period == "last-6-months":
        return trailing_months_range(6, today)

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
