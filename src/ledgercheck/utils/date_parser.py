"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = (
    "this-month",
    "last-month",
    "this-quarter",
    "last-quarter",
    "this-year",
    "last-year",
)


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024", ...) and the
    relative words "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string
        today: Reference date for relative words (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def _quarter_start(day: date) -> date:
    return day.replace(month=3 * ((day.month - 1) // 3) + 1, day=1)


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for an accounting period.

    Current periods end today; previous periods cover the whole period.

    Args:
        period: One of this-month, last-month, this-quarter, last-quarter,
            this-year, last-year
        today: Reference date (defaults to date.today())

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return (today.replace(day=1), today)

    elif period == "last-month":
        # Last day of last month is the day before the first of this month
        end_date = today.replace(day=1) - timedelta(days=1)
        return (end_date.replace(day=1), end_date)

    elif period == "this-quarter":
        return (_quarter_start(today), today)

    elif period == "last-quarter":
        end_date = _quarter_start(today) - timedelta(days=1)
        return (_quarter_start(end_date), end_date)

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        return (start_date, start_date.replace(month=12, day=31))

    else:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
