"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from microbooks.domain.periods import quarter_of

NAMED_PERIODS = (
    "this-month",
    "this-quarter",
    "this-year",
    "last-month",
    "last-quarter",
    "last-year",
)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - ISO dates: "2024-01-15"
    - Day-first dates as written on local invoices: "15/01/2024", "15-01-2024"
    - Relative dates: "today", "yesterday", "tomorrow"

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        # ISO strings start with the year and must not be read day-first
        dayfirst = not date_str[:4].isdigit()
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e


def quarter_start(value: date) -> date:
    return date(value.year, (quarter_of(value) - 1) * 3 + 1, 1)


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    "this-*" periods run to the end of the current month, quarter or year;
    "last-*" periods are the previous full one.

    Args:
        period: One of this-month, this-quarter, this-year, last-month,
            last-quarter, last-year
        today: Reference date; defaults to the current date

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        start = today.replace(day=1)
        return start, start + relativedelta(months=1) - timedelta(days=1)

    elif period == "this-quarter":
        start = quarter_start(today)
        return start, start + relativedelta(months=3) - timedelta(days=1)

    elif period == "this-year":
        return date(today.year, 1, 1), date(today.year, 12, 31)

    elif period == "last-month":
        end = today.replace(day=1) - timedelta(days=1)
        return end.replace(day=1), end

    elif period == "last-quarter":
        end = quarter_start(today) - timedelta(days=1)
        return quarter_start(end), end

    elif period == "last-year":
        return date(today.year - 1, 1, 1), date(today.year - 1, 12, 31)

    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: {', '.join(NAMED_PERIODS)}"
        )
