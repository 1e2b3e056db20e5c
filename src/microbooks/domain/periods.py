"""Reporting periods and calendar-date partitioning."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, TypeVar, Union

from dateutil.relativedelta import relativedelta

from microbooks.domain.errors import InvalidPeriodError, invalid_year

MIN_YEAR = 1901
MAX_YEAR = 2099

T = TypeVar("T")


def normalize_date(value: Union[date, datetime]) -> date:
    """Drop any time-of-day component so comparisons are by calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def validate_year(year: int) -> int:
    """Reject reporting years outside the supported range.

    Raises:
        InvalidPeriodError: If the year is not an int in 1901-2099
    """
    if isinstance(year, bool) or not isinstance(year, int):
        raise InvalidPeriodError(f"Reporting year must be an integer, got {year!r}")
    if year < MIN_YEAR or year > MAX_YEAR:
        raise InvalidPeriodError(invalid_year(year))
    return year


def quarter_of(value: date) -> int:
    return (value.month - 1) // 3 + 1


@dataclass(frozen=True)
class ReportingPeriod:
    """Inclusive calendar-date range ``start <= d <= end``."""

    start: date
    end: date

    def __post_init__(self):
        start = normalize_date(self.start)
        end = normalize_date(self.end)
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)
        validate_year(start.year)
        validate_year(end.year)
        if start > end:
            raise InvalidPeriodError(
                f"Period start {start.isoformat()} is after end {end.isoformat()}"
            )

    @classmethod
    def for_year(cls, year: int) -> "ReportingPeriod":
        validate_year(year)
        return cls(date(year, 1, 1), date(year, 12, 31))

    @classmethod
    def for_quarter(cls, year: int, quarter: int) -> "ReportingPeriod":
        validate_year(year)
        if quarter not in (1, 2, 3, 4):
            raise InvalidPeriodError(f"Quarter must be 1-4, got {quarter}")
        start = date(year, (quarter - 1) * 3 + 1, 1)
        return cls(start, start + relativedelta(months=3) - timedelta(days=1))

    @classmethod
    def for_month(cls, year: int, month: int) -> "ReportingPeriod":
        validate_year(year)
        if not 1 <= month <= 12:
            raise InvalidPeriodError(f"Month must be 1-12, got {month}")
        start = date(year, month, 1)
        return cls(start, start + relativedelta(months=1) - timedelta(days=1))

    @property
    def label(self) -> str:
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def contains(self, value: Union[date, datetime]) -> bool:
        return self.start <= normalize_date(value) <= self.end

    def partition(self, items: Iterable[T]) -> tuple[list[T], list[T]]:
        """Split dated items into (before period, inside period).

        Items dated after the period are dropped. Input order is preserved.
        """
        before: list[T] = []
        inside: list[T] = []
        for item in items:
            item_date = normalize_date(item.date)
            if item_date < self.start:
                before.append(item)
            elif item_date <= self.end:
                inside.append(item)
        return before, inside

    def quarters(self) -> list[tuple[int, int, "ReportingPeriod"]]:
        """Calendar quarters overlapping this period, clipped to it.

        Returns:
            List of (year, quarter, clipped period) in date order
        """
        result = []
        cursor = date(self.start.year, (quarter_of(self.start) - 1) * 3 + 1, 1)
        while cursor <= self.end:
            quarter_end = cursor + relativedelta(months=3) - timedelta(days=1)
            clipped = ReportingPeriod(max(cursor, self.start), min(quarter_end, self.end))
            result.append((cursor.year, quarter_of(cursor), clipped))
            cursor = quarter_end + timedelta(days=1)
        return result

    def next(self) -> "ReportingPeriod":
        """Period of the same length starting the day after this one ends."""
        length = self.end - self.start
        start = self.end + timedelta(days=1)
        return ReportingPeriod(start, start + length)


def sort_by_date(items: Iterable[T]) -> list[T]:
    """Stable ascending sort on calendar date; ties keep input order."""
    return sorted(items, key=lambda item: normalize_date(item.date))
