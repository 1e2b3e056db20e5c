"""Tests for reporting periods."""

from datetime import date, datetime

import pytest

from microbooks.domain.errors import InvalidPeriodError
from microbooks.domain.periods import ReportingPeriod, sort_by_date, validate_year


class TestReportingPeriod:
    """Tests for ReportingPeriod construction and queries."""

    def test_for_year(self):
        period = ReportingPeriod.for_year(2024)
        assert period.start == date(2024, 1, 1)
        assert period.end == date(2024, 12, 31)

    def test_for_quarter(self):
        period = ReportingPeriod.for_quarter(2024, 1)
        assert period.start == date(2024, 1, 1)
        assert period.end == date(2024, 3, 31)

    def test_for_month_handles_leap_february(self):
        period = ReportingPeriod.for_month(2024, 2)
        assert period.end == date(2024, 2, 29)

    @pytest.mark.parametrize("year", [1900, 2100, 0, -5])
    def test_rejects_out_of_range_year(self, year):
        """Test years outside 1901-2099 raise InvalidPeriodError."""
        with pytest.raises(InvalidPeriodError):
            ReportingPeriod.for_year(year)

    def test_boundary_years_accepted(self):
        assert validate_year(1901) == 1901
        assert validate_year(2099) == 2099

    def test_rejects_non_integer_year(self):
        with pytest.raises(InvalidPeriodError):
            validate_year("2024")

    def test_rejects_start_after_end(self):
        with pytest.raises(InvalidPeriodError):
            ReportingPeriod(date(2024, 5, 1), date(2024, 4, 30))

    def test_rejects_bad_quarter_and_month(self):
        with pytest.raises(InvalidPeriodError):
            ReportingPeriod.for_quarter(2024, 5)
        with pytest.raises(InvalidPeriodError):
            ReportingPeriod.for_month(2024, 13)

    def test_datetimes_are_truncated_to_dates(self):
        period = ReportingPeriod(datetime(2024, 1, 1, 9, 30), datetime(2024, 1, 31, 23, 59))
        assert period.start == date(2024, 1, 1)
        assert period.end == date(2024, 1, 31)

    def test_contains_is_inclusive(self):
        period = ReportingPeriod.for_month(2024, 3)
        assert period.contains(date(2024, 3, 1))
        assert period.contains(date(2024, 3, 31))
        assert period.contains(datetime(2024, 3, 31, 23, 59, 59))
        assert not period.contains(date(2024, 4, 1))

    def test_next_period_starts_after_end(self):
        period = ReportingPeriod(date(2024, 1, 1), date(2024, 1, 10))
        following = period.next()
        assert following.start == date(2024, 1, 11)
        assert following.end == date(2024, 1, 20)


class TestPartition:
    """Tests for splitting dated items around a period."""

    def test_partition_before_inside_after(self, make_txn):
        from microbooks.domain.categories import TransactionCategory as C

        before = make_txn(1, date(2023, 12, 31), C.OTHER_INCOME, amount=1)
        first = make_txn(2, date(2024, 1, 1), C.OTHER_INCOME, amount=1)
        last = make_txn(3, date(2024, 12, 31), C.OTHER_INCOME, amount=1)
        after = make_txn(4, date(2025, 1, 1), C.OTHER_INCOME, amount=1)

        earlier, inside = ReportingPeriod.for_year(2024).partition([after, last, before, first])

        assert earlier == [before]
        assert inside == [last, first]

    def test_sort_by_date_is_stable(self, make_txn):
        from microbooks.domain.categories import TransactionCategory as C

        a = make_txn(5, date(2024, 1, 2), C.OTHER_INCOME, amount=1)
        b = make_txn(3, date(2024, 1, 1), C.OTHER_INCOME, amount=1)
        c = make_txn(4, date(2024, 1, 2), C.OTHER_INCOME, amount=1)

        assert sort_by_date([a, b, c]) == [b, a, c]


class TestQuarters:
    """Tests for quarter enumeration used by the tax ledger."""

    def test_full_year_has_four_quarters(self):
        quarters = ReportingPeriod.for_year(2024).quarters()
        assert [(y, q) for y, q, _ in quarters] == [(2024, 1), (2024, 2), (2024, 3), (2024, 4)]
        assert quarters[1][2] == ReportingPeriod(date(2024, 4, 1), date(2024, 6, 30))

    def test_quarters_are_clipped_to_the_period(self):
        period = ReportingPeriod(date(2024, 2, 15), date(2024, 5, 10))
        quarters = period.quarters()
        assert [(y, q) for y, q, _ in quarters] == [(2024, 1), (2024, 2)]
        assert quarters[0][2] == ReportingPeriod(date(2024, 2, 15), date(2024, 3, 31))
        assert quarters[1][2] == ReportingPeriod(date(2024, 4, 1), date(2024, 5, 10))

    def test_quarters_across_years(self):
        period = ReportingPeriod(date(2023, 11, 1), date(2024, 1, 31))
        assert [(y, q) for y, q, _ in period.quarters()] == [(2023, 4), (2024, 1)]
