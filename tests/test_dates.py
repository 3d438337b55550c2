"""Tests for calendar helpers."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from reimburse.dates import (
    add_months,
    first_day_of_next_month,
    last_day_of_month,
    to_date,
    to_datetime,
    whole_months_between,
)
from reimburse.errors import InvalidInputError


class TestToDate:
    def test_date_passthrough(self) -> None:
        assert to_date(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_datetime_truncated(self) -> None:
        assert to_date(datetime(2024, 1, 1, 23, 59)) == date(2024, 1, 1)

    def test_iso_date_string(self) -> None:
        assert to_date("2024-01-01") == date(2024, 1, 1)

    def test_iso_datetime_string(self) -> None:
        assert to_date("2024-01-01T10:00:00Z") == date(2024, 1, 1)

    def test_malformed(self) -> None:
        with pytest.raises(InvalidInputError, match="purchase_date"):
            to_date("01/13/2024", "purchase_date")

    def test_wrong_type(self) -> None:
        with pytest.raises(InvalidInputError):
            to_date(20240101)  # type: ignore[arg-type]


class TestToDatetime:
    def test_none_is_now(self) -> None:
        before = datetime.now(UTC)
        assert to_datetime(None) >= before

    def test_date_is_midnight_utc(self) -> None:
        assert to_datetime(date(2024, 3, 15)) == datetime(2024, 3, 15, tzinfo=UTC)

    def test_iso_string(self) -> None:
        assert to_datetime("2024-03-15T09:30:00+00:00") == datetime(2024, 3, 15, 9, 30, tzinfo=UTC)


class TestAddMonths:
    def test_simple(self) -> None:
        assert add_months(date(2024, 3, 15), 1) == date(2024, 4, 15)

    def test_clamps_day(self) -> None:
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_year_rollover(self) -> None:
        assert add_months(date(2024, 12, 10), 1) == date(2025, 1, 10)
        assert add_months(date(2024, 3, 15), 36) == date(2027, 3, 15)

    def test_negative(self) -> None:
        assert add_months(date(2024, 1, 15), -1) == date(2023, 12, 15)
        assert add_months(date(2024, 1, 1), -24) == date(2022, 1, 1)


class TestMonthBoundaries:
    def test_first_day_of_next_month(self) -> None:
        assert first_day_of_next_month(date(2024, 3, 15)) == date(2024, 4, 1)
        assert first_day_of_next_month(date(2024, 12, 31)) == date(2025, 1, 1)

    def test_last_day_of_month(self) -> None:
        assert last_day_of_month(date(2026, 3, 1)) == date(2026, 3, 31)
        assert last_day_of_month(date(2024, 2, 1)) == date(2024, 2, 29)


class TestWholeMonthsBetween:
    def test_exact_years(self) -> None:
        assert whole_months_between(date(2022, 1, 1), date(2024, 1, 1)) == 24

    def test_partial_month_not_counted(self) -> None:
        assert whole_months_between(date(2024, 1, 10), date(2024, 2, 9)) == 0
        assert whole_months_between(date(2024, 1, 10), date(2024, 3, 9)) == 1

    def test_month_end(self) -> None:
        assert whole_months_between(date(2024, 1, 31), date(2024, 2, 29)) == 1

    def test_month_end_crosses_threshold_early(self) -> None:
        # 29 days after a month-end purchase is a full month; mid-month it is not
        assert whole_months_between(date(2024, 1, 31), date(2024, 2, 28)) == 0
        assert whole_months_between(date(2024, 1, 31), date(2024, 2, 29)) == 1
        assert whole_months_between(date(2024, 1, 15), date(2024, 2, 13)) == 0
        assert whole_months_between(date(2023, 1, 31), date(2023, 2, 28)) == 1

    def test_reversed_or_equal(self) -> None:
        assert whole_months_between(date(2024, 1, 1), date(2024, 1, 1)) == 0
        assert whole_months_between(date(2024, 6, 1), date(2024, 1, 1)) == 0
