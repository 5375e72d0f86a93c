"""Tests for naive date arithmetic and display formatting."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from kalendi.dates import (
    WEEK_DAYS,
    MonthOverflow,
    add_days,
    add_months,
    add_weeks,
    add_years,
    end_of_day,
    format_date,
    format_time,
    is_same_day,
    month_days,
    month_name,
    start_of_day,
)


class TestArithmetic:
    def test_add_days_crosses_month(self):
        assert add_days(datetime(2024, 1, 30, 9, 0), 3) == datetime(2024, 2, 2, 9, 0)

    def test_add_weeks(self):
        assert add_weeks(datetime(2024, 12, 25), 2) == datetime(2025, 1, 8)

    def test_add_months_plain(self):
        assert add_months(datetime(2024, 5, 15, 7, 30), 1) == datetime(2024, 6, 15, 7, 30)

    def test_add_months_rollover(self):
        assert add_months(datetime(2024, 1, 31), 1) == datetime(2024, 3, 2)
        assert add_months(datetime(2024, 3, 31), 1) == datetime(2024, 5, 1)

    def test_add_months_clamp(self):
        assert add_months(datetime(2024, 1, 31), 1, MonthOverflow.CLAMP) == datetime(2024, 2, 29)

    def test_add_months_backwards_across_year(self):
        assert add_months(datetime(2024, 2, 10), -3) == datetime(2023, 11, 10)

    def test_add_months_many(self):
        assert add_months(datetime(2024, 11, 1), 14) == datetime(2026, 1, 1)

    def test_add_years_leap_day(self):
        assert add_years(datetime(2024, 2, 29), 1) == datetime(2025, 3, 1)
        assert add_years(datetime(2024, 2, 29), 1, MonthOverflow.CLAMP) == datetime(2025, 2, 28)
        assert add_years(datetime(2024, 2, 29), 4) == datetime(2028, 2, 29)


class TestDayBounds:
    def test_start_of_day(self):
        assert start_of_day(datetime(2024, 3, 3, 17, 45)) == datetime(2024, 3, 3)

    def test_end_of_day_from_date(self):
        assert end_of_day(date(2024, 3, 3)) == datetime(2024, 3, 3, 23, 59, 59, 999000)

    def test_is_same_day(self):
        assert is_same_day(datetime(2024, 3, 3, 0, 0), datetime(2024, 3, 3, 23, 59))
        assert is_same_day(datetime(2024, 3, 3, 12, 0), date(2024, 3, 3))
        assert not is_same_day(datetime(2024, 3, 3), datetime(2024, 3, 4))


class TestFormatting:
    def test_short(self):
        assert format_date(datetime(2024, 12, 31)) == "31/12/24"

    def test_short_pads_year(self):
        assert format_date(date(2005, 1, 2)) == "02/01/05"

    def test_long(self):
        assert format_date(date(2024, 7, 4), "dd/mm/yyyy") == "04/07/2024"

    def test_full(self):
        assert format_date(datetime(2024, 1, 1), "full") == "Monday 1 January 2024"

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            format_date(date(2024, 1, 1), "mm/dd")

    def test_format_time(self):
        assert format_time(datetime(2024, 1, 1, 7, 5)) == "07:05"

    def test_month_name(self):
        assert month_name(date(2024, 9, 1)) == "September"


class TestMonthDays:
    def test_padded_to_whole_weeks(self):
        days = month_days(2024, 1)
        assert days[0] == date(2023, 12, 31)
        assert days[-1] == date(2024, 2, 3)
        assert len(days) == 35
        assert len(days) % len(WEEK_DAYS) == 0

    def test_grid_starts_on_sunday(self):
        for month in range(1, 13):
            days = month_days(2025, month)
            assert days[0].weekday() == 6
            assert days[-1].weekday() == 5

    def test_month_without_padding(self):
        days = month_days(2026, 2)
        assert days[0] == date(2026, 2, 1)
        assert days[-1] == date(2026, 2, 28)
        assert len(days) == 28

    def test_contiguous(self):
        days = month_days(2024, 2)
        assert all((b - a).days == 1 for a, b in zip(days, days[1:]))
