"""Naive calendar-date arithmetic and display formatting.

All values are naive local datetimes. Day arithmetic is calendar-day
arithmetic on naive values, so a day is always 24 hours here; no
daylight-saving adjustment is made.
"""

from __future__ import annotations

import calendar
import enum
from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta

WEEK_DAYS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

DATE_FORMATS = ("dd/mm/yy", "dd/mm/yyyy", "full")


class MonthOverflow(enum.Enum):
    """What to do when month arithmetic lands on a day the month lacks.

    ``ROLLOVER`` lets the surplus days spill into the following month
    (Jan 31 + 1 month = Mar 2 in a leap year). ``CLAMP`` pins the day to
    the last day of the target month (Jan 31 + 1 month = Feb 29).
    """

    ROLLOVER = "rollover"
    CLAMP = "clamp"


def add_days(value: datetime, days: int) -> datetime:
    return value + timedelta(days=days)


def add_weeks(value: datetime, weeks: int) -> datetime:
    return value + timedelta(days=weeks * 7)


def add_months(
    value: datetime,
    months: int,
    overflow: MonthOverflow = MonthOverflow.ROLLOVER,
) -> datetime:
    """Shift ``value`` by whole months, keeping the time of day."""
    if overflow is MonthOverflow.CLAMP:
        return value + relativedelta(months=months)
    year, month_index = divmod(value.year * 12 + value.month - 1 + months, 12)
    first = value.replace(year=year, month=month_index + 1, day=1)
    return first + timedelta(days=value.day - 1)


def add_years(
    value: datetime,
    years: int,
    overflow: MonthOverflow = MonthOverflow.ROLLOVER,
) -> datetime:
    """Shift ``value`` by whole years; Feb 29 follows ``overflow``."""
    return add_months(value, years * 12, overflow)


def start_of_day(value: datetime | date) -> datetime:
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, time.min)


def end_of_day(value: datetime | date) -> datetime:
    """Last representable millisecond of the day."""
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, time(23, 59, 59, 999000))


def is_same_day(first: datetime | date, second: datetime | date) -> bool:
    return _as_date(first) == _as_date(second)


def month_name(value: datetime | date) -> str:
    return calendar.month_name[value.month]


def format_date(value: datetime | date, fmt: str = "dd/mm/yy") -> str:
    """Format a date for display.

    Args:
        value: Date or datetime to format.
        fmt: ``dd/mm/yy``, ``dd/mm/yyyy`` or ``full``
            (e.g. ``Monday 1 January 2024``).

    Raises:
        ValueError: On an unknown format name.
    """
    if fmt == "dd/mm/yy":
        return f"{value.day:02d}/{value.month:02d}/{value.year % 100:02d}"
    if fmt == "dd/mm/yyyy":
        return f"{value.day:02d}/{value.month:02d}/{value.year}"
    if fmt == "full":
        weekday = calendar.day_name[value.weekday()]
        return f"{weekday} {value.day} {month_name(value)} {value.year}"
    raise ValueError(f"Unknown date format {fmt!r}, expected one of {DATE_FORMATS}")


def format_time(value: datetime) -> str:
    """24-hour ``HH:MM``."""
    return f"{value.hour:02d}:{value.minute:02d}"


def month_days(year: int, month: int) -> list[date]:
    """Days shown in a Sunday-first month grid.

    The month is padded with trailing days of the previous month and
    leading days of the next so the list covers whole weeks.
    """
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    lead = _sunday_index(first)
    trail = 6 - _sunday_index(last)
    start = first - timedelta(days=lead)
    total = lead + last.day + trail
    return [start + timedelta(days=offset) for offset in range(total)]


def _sunday_index(day: date) -> int:
    """Weekday with Sunday as 0, matching ``WEEK_DAYS``."""
    return (day.weekday() + 1) % 7


def _as_date(value: datetime | date) -> date:
    return value.date() if isinstance(value, datetime) else value
