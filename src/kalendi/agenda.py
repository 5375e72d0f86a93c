"""Month views over expanded events."""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime

from .dates import add_months, end_of_day, is_same_day, month_days, start_of_day
from .models import EventTemplate


@dataclass(frozen=True)
class CalendarDay:
    """One cell of a month grid."""

    date: date
    is_today: bool
    is_selected: bool
    is_current_month: bool
    events: tuple[EventTemplate, ...] = field(default_factory=tuple)

    @property
    def day(self) -> int:
        return self.date.day

    @property
    def month(self) -> int:
        return self.date.month

    @property
    def year(self) -> int:
        return self.date.year


def month_window(year: int, month: int) -> tuple[datetime, datetime]:
    """Inclusive window from the first instant to the last of a month."""
    last = calendar.monthrange(year, month)[1]
    return start_of_day(date(year, month, 1)), end_of_day(date(year, month, last))


def shift_month(value: date, months: int) -> date:
    """First day of the month ``months`` away from ``value``'s month."""
    first = datetime(value.year, value.month, 1)
    return add_months(first, months).date()


def events_on_day(events: Iterable[EventTemplate], day: date | datetime) -> list[EventTemplate]:
    """Events whose start falls on ``day``, in start order."""
    matching = [ev for ev in events if is_same_day(ev.start_date, day)]
    matching.sort(key=lambda ev: ev.start_date)
    return matching


def build_month_grid(
    year: int,
    month: int,
    events: Iterable[EventTemplate],
    *,
    selected: date | None = None,
    today: date | None = None,
) -> list[CalendarDay]:
    """Build the Sunday-first grid for a month with each day's events.

    ``events`` should already be expanded for the grid's range; days are
    matched on event start only.
    """
    today = today or date.today()
    by_day: dict[date, list[EventTemplate]] = {}
    for ev in sorted(events, key=lambda e: e.start_date):
        by_day.setdefault(ev.start_date.date(), []).append(ev)

    return [
        CalendarDay(
            date=day,
            is_today=day == today,
            is_selected=selected is not None and day == selected,
            is_current_month=day.month == month,
            events=tuple(by_day.get(day, ())),
        )
        for day in month_days(year, month)
    ]
