"""Tests for month windows and grid assembly."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from kalendi.agenda import build_month_grid, events_on_day, month_window, shift_month
from kalendi.models import EventTemplate, Frequency, RecurrenceRule
from kalendi.recurrence import expand_events


def _make_event(event_id: str, start: datetime, **kwargs) -> EventTemplate:
    return EventTemplate(
        id=event_id,
        title=event_id.title(),
        start_date=start,
        end_date=start + timedelta(hours=1),
        **kwargs,
    )


class TestMonthWindow:
    def test_leap_february(self):
        start, end = month_window(2024, 2)
        assert start == datetime(2024, 2, 1)
        assert end == datetime(2024, 2, 29, 23, 59, 59, 999000)

    def test_last_day_evening_inside_window(self):
        start, end = month_window(2024, 1)
        assert start <= datetime(2024, 1, 31, 20, 0) <= end


class TestShiftMonth:
    def test_next_from_month_end(self):
        assert shift_month(date(2024, 1, 31), 1) == date(2024, 2, 1)

    def test_previous_across_year(self):
        assert shift_month(date(2024, 1, 15), -1) == date(2023, 12, 1)


class TestEventsOnDay:
    def test_filters_and_orders(self):
        late = _make_event("late", datetime(2024, 1, 8, 18, 0))
        early = _make_event("early", datetime(2024, 1, 8, 7, 0))
        other = _make_event("other", datetime(2024, 1, 9, 7, 0))
        assert events_on_day([late, other, early], date(2024, 1, 8)) == [early, late]

    def test_no_events(self):
        assert events_on_day([], datetime(2024, 1, 8)) == []


class TestBuildMonthGrid:
    def test_grid_with_expanded_series(self):
        weekly = _make_event(
            "yoga",
            datetime(2023, 12, 4, 19, 0),
            is_recurring=True,
            recurrence_rule=RecurrenceRule(frequency=Frequency.WEEKLY),
        )
        window = month_window(2024, 1)
        events = expand_events([weekly], *window)

        grid = build_month_grid(
            2024, 1, events, selected=date(2024, 1, 15), today=date(2024, 1, 10)
        )

        assert len(grid) == 35
        mondays = [cell for cell in grid if cell.events]
        assert [cell.day for cell in mondays] == [1, 8, 15, 22, 29]
        assert all(cell.events[0].original_event_id == "yoga" for cell in mondays)

        by_date = {cell.date: cell for cell in grid}
        assert by_date[date(2024, 1, 10)].is_today
        assert by_date[date(2024, 1, 15)].is_selected
        assert not by_date[date(2023, 12, 31)].is_current_month
        assert by_date[date(2024, 2, 3)].month == 2
        assert sum(cell.is_selected for cell in grid) == 1

    def test_series_started_before_window_still_appears(self):
        """The template's own start is outside the month, its occurrences are not."""
        weekly = _make_event(
            "yoga",
            datetime(2023, 12, 4, 19, 0),
            is_recurring=True,
            recurrence_rule=RecurrenceRule(frequency=Frequency.WEEKLY, count=10),
        )
        events = expand_events([weekly], *month_window(2024, 1))
        assert [ev.id for ev in events] == ["yoga_4", "yoga_5", "yoga_6", "yoga_7", "yoga_8"]

    def test_no_selection(self):
        grid = build_month_grid(2024, 3, [], today=date(2024, 3, 1))
        assert not any(cell.is_selected for cell in grid)
        assert all(cell.events == () for cell in grid)
