"""Client-side expansion of recurring events into concrete occurrences.

A recurring event is stored once, as a template whose own start is the
first occurrence, plus a :class:`~kalendi.models.RecurrenceRule`.
Occurrences are synthesized on demand for a query window and never stored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from datetime import datetime

from .const import DEFAULT_MAX_OCCURRENCES
from .dates import MonthOverflow, add_days, add_months, add_weeks, end_of_day, format_date
from .models import EventInstance, EventTemplate, Frequency, RecurrenceRule

_LOGGER = logging.getLogger(__name__)

_FREQUENCY_LABELS = {
    Frequency.DAILY: "Daily",
    Frequency.WEEKLY: "Weekly",
    Frequency.MONTHLY: "Monthly",
    Frequency.YEARLY: "Yearly",
}

_FREQUENCY_UNITS = {
    Frequency.DAILY: "days",
    Frequency.WEEKLY: "weeks",
    Frequency.MONTHLY: "months",
    Frequency.YEARLY: "years",
}


def iter_occurrences(
    template: EventTemplate,
    window_start: datetime,
    window_end: datetime,
    *,
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
    month_overflow: MonthOverflow = MonthOverflow.ROLLOVER,
    include_overlapping: bool = False,
) -> Iterator[EventTemplate]:
    """Lazily yield the occurrences of ``template`` inside a window.

    A template that is not recurring (or has no rule) is yielded once,
    unchanged, whatever the window. Otherwise occurrences are yielded in
    ascending start order while their start is ``<= window_end`` and the
    occurrence limit has not been reached. The limit is ``rule.count``
    when set, else ``max_occurrences``. A rule ``end_date`` bounds occurrence
    starts inclusively through the end of that calendar day; when ``count``
    is also set, ``count`` wins.

    An occurrence is materialized when its start is ``>= window_start``.
    With ``include_overlapping`` an occurrence that starts earlier but
    ends at or after ``window_start`` is materialized as well.

    ``window_start <= window_end`` is a precondition and is not checked.

    Raises:
        InvalidRuleError: If the rule has a non-positive interval, a
            negative count or an unknown frequency. Raised on call, not
            on first iteration.
        ValueError: If ``max_occurrences`` is negative.
    """
    if not template.expands:
        return iter((template,))

    rule: RecurrenceRule = template.recurrence_rule  # type: ignore[assignment]
    rule.validate()
    if max_occurrences < 0:
        raise ValueError(f"max_occurrences must not be negative, got {max_occurrences}")

    return _generate(
        template,
        rule,
        window_start,
        window_end,
        max_occurrences=max_occurrences,
        month_overflow=month_overflow,
        include_overlapping=include_overlapping,
    )


def expand_recurring_event(
    template: EventTemplate,
    window_start: datetime,
    window_end: datetime,
    **options,
) -> list[EventTemplate]:
    """Return the occurrences of ``template`` in the window as a list.

    Accepts the keyword options of :func:`iter_occurrences`.
    """
    return list(iter_occurrences(template, window_start, window_end, **options))


def expand_events(
    templates: Iterable[EventTemplate],
    window_start: datetime,
    window_end: datetime,
    **options,
) -> list[EventTemplate]:
    """Expand a batch of stored events and merge them by start date."""
    events: list[EventTemplate] = []
    for template in templates:
        events.extend(iter_occurrences(template, window_start, window_end, **options))
    events.sort(key=lambda ev: ev.start_date)
    return events


def next_occurrence(
    current: datetime,
    rule: RecurrenceRule,
    month_overflow: MonthOverflow = MonthOverflow.ROLLOVER,
) -> datetime:
    """Advance one step of the rule's cadence from ``current``."""
    frequency = Frequency.parse(rule.frequency)
    if frequency is Frequency.DAILY:
        return add_days(current, rule.interval)
    if frequency is Frequency.WEEKLY:
        return add_weeks(current, rule.interval)
    return add_months(current, _months_per_step(frequency, rule), month_overflow)


def format_recurrence_rule(rule: RecurrenceRule, *, date_format: str = "dd/mm/yy") -> str:
    """Summarize a rule for display, e.g. ``Weekly every 2 weeks (5 times)``.

    ``count`` is shown in preference to ``end_date`` when both are set.
    """
    frequency = Frequency.parse(rule.frequency)
    text = _FREQUENCY_LABELS[frequency]

    if rule.interval > 1:
        text += f" every {rule.interval} {_FREQUENCY_UNITS[frequency]}"

    if rule.count is not None:
        text += f" ({rule.count} times)"
    elif rule.end_date is not None:
        text += f" until {format_date(rule.end_date, date_format)}"

    return text


def _generate(
    template: EventTemplate,
    rule: RecurrenceRule,
    window_start: datetime,
    window_end: datetime,
    *,
    max_occurrences: int,
    month_overflow: MonthOverflow,
    include_overlapping: bool,
) -> Iterator[EventTemplate]:
    if rule.count is not None:
        limit = rule.count
        upper = window_end
    else:
        limit = max_occurrences
        upper = (
            window_end
            if rule.end_date is None
            else min(window_end, end_of_day(rule.end_date))
        )

    duration = template.duration
    produced = 0
    for index, start in enumerate(_cadence(template.start_date, rule, month_overflow)):
        if start > upper:
            break
        if index >= limit:
            if rule.count is None:
                _LOGGER.warning(
                    "Recurring event %s truncated after %d occurrences",
                    template.id,
                    limit,
                )
            break
        if start >= window_start or (
            include_overlapping and start + duration >= window_start
        ):
            produced += 1
            yield EventInstance.from_template(template, index, start)

    _LOGGER.debug(
        "Expanded %s (%s) into %d occurrences between %s and %s",
        template.id,
        format_recurrence_rule(rule),
        produced,
        window_start,
        window_end,
    )


def _cadence(
    anchor: datetime,
    rule: RecurrenceRule,
    month_overflow: MonthOverflow,
) -> Iterator[datetime]:
    """Yield occurrence starts from ``anchor`` onward, without end.

    Under ``CLAMP`` month-based steps are measured from the anchor so a
    clamped day (Jan 31 -> Feb 29) does not shorten later months.
    Otherwise each step chains from the previous occurrence.
    """
    frequency = Frequency.parse(rule.frequency)
    anchored = (
        month_overflow is MonthOverflow.CLAMP
        and frequency in (Frequency.MONTHLY, Frequency.YEARLY)
    )
    cursor = anchor
    step = 0
    while True:
        yield cursor
        step += 1
        if anchored:
            cursor = add_months(
                anchor, _months_per_step(frequency, rule) * step, month_overflow
            )
        else:
            cursor = next_occurrence(cursor, rule, month_overflow)


def _months_per_step(frequency: Frequency, rule: RecurrenceRule) -> int:
    return rule.interval * (12 if frequency is Frequency.YEARLY else 1)
