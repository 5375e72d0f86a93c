"""Reminder planning for events and occurrences.

Only computes what should be scheduled; delivering notifications is left
to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from .const import REMINDER_CHANNEL_ID, REMINDER_TITLE
from .models import EventTemplate

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reminder:
    """A local notification to schedule ahead of an event."""

    notification_id: str
    event_id: str
    fire_at: datetime
    title: str
    message: str
    channel_id: str = REMINDER_CHANNEL_ID


def notification_id(event_id: str) -> str:
    """Stable notification id used to schedule and cancel a reminder."""
    return f"event-{event_id}"


def plan_reminder(event: EventTemplate, now: datetime) -> Reminder | None:
    """Return the reminder for ``event``, or None if there is nothing to schedule.

    Nothing is scheduled when the event has no reminder offset or when the
    reminder time is not after ``now``.
    """
    if not event.reminder_time:
        return None

    fire_at = event.start_date - timedelta(minutes=event.reminder_time)
    if fire_at <= now:
        _LOGGER.debug("Reminder for %s at %s already passed", event.id, fire_at)
        return None

    return Reminder(
        notification_id=notification_id(event.id),
        event_id=event.id,
        fire_at=fire_at,
        title=REMINDER_TITLE,
        message=f"{event.title} starts in {event.reminder_time} minutes",
    )


def plan_reminders(events: Iterable[EventTemplate], now: datetime) -> list[Reminder]:
    """Plan reminders for a batch, ordered by when they fire."""
    planned = [r for r in (plan_reminder(ev, now) for ev in events) if r is not None]
    planned.sort(key=lambda r: r.fire_at)
    return planned
