"""Data models for calendar events and recurrence rules."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta
from typing import Any

import voluptuous as vol

from ._schema import EVENT_SCHEMA, RULE_SCHEMA, USER_SCHEMA
from ._serialization import camelize, decamelize, format_datetime
from .const import DEFAULT_EVENT_COLOR
from .exceptions import InvalidRuleError, MalformedRecordError


class Frequency(str, enum.Enum):
    """Unit in which a recurrence rule advances."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: Any) -> Frequency:
        """Return the matching member, raising InvalidRuleError otherwise."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidRuleError(f"Unknown recurrence frequency: {value!r}") from None


@dataclass(frozen=True)
class RecurrenceRule:
    """Cadence and end condition of a recurring event.

    ``by_day`` and ``by_month_day`` are kept for round-tripping stored
    records; expansion does not consult them.
    """

    frequency: Frequency
    interval: int = 1
    end_date: datetime | None = None
    count: int | None = None
    by_day: tuple[int, ...] = field(default_factory=tuple)
    by_month_day: tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> RecurrenceRule:
        """Construct from a stored rule dict (snake_case or camelCase keys).

        Raises:
            InvalidRuleError: If the rule is malformed.
        """
        try:
            clean = RULE_SCHEMA(decamelize(data))
        except vol.Invalid as err:
            raise InvalidRuleError(f"Invalid recurrence rule: {err}") from err
        return cls(
            frequency=Frequency(clean["frequency"]),
            interval=clean["interval"],
            end_date=clean["end_date"],
            count=clean["count"],
            by_day=clean["by_day"],
            by_month_day=clean["by_month_day"],
        )

    def to_record(self, *, camel: bool = False) -> dict[str, Any]:
        """Convert to a storable dict with ISO-8601 dates."""
        record: dict[str, Any] = {
            "frequency": Frequency.parse(self.frequency).value,
            "interval": self.interval,
        }
        if self.end_date is not None:
            record["end_date"] = format_datetime(self.end_date)
        if self.count is not None:
            record["count"] = self.count
        if self.by_day:
            record["by_day"] = list(self.by_day)
        if self.by_month_day:
            record["by_month_day"] = list(self.by_month_day)
        return camelize(record) if camel else record

    def validate(self) -> None:
        """Check that the rule can be expanded.

        Raises:
            InvalidRuleError: On an unknown frequency, a non-positive
                interval or a negative count.
        """
        Frequency.parse(self.frequency)
        if (
            not isinstance(self.interval, int)
            or isinstance(self.interval, bool)
            or self.interval <= 0
        ):
            raise InvalidRuleError(
                f"Recurrence interval must be a positive integer, got {self.interval!r}"
            )
        if self.count is not None and self.count < 0:
            raise InvalidRuleError(
                f"Recurrence count must not be negative, got {self.count!r}"
            )


@dataclass(frozen=True)
class EventTemplate:
    """A stored calendar event.

    When ``is_recurring`` is set and a rule is present, the event is the
    template of a series and its own start is occurrence #0.
    """

    id: str
    title: str
    start_date: datetime
    end_date: datetime
    all_day: bool = False
    color: str = DEFAULT_EVENT_COLOR
    description: str | None = None
    location: str | None = None
    reminder_time: int | None = None  # minutes before start
    user_id: str | None = None
    is_recurring: bool = False
    recurrence_rule: RecurrenceRule | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> EventTemplate:
        """Construct from a stored record (snake_case or camelCase keys).

        Raises:
            MalformedRecordError: If required fields are missing or invalid.
            InvalidRuleError: If the embedded recurrence rule is invalid.
        """
        clean = _validate_event(data)
        return cls(**_template_kwargs(clean))

    @property
    def duration(self) -> timedelta:
        """Length of the event; negative if the record ends before it starts."""
        return self.end_date - self.start_date

    @property
    def expands(self) -> bool:
        """Whether the expander generates a series for this event."""
        return self.is_recurring and self.recurrence_rule is not None

    def to_record(self, *, camel: bool = False) -> dict[str, Any]:
        """Convert to a storable dict with ISO-8601 dates."""
        record: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "start_date": format_datetime(self.start_date),
            "end_date": format_datetime(self.end_date),
            "all_day": self.all_day,
            "location": self.location,
            "color": self.color,
            "reminder_time": self.reminder_time,
            "user_id": self.user_id,
            "is_recurring": self.is_recurring,
            "recurrence_rule": (
                self.recurrence_rule.to_record() if self.recurrence_rule else None
            ),
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }
        return camelize(record) if camel else record


@dataclass(frozen=True)
class EventInstance(EventTemplate):
    """A single occurrence synthesized from a recurring template.

    Never stored; ``id`` is ``"<template id>_<occurrence index>"``.
    """

    original_event_id: str | None = None
    occurrence_index: int = 0

    @classmethod
    def from_template(
        cls, template: EventTemplate, index: int, start: datetime
    ) -> EventInstance:
        """Materialize occurrence ``index`` of ``template`` starting at ``start``."""
        values = {f.name: getattr(template, f.name) for f in fields(EventTemplate)}
        values.update(
            id=f"{template.id}_{index}",
            start_date=start,
            end_date=start + template.duration,
            original_event_id=template.id,
            occurrence_index=index,
        )
        return cls(**values)

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> EventInstance:
        """Construct from a serialized instance.

        The occurrence index is recovered from the ``_<n>`` id suffix.
        """
        clean = _validate_event(data)
        original_id = clean["original_event_id"]
        if not original_id:
            raise MalformedRecordError(
                f"Instance record {clean['id']} has no original_event_id"
            )
        suffix = clean["id"][len(original_id) + 1:]
        return cls(
            **_template_kwargs(clean),
            original_event_id=original_id,
            occurrence_index=int(suffix) if suffix.isdigit() else 0,
        )

    def to_record(self, *, camel: bool = False) -> dict[str, Any]:
        record = super().to_record()
        record["original_event_id"] = self.original_event_id
        return camelize(record) if camel else record


@dataclass(frozen=True)
class User:
    """Calendar owner profile."""

    id: str
    email: str
    name: str
    avatar: str | None = None
    created_at: datetime | None = None
    fcm_token: str | None = None

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> User:
        """Construct from a stored user record."""
        try:
            clean = USER_SCHEMA(decamelize(data))
        except vol.Invalid as err:
            raise MalformedRecordError(f"Invalid user record: {err}") from err
        return cls(
            id=clean["id"],
            email=clean["email"] or "",
            name=clean["name"] or "",
            avatar=clean["avatar"],
            created_at=clean["created_at"],
            fcm_token=clean["fcm_token"],
        )


def _validate_event(data: dict[str, Any]) -> dict[str, Any]:
    """Run the event schema over a raw record."""
    if not isinstance(data, dict):
        raise MalformedRecordError(f"Expected event record dict, got {type(data).__name__}")
    try:
        return EVENT_SCHEMA(decamelize(data))
    except vol.Invalid as err:
        raise MalformedRecordError(f"Invalid event record: {err}") from err


def _template_kwargs(clean: dict[str, Any]) -> dict[str, Any]:
    """Map validated record fields to EventTemplate constructor arguments."""
    raw_rule = clean["recurrence_rule"]
    return {
        "id": clean["id"],
        "title": clean["title"] or "",
        "start_date": clean["start_date"],
        "end_date": clean["end_date"],
        "all_day": clean["all_day"],
        "color": clean["color"] or DEFAULT_EVENT_COLOR,
        "description": clean["description"],
        "location": clean["location"],
        "reminder_time": clean["reminder_time"],
        "user_id": clean["user_id"],
        "is_recurring": clean["is_recurring"],
        "recurrence_rule": RecurrenceRule.from_record(raw_rule) if raw_rule else None,
        "created_at": clean["created_at"],
        "updated_at": clean["updated_at"],
    }
