"""Voluptuous schemas for stored event, rule and user records.

Schemas operate on decamelized (snake_case) dicts and coerce date fields
to naive datetimes. Unknown keys are dropped.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import voluptuous as vol

from ._serialization import parse_datetime
from .const import DEFAULT_EVENT_COLOR

FREQUENCIES = ("daily", "weekly", "monthly", "yearly")


def coerce_datetime(value: Any) -> datetime:
    """Validator accepting a datetime or an ISO-8601 string."""
    if isinstance(value, datetime):
        return parse_datetime(value)
    if not isinstance(value, str):
        raise vol.Invalid(f"expected ISO-8601 string, got {type(value).__name__}")
    try:
        return parse_datetime(value)
    except ValueError as err:
        raise vol.Invalid(f"invalid ISO-8601 date-time {value!r}: {err}") from err


def _int_tuple(minimum: int, maximum: int) -> vol.All:
    return vol.All(
        vol.Any(None, [vol.All(vol.Coerce(int), vol.Range(min=minimum, max=maximum))]),
        lambda items: tuple(items or ()),
    )


_OPTIONAL_DATETIME = vol.Any(None, coerce_datetime)
_OPTIONAL_STR = vol.Any(None, str)

RULE_SCHEMA = vol.Schema(
    {
        vol.Required("frequency"): vol.All(str, vol.Lower, vol.In(FREQUENCIES)),
        vol.Optional("interval", default=1): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
        vol.Optional("end_date", default=None): _OPTIONAL_DATETIME,
        vol.Optional("count", default=None): vol.Any(
            None, vol.All(vol.Coerce(int), vol.Range(min=0))
        ),
        vol.Optional("by_day", default=None): _int_tuple(0, 6),
        vol.Optional("by_month_day", default=None): _int_tuple(1, 31),
    },
    extra=vol.REMOVE_EXTRA,
)

EVENT_SCHEMA = vol.Schema(
    {
        vol.Required("id"): vol.Coerce(str),
        vol.Optional("title", default=""): vol.Any(None, str),
        vol.Required("start_date"): coerce_datetime,
        vol.Required("end_date"): coerce_datetime,
        vol.Optional("all_day", default=False): vol.Boolean(),
        vol.Optional("color", default=DEFAULT_EVENT_COLOR): vol.Any(None, str),
        vol.Optional("description", default=None): _OPTIONAL_STR,
        vol.Optional("location", default=None): _OPTIONAL_STR,
        vol.Optional("reminder_time", default=None): vol.Any(None, vol.Coerce(int)),
        vol.Optional("user_id", default=None): vol.Any(None, vol.Coerce(str)),
        vol.Optional("is_recurring", default=False): vol.Boolean(),
        vol.Optional("recurrence_rule", default=None): vol.Any(None, dict),
        vol.Optional("original_event_id", default=None): _OPTIONAL_STR,
        vol.Optional("created_at", default=None): _OPTIONAL_DATETIME,
        vol.Optional("updated_at", default=None): _OPTIONAL_DATETIME,
    },
    extra=vol.REMOVE_EXTRA,
)

USER_SCHEMA = vol.Schema(
    {
        vol.Required("id"): vol.Coerce(str),
        vol.Optional("email", default=""): vol.Any(None, str),
        vol.Optional("name", default=""): vol.Any(None, str),
        vol.Optional("avatar", default=None): _OPTIONAL_STR,
        vol.Optional("created_at", default=None): _OPTIONAL_DATETIME,
        vol.Optional("fcm_token", default=None): _OPTIONAL_STR,
    },
    extra=vol.REMOVE_EXTRA,
)
