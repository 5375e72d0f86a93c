"""Record key transformation and ISO-8601 date handling."""

from __future__ import annotations

import re
from datetime import datetime, tzinfo
from typing import Any

from dateutil import tz as dateutil_tz
from dateutil.parser import isoparse

_CAMEL_TO_SNAKE = re.compile(r"(?<=[a-z0-9])([A-Z])")
_SNAKE_TO_CAMEL = re.compile(r"_([a-z])")


def _to_snake(name: str) -> str:
    return _CAMEL_TO_SNAKE.sub(r"_\1", name).lower()


def _to_camel(name: str) -> str:
    return _SNAKE_TO_CAMEL.sub(lambda m: m.group(1).upper(), name)


def decamelize(data: Any) -> Any:
    """Recursively convert all dict keys from camelCase to snake_case."""
    if isinstance(data, dict):
        return {_to_snake(k): decamelize(v) for k, v in data.items()}
    if isinstance(data, list):
        return [decamelize(item) for item in data]
    return data


def camelize(data: Any) -> Any:
    """Recursively convert all dict keys from snake_case to camelCase."""
    if isinstance(data, dict):
        return {_to_camel(k): camelize(v) for k, v in data.items()}
    if isinstance(data, list):
        return [camelize(item) for item in data]
    return data


def parse_datetime(value: str | datetime, *, tz: tzinfo | None = None) -> datetime:
    """Parse an ISO-8601 string into a naive local datetime.

    Offset-qualified values (``2024-01-01T09:00:00Z``) are converted to
    ``tz`` (the system zone when omitted) before the offset is dropped.
    Naive values are taken as already local.

    Raises:
        ValueError: If the string is not ISO-8601.
    """
    dt = value if isinstance(value, datetime) else isoparse(value)
    if dt.tzinfo is not None:
        dt = dt.astimezone(tz or dateutil_tz.tzlocal()).replace(tzinfo=None)
    return dt


def format_datetime(value: datetime | None) -> str | None:
    """Serialize a datetime for storage; ``None`` passes through."""
    if value is None:
        return None
    return value.isoformat()
