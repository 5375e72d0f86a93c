"""Calendar events with client-side recurrence expansion."""

from .const import DEFAULT_MAX_OCCURRENCES, __version__
from ._client import EventStoreClient
from .agenda import CalendarDay, build_month_grid, events_on_day, month_window, shift_month
from .dates import MonthOverflow, format_date, format_time
from .exceptions import (
    ApiConnectionError,
    ApiResponseError,
    AuthenticationError,
    InvalidRuleError,
    KalendiError,
    MalformedRecordError,
    RateLimitError,
)
from .models import EventInstance, EventTemplate, Frequency, RecurrenceRule, User
from .recurrence import (
    expand_events,
    expand_recurring_event,
    format_recurrence_rule,
    iter_occurrences,
    next_occurrence,
)
from .reminders import Reminder, plan_reminder, plan_reminders

__all__ = [
    "__version__",
    "DEFAULT_MAX_OCCURRENCES",
    "EventStoreClient",
    "CalendarDay",
    "build_month_grid",
    "events_on_day",
    "month_window",
    "shift_month",
    "MonthOverflow",
    "format_date",
    "format_time",
    "ApiConnectionError",
    "ApiResponseError",
    "AuthenticationError",
    "InvalidRuleError",
    "KalendiError",
    "MalformedRecordError",
    "RateLimitError",
    "EventInstance",
    "EventTemplate",
    "Frequency",
    "RecurrenceRule",
    "User",
    "expand_events",
    "expand_recurring_event",
    "format_recurrence_rule",
    "iter_occurrences",
    "next_occurrence",
    "Reminder",
    "plan_reminder",
    "plan_reminders",
]
