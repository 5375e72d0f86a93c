"""Constants for the kalendi package."""

__version__ = "0.1.0"

# Upper bound on generated occurrences for rules with neither ``count``
# nor ``end_date``.
DEFAULT_MAX_OCCURRENCES = 999

DEFAULT_EVENT_COLOR = "#007AFF"

EVENTS_TABLE = "events"
USERS_TABLE = "users"

REST_PATH = "/rest/v1"
AUTH_TOKEN_PATH = "/auth/v1/token"

HEADER_API_KEY = "apikey"
HEADER_PREFER = "Prefer"

REMINDER_CHANNEL_ID = "kalendi-events"
REMINDER_TITLE = "Event Reminder"
