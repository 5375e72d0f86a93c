"""Exception hierarchy for kalendi."""

from __future__ import annotations


class KalendiError(Exception):
    """Base exception for all kalendi errors."""


class InvalidRuleError(KalendiError, ValueError):
    """A recurrence rule cannot be expanded.

    Raised for a non-positive interval, a negative count or an unknown
    frequency.
    """


class MalformedRecordError(KalendiError, ValueError):
    """A stored event or user record does not have the expected shape."""


class AuthenticationError(KalendiError):
    """Authentication failed or the access token expired."""


class ApiConnectionError(KalendiError):
    """Backend is unreachable (network error, DNS, timeout)."""


class ApiResponseError(KalendiError):
    """Backend returned an unexpected error response.

    Attributes:
        status_code: HTTP status code, if available.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ApiResponseError):
    """Backend returned 429 Too Many Requests.

    Attributes:
        retry_after: Seconds to wait before retrying, if provided by the server.
    """

    def __init__(
        self,
        message: str = "Rate limited",
        *,
        status_code: int = 429,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after
