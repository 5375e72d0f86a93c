"""Event store client."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import aiohttp

from ._auth import StoreAuth
from ._serialization import format_datetime
from .const import EVENTS_TABLE, HEADER_PREFER, REST_PATH, USERS_TABLE
from .exceptions import (
    ApiConnectionError,
    ApiResponseError,
    AuthenticationError,
    KalendiError,
    RateLimitError,
)
from .models import EventTemplate, RecurrenceRule, User
from .recurrence import expand_events

_LOGGER = logging.getLogger(__name__)

_RETURN_REPRESENTATION = "return=representation"


class EventStoreClient:
    """Async client for the hosted ``events`` and ``users`` tables.

    Usage::

        async with aiohttp.ClientSession() as session:
            client = EventStoreClient(base_url, api_key, session)
            await client.authenticate("user@example.com", "password")
            events = await client.async_get_window(user_id, start, end)

    If no session is provided, the client creates and manages its own.
    The caller is responsible for calling ``async_close()`` when done
    (or use the client as an async context manager).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._owns_session = session is None
        self._session = session or aiohttp.ClientSession()
        self._rest_url = f"{base_url.rstrip('/')}{REST_PATH}"
        self._auth = StoreAuth(self._session, base_url, api_key)

    async def __aenter__(self) -> EventStoreClient:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.async_close()

    @property
    def authenticated(self) -> bool:
        """Whether a user access token is held."""
        return self._auth.is_authenticated

    @property
    def user_id(self) -> str | None:
        """Id of the signed-in user, if the sign-in response carried one."""
        return self._auth.user_id

    # ------------------------------------------------------------------ #
    #  Authentication
    # ------------------------------------------------------------------ #

    async def authenticate(self, email: str, password: str) -> None:
        """Sign in with email and password.

        Raises:
            AuthenticationError: On invalid credentials.
            ApiConnectionError: If the server is unreachable.
        """
        await self._auth.authenticate(email, password)

    async def async_close(self) -> None:
        """Close the HTTP session if the client owns it."""
        if self._owns_session:
            await self._session.close()

    # ------------------------------------------------------------------ #
    #  Events
    # ------------------------------------------------------------------ #

    async def async_get_events(
        self,
        user_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[EventTemplate]:
        """Fetch a user's stored events ordered by start.

        When both ``start`` and ``end`` are given, only events starting in
        that inclusive range are returned. Recurring templates are returned
        as stored, not expanded.
        """
        params: list[tuple[str, str]] = [
            ("select", "*"),
            ("user_id", f"eq.{user_id}"),
            ("order", "start_date.asc"),
        ]
        if start is not None and end is not None:
            params.append(("start_date", f"gte.{format_datetime(start)}"))
            params.append(("start_date", f"lte.{format_datetime(end)}"))
        data = await self._request("GET", EVENTS_TABLE, params=params)
        return _parse_events(data)

    async def async_get_window(
        self,
        user_id: str,
        window_start: datetime,
        window_end: datetime,
        **expand_options: Any,
    ) -> list[EventTemplate]:
        """Fetch and expand everything to show for a window.

        One-off events are selected by start date in the window. Recurring
        templates starting before the window's end are selected too, since
        their occurrences may fall inside it even when the first does not.

        Accepts the keyword options of
        :func:`kalendi.recurrence.iter_occurrences`.
        """
        start_iso = format_datetime(window_start)
        end_iso = format_datetime(window_end)
        params: list[tuple[str, str]] = [
            ("select", "*"),
            ("user_id", f"eq.{user_id}"),
            (
                "or",
                f"(and(start_date.gte.{start_iso},start_date.lte.{end_iso}),"
                f"and(is_recurring.is.true,start_date.lte.{end_iso}))",
            ),
            ("order", "start_date.asc"),
        ]
        data = await self._request("GET", EVENTS_TABLE, params=params)
        templates = _parse_events(data)
        return expand_events(templates, window_start, window_end, **expand_options)

    async def async_create_event(self, event: EventTemplate) -> EventTemplate:
        """Insert an event and return the stored row.

        The store assigns ``id``, ``created_at`` and ``updated_at``.
        """
        body = event.to_record()
        for key in ("id", "created_at", "updated_at"):
            body.pop(key, None)
        data = await self._request(
            "POST", EVENTS_TABLE, json_body=body, prefer=_RETURN_REPRESENTATION
        )
        return EventTemplate.from_record(_single_row(data))

    async def async_update_event(
        self, event_id: str, updates: dict[str, Any]
    ) -> EventTemplate:
        """Apply a partial update and return the stored row.

        ``updates`` uses record field names; datetime and recurrence rule
        values are serialized.
        """
        body = {key: _record_value(value) for key, value in updates.items()}
        data = await self._request(
            "PATCH",
            EVENTS_TABLE,
            params=[("id", f"eq.{event_id}")],
            json_body=body,
            prefer=_RETURN_REPRESENTATION,
        )
        return EventTemplate.from_record(_single_row(data))

    async def async_delete_event(self, event_id: str) -> None:
        """Delete a stored event."""
        await self._request("DELETE", EVENTS_TABLE, params=[("id", f"eq.{event_id}")])

    # ------------------------------------------------------------------ #
    #  Users
    # ------------------------------------------------------------------ #

    async def async_get_user(self, user_id: str) -> User:
        """Fetch a user's profile row."""
        data = await self._request(
            "GET", USERS_TABLE, params=[("select", "*"), ("id", f"eq.{user_id}")]
        )
        return User.from_record(_single_row(data))

    # ------------------------------------------------------------------ #
    #  Internal HTTP layer
    # ------------------------------------------------------------------ #

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json_body: dict[str, Any] | None = None,
        prefer: str | None = None,
    ) -> Any:
        """Execute a REST request against a table.

        Raises:
            AuthenticationError: On 401/403 responses.
            RateLimitError: On 429 responses.
            ApiResponseError: On other non-2xx responses.
            ApiConnectionError: On network errors.
        """
        url = f"{self._rest_url}/{table}"
        headers = self._auth.get_headers()
        if prefer:
            headers[HEADER_PREFER] = prefer

        kwargs: dict[str, Any] = {"headers": headers}
        if params:
            kwargs["params"] = params
        if json_body is not None:
            kwargs["json"] = json_body

        _LOGGER.debug("%s %s params=%s", method, url, params)
        try:
            async with self._session.request(method, url, **kwargs) as resp:
                if resp.status in (401, 403):
                    self._auth.mark_unauthenticated()
                    raise AuthenticationError(f"Authentication failed: HTTP {resp.status}")

                if resp.status == 429:
                    retry_after = resp.headers.get("Retry-After")
                    raise RateLimitError(
                        retry_after=float(retry_after) if retry_after else None,
                    )

                if resp.status == 204:
                    return None

                if resp.status >= 400:
                    body = await resp.text()
                    raise ApiResponseError(
                        f"API error: HTTP {resp.status} - {body}",
                        status_code=resp.status,
                    )

                return await resp.json()

        except aiohttp.ClientError as err:
            raise ApiConnectionError(f"Connection error: {err}") from err


def _record_value(value: Any) -> Any:
    """Convert a model value to its stored form."""
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, RecurrenceRule):
        return value.to_record()
    return value


def _parse_events(data: Any) -> list[EventTemplate]:
    """Parse event rows, skipping rows that cannot be read."""
    events: list[EventTemplate] = []
    for row in data or []:
        try:
            events.append(EventTemplate.from_record(row))
        except KalendiError:
            _LOGGER.warning(
                "Skipping unreadable event row %s",
                row.get("id") if isinstance(row, dict) else row,
                exc_info=True,
            )
    return events


def _single_row(data: Any) -> dict[str, Any]:
    """Unwrap the one-row list returned for single-row requests."""
    if isinstance(data, list):
        if not data:
            raise ApiResponseError("Expected one row, got none", status_code=404)
        return data[0]
    if isinstance(data, dict):
        return data
    raise ApiResponseError(f"Unexpected response body: {data!r}")
