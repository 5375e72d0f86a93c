"""Conftest: lightweight aiohttp stand-ins for testing the event store client.

The client only needs ``request()``/``post()`` returning async context
managers and an async ``close()``, so a scripted fake session is enough to
exercise request building and error mapping without a network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest


@dataclass
class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse."""

    status: int = 200
    payload: Any = None
    headers: dict[str, str] = field(default_factory=dict)

    async def json(self) -> Any:
        return self.payload

    async def text(self) -> str:
        return "" if self.payload is None else str(self.payload)


class _ResponseContext:
    def __init__(self, response: FakeResponse) -> None:
        self._response = response

    async def __aenter__(self) -> FakeResponse:
        return self._response

    async def __aexit__(self, *_: Any) -> None:
        return None


@dataclass
class RecordedCall:
    method: str
    url: str
    kwargs: dict[str, Any]

    @property
    def params(self) -> list[tuple[str, str]]:
        return list(self.kwargs.get("params") or [])

    @property
    def headers(self) -> dict[str, str]:
        return dict(self.kwargs.get("headers") or {})


class FakeSession:
    """Stand-in for aiohttp.ClientSession replaying queued responses.

    Queue a ``FakeResponse`` (or an exception to raise) per expected call.
    """

    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self._queue: list[FakeResponse | Exception] = []
        self.closed = False

    def queue(self, *responses: FakeResponse | Exception) -> None:
        self._queue.extend(responses)

    def request(self, method: str, url: str, **kwargs: Any) -> _ResponseContext:
        self.calls.append(RecordedCall(method, url, kwargs))
        nxt = self._queue.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return _ResponseContext(nxt)

    def post(self, url: str, **kwargs: Any) -> _ResponseContext:
        return self.request("POST", url, **kwargs)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()
