"""Access-token authentication for the hosted event store."""

from __future__ import annotations

import aiohttp

from .const import AUTH_TOKEN_PATH, HEADER_API_KEY
from .exceptions import ApiConnectionError, AuthenticationError


class StoreAuth:
    """Holds the project API key and the signed-in user's access token.

    Lifecycle:
        1. Requests carry the project key as both ``apikey`` and bearer
           token until ``authenticate()`` succeeds.
        2. After sign-in the bearer is the user's access token.
        3. On 401/403 the client calls ``mark_unauthenticated()``; the
           caller signs in again.
    """

    def __init__(self, session: aiohttp.ClientSession, base_url: str, api_key: str) -> None:
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._access_token: str | None = None
        self._user_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self._access_token is not None

    @property
    def user_id(self) -> str | None:
        """Id of the signed-in user, if any."""
        return self._user_id

    async def authenticate(self, email: str, password: str) -> None:
        """Exchange email and password for an access token.

        Raises:
            AuthenticationError: On rejected credentials or a response
                without a token.
            ApiConnectionError: If the server is unreachable.
        """
        url = f"{self._base_url}{AUTH_TOKEN_PATH}"
        try:
            async with self._session.post(
                url,
                params={"grant_type": "password"},
                json={"email": email, "password": password},
                headers={HEADER_API_KEY: self._api_key},
            ) as resp:
                if resp.status >= 400:
                    body = await resp.text()
                    raise AuthenticationError(
                        f"Sign-in failed: HTTP {resp.status} - {body}"
                    )
                data = await resp.json()
        except aiohttp.ClientError as err:
            raise ApiConnectionError(f"Connection error during sign-in: {err}") from err

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise AuthenticationError("Sign-in response did not include an access token")
        self._access_token = token
        user = data.get("user") or {}
        self._user_id = str(user["id"]) if user.get("id") else None

    def mark_unauthenticated(self) -> None:
        self._access_token = None

    def get_headers(self) -> dict[str, str]:
        """Headers for a REST request."""
        return {
            HEADER_API_KEY: self._api_key,
            "Authorization": f"Bearer {self._access_token or self._api_key}",
            "Accept": "application/json",
        }
