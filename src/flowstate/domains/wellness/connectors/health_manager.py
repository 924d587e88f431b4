"""Health manager — connects to the aggregation SDK and fetches payloads.

Connecting is two steps: obtain a short-lived auth token from the
aggregation service's REST API, then hand it to the SDK's
``init_connection``. Every fetch requires a successful connection.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Protocol

import httpx

from flowstate.domains.wellness.connectors import HealthDataSDK, SourceType

logger = logging.getLogger(__name__)

DEFAULT_PERMISSIONS = ["ACTIVITY", "DAILY", "SLEEP"]


class TokenProvider(Protocol):
    async def fetch_token(self) -> str: ...

    async def aclose(self) -> None: ...


class HealthAuthClient:
    """Fetches SDK auth tokens from the aggregation service's REST API."""

    def __init__(
        self,
        auth_url: str,
        api_key: str,
        dev_id: str,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.auth_url = auth_url
        self._api_key = api_key
        self._dev_id = dev_id
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient()

    async def fetch_token(self) -> str:
        """POST to the token endpoint and return the ``token`` field.

        Raises:
            HealthAuthError: On transport failure, non-2xx, or a body
                without a string ``token``.
        """
        try:
            response = await self._client.post(
                self.auth_url,
                headers={"x-api-key": self._api_key, "dev-id": self._dev_id},
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise HealthAuthError(f"Could not obtain health auth token: {exc}") from exc

        try:
            token = response.json().get("token")
        except (ValueError, AttributeError) as exc:
            raise HealthAuthError(f"Invalid auth token response: {exc}") from exc
        if not isinstance(token, str) or not token:
            raise HealthAuthError("Auth token response did not include a token")
        return token

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()


class StaticTokenProvider:
    """Returns a fixed token (mock SDK, local development)."""

    def __init__(self, token: str = "mock-token") -> None:
        self._token = token

    async def fetch_token(self) -> str:
        return self._token

    async def aclose(self) -> None:
        pass


class HealthManager:
    """Connection state plus the latest payloads fetched from the SDK.

    Usage::

        manager = HealthManager(MockHealthSDK(), StaticTokenProvider())
        await manager.connect()
        data = await manager.fetch_all(start, end)
    """

    def __init__(
        self,
        sdk: HealthDataSDK,
        token_provider: TokenProvider,
        *,
        source_type: SourceType = SourceType.APPLE_HEALTH,
        permissions: list[str] | None = None,
    ) -> None:
        self._sdk = sdk
        self._tokens = token_provider
        self.source_type = source_type
        self.permissions = list(permissions or DEFAULT_PERMISSIONS)
        self.is_connected = False
        self.is_loading = False
        self.error: str | None = None
        self.activity_payload: dict[str, Any] | None = None
        self.daily_payload: dict[str, Any] | None = None
        self.sleep_payload: dict[str, Any] | None = None

    async def connect(self) -> None:
        """Fetch an auth token and initialise the SDK connection."""
        try:
            token = await self._tokens.fetch_token()
            ok = await self._sdk.init_connection(self.source_type, token, self.permissions)
        except HealthConnectorError as exc:
            self.error = str(exc)
            raise
        if not ok:
            self.error = "Connection failed"
            raise HealthConnectionError(
                f"Health SDK refused connection to {self.source_type.value}"
            )
        self.is_connected = True
        self.error = None
        logger.info("Connected to health source %s", self.source_type.value)

    async def fetch_activity(self, start_date: datetime, end_date: datetime) -> dict[str, Any]:
        self._require_connection()
        self.activity_payload = await self._sdk.get_activity(self.source_type, start_date, end_date)
        return self.activity_payload

    async def fetch_daily(self, start_date: datetime, end_date: datetime) -> dict[str, Any]:
        self._require_connection()
        self.daily_payload = await self._sdk.get_daily(self.source_type, start_date, end_date)
        return self.daily_payload

    async def fetch_sleep(self, start_date: datetime, end_date: datetime) -> dict[str, Any]:
        self._require_connection()
        self.sleep_payload = await self._sdk.get_sleep(self.source_type, start_date, end_date)
        return self.sleep_payload

    async def fetch_all(self, start_date: datetime, end_date: datetime) -> dict[str, Any]:
        """Fetch activity, daily and sleep payloads in sequence."""
        self._require_connection()
        self.is_loading = True
        try:
            return {
                "activity": await self.fetch_activity(start_date, end_date),
                "daily": await self.fetch_daily(start_date, end_date),
                "sleep": await self.fetch_sleep(start_date, end_date),
            }
        finally:
            self.is_loading = False

    async def aclose(self) -> None:
        """Release the token provider's HTTP resources and drop the connection."""
        await self._tokens.aclose()
        self.is_connected = False

    def _require_connection(self) -> None:
        if not self.is_connected:
            raise HealthNotConnectedError(
                f"Not connected to {self.source_type.value}; call connect() first"
            )


# ------------------------------------------------------------------
# Exceptions
# ------------------------------------------------------------------

class HealthConnectorError(Exception):
    """Base exception for health connector errors."""


class HealthAuthError(HealthConnectorError):
    """Could not obtain an auth token for the SDK."""


class HealthConnectionError(HealthConnectorError):
    """The SDK refused or failed to initialise the connection."""


class HealthNotConnectedError(HealthConnectorError):
    """A fetch was attempted before a successful connection."""
