"""Health-data connectors — abstraction over the health aggregation SDK."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class SourceType(str, Enum):
    """Wearable or platform the aggregation SDK reads from."""

    APPLE_HEALTH = "APPLE_HEALTH"
    HEALTH_CONNECT = "HEALTH_CONNECT"
    SAMSUNG = "SAMSUNG"


@runtime_checkable
class HealthDataSDK(Protocol):
    """Interface of the third-party health aggregation SDK.

    Payloads are opaque: the dashboard passes them through without
    interpreting their schema.
    """

    async def init_connection(
        self, source_type: SourceType, auth_token: str, permissions: list[str]
    ) -> bool:
        """Authorize reading from ``source_type``; True on success."""
        ...

    async def get_activity(
        self, source_type: SourceType, start_date: datetime, end_date: datetime
    ) -> dict[str, Any]:
        """Workout and activity sessions in the window."""
        ...

    async def get_daily(
        self, source_type: SourceType, start_date: datetime, end_date: datetime
    ) -> dict[str, Any]:
        """Daily summaries (steps, calories, heart rate)."""
        ...

    async def get_sleep(
        self, source_type: SourceType, start_date: datetime, end_date: datetime
    ) -> dict[str, Any]:
        """Sleep sessions in the window."""
        ...
