"""Concrete HealthDataSDK implementations."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from flowstate.domains.wellness.connectors import SourceType
from flowstate.domains.wellness.connectors.mock_data import (
    get_mock_activity_payload,
    get_mock_daily_payload,
    get_mock_sleep_payload,
)


class MockHealthSDK:
    """Uses mock payload generators. Always available."""

    def __init__(self, accept_connection: bool = True) -> None:
        self.accept_connection = accept_connection
        self.connections: list[tuple[SourceType, str, list[str]]] = []

    async def init_connection(
        self, source_type: SourceType, auth_token: str, permissions: list[str]
    ) -> bool:
        self.connections.append((source_type, auth_token, list(permissions)))
        return self.accept_connection

    async def get_activity(
        self, source_type: SourceType, start_date: datetime, end_date: datetime
    ) -> dict[str, Any]:
        return get_mock_activity_payload(start_date, end_date)

    async def get_daily(
        self, source_type: SourceType, start_date: datetime, end_date: datetime
    ) -> dict[str, Any]:
        return get_mock_daily_payload(start_date, end_date)

    async def get_sleep(
        self, source_type: SourceType, start_date: datetime, end_date: datetime
    ) -> dict[str, Any]:
        return get_mock_sleep_payload(start_date, end_date)
