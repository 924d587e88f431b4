"""MCP tools for the health-data aggregation SDK."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from fastmcp import FastMCP

if TYPE_CHECKING:
    from flowstate.domains.wellness.dashboard import Dashboard

from flowstate.domains.wellness.connectors.health_manager import HealthConnectorError

logger = logging.getLogger(__name__)


def register_health_data_tools(mcp: FastMCP, dashboard: Dashboard) -> None:
    """Register health source connection and fetch tools on the MCP server."""

    @mcp.tool
    async def connect_health_source() -> str:
        """Connect the dashboard to the configured health data source."""
        try:
            await dashboard.connect_health()
        except HealthConnectorError as exc:
            dashboard.report_error(str(exc))
            return json.dumps({"status": "error", "message": str(exc)})
        manager = dashboard.health_manager
        return json.dumps({
            "status": "connected",
            "source_type": manager.source_type.value,
            "permissions": manager.permissions,
        })

    @mcp.tool
    async def fetch_health_data(days: int = 7) -> str:
        """Fetch activity, daily and sleep payloads for the last ``days`` days.

        Args:
            days: Size of the window ending now (1-90).
        """
        if not 1 <= days <= 90:
            return json.dumps({"status": "error", "message": "days must be between 1 and 90"})
        try:
            payloads = await dashboard.refresh_health_data(days)
        except HealthConnectorError as exc:
            return json.dumps({"status": "error", "message": str(exc)})
        logger.info("Fetched %d days of health data", days)
        return json.dumps({"status": "ok", "days": days, "data": payloads})
