"""MCP tools that drive the dashboard: launchers, panel input, submit, notifications."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import TYPE_CHECKING

from fastmcp import FastMCP

if TYPE_CHECKING:
    from flowstate.domains.wellness.dashboard import Dashboard

from flowstate.domains.wellness.panels import HeartRiskPanel, SchedulePanel, VoiceInputPanel
from flowstate.domains.wellness.viewstate.models import PanelKind

logger = logging.getLogger(__name__)


def _error(message: str) -> str:
    return json.dumps({"status": "error", "message": message})


def register_dashboard_tools(mcp: FastMCP, dashboard: Dashboard) -> None:
    """Register dashboard interaction tools on the MCP server."""

    def _state() -> dict:
        return asdict(dashboard.render())

    @mcp.tool
    def dashboard_state() -> str:
        """Render the dashboard: title, stress score, launchers, open panel, error banner."""
        return json.dumps(_state())

    @mcp.tool
    async def press_launcher(panel: str) -> str:
        """Tap a launcher button, opening its panel or closing it if already open.

        Args:
            panel: One of schedule, workout, destressor, voice_input, heart_risk.
        """
        try:
            kind = PanelKind.parse(panel)
        except ValueError as exc:
            return _error(str(exc))
        showing = dashboard.press(kind)
        logger.info("Launcher %s pressed (showing=%s)", kind.value, showing)
        return json.dumps({"status": "ok", "panel": kind.value, "showing": showing, "dashboard": _state()})

    @mcp.tool
    def enter_panel_text(text: str) -> str:
        """Type into the open Schedule or Voice Input panel (replaces current text).

        Args:
            text: The schedule details or message to send.
        """
        panel = dashboard.panel
        if not isinstance(panel, (SchedulePanel, VoiceInputPanel)):
            return _error("No text panel is open; open schedule or voice_input first")
        panel.set_text(text)
        return json.dumps({"status": "ok", "panel": panel.snapshot()})

    @mcp.tool
    async def submit_active_panel(wait: bool = False) -> str:
        """Submit the open panel.

        Panels close immediately and report their outcome as a notification;
        set ``wait`` to block until the backend has answered. The heart risk
        check always waits and returns its result.

        Args:
            wait: Wait for the submission outcome before returning.
        """
        panel = dashboard.panel
        if panel is None:
            return _error("No panel is open")
        task = panel.submit()
        if task is None:
            return json.dumps({"status": "ignored", "panel": panel.snapshot()})
        if wait or isinstance(panel, HeartRiskPanel):
            success = await task
            return json.dumps({
                "status": "ok" if success else "failed",
                "panel": panel.snapshot(),
                "notifications": [asdict(t) for t in dashboard.toasts.peek()],
            })
        return json.dumps({"status": "submitted", "panel": panel.kind.value})

    @mcp.tool
    async def dismiss_active_panel() -> str:
        """Close the open panel without submitting."""
        panel = dashboard.panel
        if panel is None:
            return _error("No panel is open")
        if panel.dismiss() is None:
            return json.dumps({"status": "ignored", "panel": panel.snapshot()})
        return json.dumps({"status": "closing", "panel": panel.kind.value})

    @mcp.tool
    def drain_notifications() -> str:
        """Return and clear queued submission notifications, oldest first."""
        return json.dumps({"notifications": [asdict(t) for t in dashboard.toasts.drain()]})

    @mcp.tool
    def dismiss_error() -> str:
        """Hide the dashboard error banner."""
        dashboard.dismiss_error()
        return json.dumps({"status": "ok"})
