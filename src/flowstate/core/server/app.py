"""FlowState MCP Server — application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from flowstate.core.animation.commands import LoggingRenderer, SceneRenderer
from flowstate.core.config.settings import get_settings
from flowstate.core.http.client import SubmissionClient
from flowstate.core.notifications.toasts import ToastQueue
from flowstate.domains.wellness.connectors import HealthDataSDK
from flowstate.domains.wellness.connectors.health_manager import (
    HealthAuthClient,
    HealthManager,
    StaticTokenProvider,
)
from flowstate.domains.wellness.connectors.providers import MockHealthSDK
from flowstate.domains.wellness.dashboard import Dashboard
from flowstate.domains.wellness.panels import VoiceRecorder, make_panel_factory
from flowstate.domains.wellness.tools.dashboard_tools import register_dashboard_tools
from flowstate.domains.wellness.tools.health_data_tools import register_health_data_tools
from flowstate.domains.wellness.viewstate.controller import PanelVisibilityController
from flowstate.domains.wellness.viewstate.models import AnimationTimings, PanelKind

logger = logging.getLogger(__name__)


def create_app(
    *,
    submission_client_override: SubmissionClient | None = None,
    health_sdk_override: HealthDataSDK | None = None,
    renderer_override: SceneRenderer | None = None,
    voice_recorder: VoiceRecorder | None = None,
    timings_override: AnimationTimings | None = None,
) -> FastMCP:
    """Create and configure the FlowState MCP server.

    This is the main application factory. It:
    1. Creates the FastMCP server instance
    2. Creates the backend submission client
    3. Creates the visibility controller and attaches the scene renderer
    4. Initializes the health data SDK and manager
    5. Composes the dashboard and its panel factory
    6. Registers all tools
    """
    settings = get_settings()

    # --- Server instance ---
    server = FastMCP(
        "FlowState",
        instructions=(
            "FlowState wellness dashboard. Open feature panels with press_launcher, "
            "type with enter_panel_text, submit with submit_active_panel, and read "
            "submission outcomes with drain_notifications."
        ),
    )

    # --- Backend submission client ---
    if submission_client_override is not None:
        client = submission_client_override
    else:
        client = SubmissionClient(settings.backend_base_url)
        logger.info("Submission client configured for %s", settings.backend_base_url)

    # --- View state ---
    timings = timings_override or AnimationTimings().scaled(settings.animation_time_scale)
    controller = PanelVisibilityController(timings)
    controller.attach_renderer(renderer_override or LoggingRenderer())

    # --- Health data SDK ---
    if health_sdk_override is not None:
        sdk = health_sdk_override
    else:
        sdk = MockHealthSDK()
        logger.info("Using mock health data SDK")

    if settings.health_api_key:
        token_provider = HealthAuthClient(
            settings.health_auth_url, settings.health_api_key, settings.health_dev_id
        )
    else:
        token_provider = StaticTokenProvider()
        logger.info("No HEALTH_API_KEY configured; using a static SDK token")
    health_manager = HealthManager(sdk, token_provider)

    # --- Dashboard ---
    toasts = ToastQueue()
    panel_factory = make_panel_factory(
        controller,
        client,
        toasts,
        panel_options={
            PanelKind.DESTRESSOR: {
                "stress_level": settings.destressor_stress_level,
                "available_time": settings.destressor_available_time,
                "preferred_activities": settings.destressor_activities,
            },
            PanelKind.VOICE_INPUT: {"recorder": voice_recorder},
        },
    )
    dashboard = Dashboard(
        controller,
        client,
        toasts=toasts,
        stress_score=settings.stress_score,
        model_name=settings.model_name,
        panel_factory=panel_factory,
        health_manager=health_manager,
    )

    # --- Register tools ---
    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        return {
            "status": "ok",
            "server": "FlowState",
            "version": "0.1.0",
            "backend_base_url": client.base_url,
            "active_panel": controller.active_panel.value if controller.active_panel else None,
            "health_connected": health_manager.is_connected,
        }

    register_dashboard_tools(server, dashboard)
    register_health_data_tools(server, dashboard)
    logger.info("Dashboard tools registered")

    return server


# Module-level instance for FastMCP discovery.
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
