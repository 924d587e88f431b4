"""Dashboard — the root composition of the wellness app.

Always shows the model scene, the title with today's stress score and the
five launchers. Shows at most one feature panel, mounted and unmounted in
response to the visibility controller, and an error banner whenever a
component reports an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from flowstate.core.notifications.toasts import Toast, ToastQueue
from flowstate.domains.wellness.panels import (
    FeaturePanel,
    PanelFactory,
    PanelState,
    make_panel_factory,
)
from flowstate.domains.wellness.viewstate.models import LAUNCHER_ORDER, PanelKind

if TYPE_CHECKING:
    from flowstate.core.http.client import SubmissionClient
    from flowstate.domains.wellness.connectors.health_manager import HealthManager
    from flowstate.domains.wellness.viewstate.controller import PanelVisibilityController

logger = logging.getLogger(__name__)

APP_TITLE = "FlowState"


@dataclass(frozen=True)
class LauncherView:
    kind: str
    label: str
    active: bool


@dataclass(frozen=True)
class DashboardView:
    """Immutable render snapshot of the dashboard."""

    title: str
    subtitle: str
    model_name: str
    stress_score: int
    launchers: list[LauncherView]
    panel: dict[str, Any] | None = None
    error_banner: str | None = None
    is_blinking: bool = False
    is_loading: bool = False
    pending_notifications: int = 0
    health_connected: bool = False


class Dashboard:
    """Owns the visibility controller, the toast queue and the mounted panel."""

    def __init__(
        self,
        controller: PanelVisibilityController,
        client: SubmissionClient,
        *,
        toasts: ToastQueue | None = None,
        stress_score: int = 0,
        model_name: str = "Particle_Wave",
        panel_factory: PanelFactory | None = None,
        health_manager: HealthManager | None = None,
    ) -> None:
        self.controller = controller
        self.client = client
        self.toasts = toasts or ToastQueue()
        self.stress_score = stress_score
        self.model_name = model_name
        self.health_manager = health_manager
        self._create_panel = panel_factory or make_panel_factory(
            controller, client, self.toasts
        )
        self.panel: FeaturePanel | None = None
        # Unmounted panels whose submissions may still be running.
        self._retired: list[FeaturePanel] = []
        self.show_error = False
        self.error_message = ""

        controller.add_listener(self._on_visibility_changed)
        self._unsubscribe_toasts = self.toasts.subscribe(self._on_toast)

    # ------------------------------------------------------------------
    # Launchers and panels
    # ------------------------------------------------------------------

    def press(self, kind: PanelKind) -> bool:
        """Launcher tap: toggle ``kind``; returns whether it is now showing."""
        return self.controller.toggle(kind)

    def _on_visibility_changed(self, kind: PanelKind, visible: bool) -> None:
        if visible:
            panel = self._create_panel(kind)
            self.panel = panel
            panel.mount()
            logger.info("Mounted %s panel", kind.value)
            return

        panel = self.panel
        if panel is None or panel.kind is not kind:
            return
        self.panel = None
        if panel.state is not PanelState.HIDDEN:
            panel.on_flag_cleared()
        self._retired = [p for p in self._retired if p.has_pending_tasks]
        self._retired.append(panel)
        logger.info("Unmounted %s panel", kind.value)

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _on_toast(self, toast: Toast) -> None:
        if toast.is_error:
            self.report_error(toast.message)

    def report_error(self, message: str) -> None:
        self.show_error = True
        self.error_message = message

    def dismiss_error(self) -> None:
        self.show_error = False
        self.error_message = ""

    # ------------------------------------------------------------------
    # Health data
    # ------------------------------------------------------------------

    async def connect_health(self) -> None:
        if self.health_manager is None:
            raise RuntimeError("No health manager configured")
        await self.health_manager.connect()

    async def refresh_health_data(self, days: int = 7) -> dict[str, Any]:
        """Fetch the last ``days`` of health payloads under the loading rotation."""
        if self.health_manager is None:
            raise RuntimeError("No health manager configured")
        end = datetime.now()
        start = end - timedelta(days=days)
        self.controller.start_loading_rotation()
        try:
            return await self.health_manager.fetch_all(start, end)
        finally:
            self.controller.stop_loading_rotation()

    # ------------------------------------------------------------------
    # Rendering and teardown
    # ------------------------------------------------------------------

    def render(self) -> DashboardView:
        panel_view = None
        if self.panel is not None and self.panel.state is not PanelState.HIDDEN:
            panel_view = self.panel.snapshot()
        error_banner = None
        if self.show_error:
            error_banner = self.error_message
        elif panel_view is not None and panel_view.get("show_error"):
            error_banner = panel_view.get("error_message") or None

        return DashboardView(
            title=APP_TITLE,
            subtitle=f"Your stress score today is {self.stress_score}",
            model_name=self.model_name,
            stress_score=self.stress_score,
            launchers=[
                LauncherView(
                    kind=kind.value,
                    label=kind.label,
                    active=self.controller.is_showing(kind),
                )
                for kind in LAUNCHER_ORDER
            ],
            panel=panel_view,
            error_banner=error_banner,
            is_blinking=self.controller.is_blinking,
            is_loading=self.controller.is_loading,
            pending_notifications=len(self.toasts),
            health_connected=bool(self.health_manager and self.health_manager.is_connected),
        )

    def close(self) -> None:
        """Tear down: cancel panel tasks and every scheduled animation."""
        panels = self._retired + ([self.panel] if self.panel is not None else [])
        for panel in panels:
            panel.cancel_tasks()
        self.panel = None
        self._retired = []
        self._unsubscribe_toasts()
        self.controller.close()

    async def aclose(self) -> None:
        """``close()``, then release the HTTP clients behind submissions and health auth."""
        self.close()
        await self.client.aclose()
        if self.health_manager is not None:
            await self.health_manager.aclose()
