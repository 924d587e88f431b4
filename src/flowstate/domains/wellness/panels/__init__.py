"""Dashboard feature panels and the factory that builds them by kind."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from flowstate.domains.wellness.panels.base import FeaturePanel, PanelState
from flowstate.domains.wellness.panels.destressor import DestressorPanel
from flowstate.domains.wellness.panels.heart_risk import HeartRiskPanel
from flowstate.domains.wellness.panels.schedule import SchedulePanel
from flowstate.domains.wellness.panels.voice_input import VoiceInputPanel, VoiceRecorder
from flowstate.domains.wellness.panels.workout import WorkoutPanel
from flowstate.domains.wellness.viewstate.models import PanelKind

if TYPE_CHECKING:
    from flowstate.core.http.client import SubmissionClient
    from flowstate.core.notifications.toasts import ToastQueue
    from flowstate.domains.wellness.viewstate.controller import PanelVisibilityController

PanelFactory = Callable[[PanelKind], FeaturePanel]

PANEL_TYPES: dict[PanelKind, type[FeaturePanel]] = {
    PanelKind.SCHEDULE: SchedulePanel,
    PanelKind.WORKOUT: WorkoutPanel,
    PanelKind.DESTRESSOR: DestressorPanel,
    PanelKind.VOICE_INPUT: VoiceInputPanel,
    PanelKind.HEART_RISK: HeartRiskPanel,
}


def make_panel_factory(
    controller: PanelVisibilityController,
    client: SubmissionClient,
    toasts: ToastQueue,
    panel_options: dict[PanelKind, dict[str, Any]] | None = None,
) -> PanelFactory:
    """Return a callable building a fresh panel of a given kind.

    Args:
        panel_options: Extra constructor keyword arguments per kind, e.g.
            ``{PanelKind.VOICE_INPUT: {"recorder": rec}}``.
    """
    options = panel_options or {}

    def _create(kind: PanelKind) -> FeaturePanel:
        return PANEL_TYPES[kind](controller, client, toasts, **options.get(kind, {}))

    return _create


__all__ = [
    "DestressorPanel",
    "FeaturePanel",
    "HeartRiskPanel",
    "PANEL_TYPES",
    "PanelFactory",
    "PanelState",
    "SchedulePanel",
    "VoiceInputPanel",
    "VoiceRecorder",
    "WorkoutPanel",
    "make_panel_factory",
]
