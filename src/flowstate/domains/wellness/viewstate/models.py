"""Panel identifiers and animation timings for the wellness dashboard."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum


class PanelKind(str, Enum):
    """The five feature panels reachable from the dashboard launchers."""

    SCHEDULE = "schedule"
    WORKOUT = "workout"
    DESTRESSOR = "destressor"
    VOICE_INPUT = "voice_input"
    HEART_RISK = "heart_risk"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, value: str) -> PanelKind:
        """Accept an enum value ('heart_risk') or a label ('Heart Risk')."""
        normalized = value.strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown panel {value!r}; expected one of: {valid}") from None


_LABELS = {
    PanelKind.SCHEDULE: "Schedule",
    PanelKind.WORKOUT: "Workout",
    PanelKind.DESTRESSOR: "Destressor",
    PanelKind.VOICE_INPUT: "Voice Input",
    PanelKind.HEART_RISK: "Heart Risk",
}

# Launcher layout order: top row, bottom row, then the mic button.
LAUNCHER_ORDER: tuple[PanelKind, ...] = (
    PanelKind.DESTRESSOR,
    PanelKind.WORKOUT,
    PanelKind.HEART_RISK,
    PanelKind.SCHEDULE,
    PanelKind.VOICE_INPUT,
)

# Seconds the model keeps blinking after a panel hides, before rotating back.
DEFAULT_HIDE_DELAYS: dict[PanelKind, float] = {
    PanelKind.SCHEDULE: 3.0,
    PanelKind.HEART_RISK: 3.0,
    PanelKind.VOICE_INPUT: 3.0,
    PanelKind.WORKOUT: 6.0,
    PanelKind.DESTRESSOR: 8.0,
}

QUARTER_TURN = math.pi / 2


@dataclass(frozen=True)
class AnimationTimings:
    """Durations (seconds) for every timed effect on the dashboard."""

    rotation: float = 2.0
    loading_period: float = 2.0
    restore: float = 2.0
    blink_period: float = 1.5
    blink_fade: float = 0.75
    blink_low_opacity: float = 0.1
    panel_fade: float = 0.3
    hide_delays: dict[PanelKind, float] = field(
        default_factory=lambda: dict(DEFAULT_HIDE_DELAYS)
    )

    def hide_delay(self, kind: PanelKind) -> float:
        return self.hide_delays.get(kind, DEFAULT_HIDE_DELAYS[kind])

    def scaled(self, factor: float) -> AnimationTimings:
        """Return a copy with every duration and delay multiplied by ``factor``."""
        if factor <= 0:
            raise ValueError("factor must be positive")
        return replace(
            self,
            rotation=self.rotation * factor,
            loading_period=self.loading_period * factor,
            restore=self.restore * factor,
            blink_period=self.blink_period * factor,
            blink_fade=self.blink_fade * factor,
            panel_fade=self.panel_fade * factor,
            hide_delays={k: v * factor for k, v in self.hide_delays.items()},
        )
