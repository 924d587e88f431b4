"""Animation commands emitted by the view-state controller.

The controller never touches a scene object. It describes what should
happen to the model (rotate, fade) as plain data, and whichever rendering
layer is attached applies it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RotateBy:
    """Rotate the model about its vertical axis by ``radians``."""

    radians: float
    duration: float


@dataclass(frozen=True)
class RotateTo:
    """Rotate the model to an absolute yaw."""

    yaw: float
    duration: float


@dataclass(frozen=True)
class SetOpacity:
    """Animate the model opacity to ``opacity``."""

    opacity: float
    duration: float


AnimationCommand = Union[RotateBy, RotateTo, SetOpacity]


@runtime_checkable
class SceneRenderer(Protocol):
    """Rendering layer that owns the model and applies animation commands."""

    def apply(self, command: AnimationCommand) -> None: ...


class LoggingRenderer:
    """Headless renderer: records the model transform and logs each command."""

    def __init__(self) -> None:
        self.yaw = 0.0
        self.opacity = 1.0

    def apply(self, command: AnimationCommand) -> None:
        if isinstance(command, RotateBy):
            self.yaw += command.radians
        elif isinstance(command, RotateTo):
            self.yaw = command.yaw
        elif isinstance(command, SetOpacity):
            self.opacity = command.opacity
        logger.debug("Scene command %r (yaw=%.3f, opacity=%.2f)", command, self.yaw, self.opacity)
