"""Panel visibility controller for the wellness dashboard.

Owns which feature panel is visible and the cosmetic model animations that
accompany panel transitions:

* showing a panel rotates the model a quarter turn forward;
* hiding a panel makes the model blink for a panel-specific delay, after
  which blinking stops and the model rotates back;
* a loading rotation spins the model while an unrelated call is in flight.

Only one panel is ever active. Every delayed effect is an
``asyncio.TimerHandle`` kept on the controller, so ``close()`` (teardown)
and re-showing a panel can cancel effects that have not fired yet.

Animations are emitted as commands to attached renderers. With no renderer
attached every animation operation is a silent no-op; visibility state is
still tracked. When a renderer is attached, the controller must be driven
from the running event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from flowstate.core.animation.commands import (
    AnimationCommand,
    RotateBy,
    RotateTo,
    SceneRenderer,
    SetOpacity,
)
from flowstate.domains.wellness.viewstate.models import (
    QUARTER_TURN,
    AnimationTimings,
    PanelKind,
)

logger = logging.getLogger(__name__)

VisibilityListener = Callable[[PanelKind, bool], None]


class PanelVisibilityController:
    """Single-select panel state plus the model animations around it."""

    def __init__(self, timings: AnimationTimings | None = None) -> None:
        self.timings = timings or AnimationTimings()
        self.active_panel: PanelKind | None = None
        self.is_animating = False
        self.is_blinking = False
        self.is_loading = False

        self._renderers: list[SceneRenderer] = []
        self._listeners: list[VisibilityListener] = []

        self._yaw = 0.0
        self._opacity = 1.0
        self._loading_origin = 0.0

        self._rotation_handle: asyncio.TimerHandle | None = None
        self._blink_handle: asyncio.TimerHandle | None = None
        self._loading_handle: asyncio.TimerHandle | None = None
        self._pending_restores: dict[PanelKind, asyncio.TimerHandle] = {}
        self._blinking_for: set[PanelKind] = set()
        self._deferred_rotate_backs = 0
        self._closed = False

    # ------------------------------------------------------------------
    # Scene and listeners
    # ------------------------------------------------------------------

    def attach_renderer(self, renderer: SceneRenderer) -> None:
        if renderer not in self._renderers:
            self._renderers.append(renderer)

    def detach_renderer(self, renderer: SceneRenderer) -> None:
        if renderer in self._renderers:
            self._renderers.remove(renderer)

    @property
    def scene_attached(self) -> bool:
        return bool(self._renderers) and not self._closed

    def add_listener(self, listener: VisibilityListener) -> None:
        """Call ``listener(kind, visible)`` after every visibility transition."""
        self._listeners.append(listener)

    def remove_listener(self, listener: VisibilityListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def is_showing(self, kind: PanelKind) -> bool:
        return self.active_panel is kind

    def flags(self) -> dict[PanelKind, bool]:
        """Per-panel visibility, derived from the single active panel."""
        return {kind: self.active_panel is kind for kind in PanelKind}

    def toggle(self, kind: PanelKind) -> bool:
        """Flip ``kind``'s visibility; returns the new value."""
        if self.active_panel is kind:
            self.hide(kind)
            return False
        self.show(kind)
        return True

    def show(self, kind: PanelKind) -> None:
        """Make ``kind`` the active panel, hiding whichever panel was active."""
        if self.active_panel is kind:
            return
        if self.active_panel is not None:
            self.hide(self.active_panel)
        self.active_panel = kind
        logger.debug("Panel %s shown", kind.value)
        self._on_show(kind)
        self._notify(kind, True)

    def hide(self, kind: PanelKind) -> bool:
        """Hide ``kind`` if it is the active panel; returns whether it was."""
        if self.active_panel is not kind:
            return False
        self.active_panel = None
        logger.debug("Panel %s hidden", kind.value)
        self._on_hide(kind)
        self._notify(kind, False)
        return True

    def _notify(self, kind: PanelKind, visible: bool) -> None:
        for listener in list(self._listeners):
            listener(kind, visible)

    def _on_show(self, kind: PanelKind) -> None:
        if not self.scene_attached:
            return
        pending = self._pending_restores.pop(kind, None)
        if pending is not None:
            # Still rotated forward from the previous show.
            pending.cancel()
            self._stop_blinking_for(kind)
            return
        self.rotate_model()

    def _on_hide(self, kind: PanelKind) -> None:
        if not self.scene_attached:
            return
        self._start_blinking_for(kind)
        self._pending_restores[kind] = self._call_later(
            self.timings.hide_delay(kind), self._restore_after_hide, kind
        )

    def _restore_after_hide(self, kind: PanelKind) -> None:
        self._pending_restores.pop(kind, None)
        self.rotate_back_model()
        self._stop_blinking_for(kind)

    @property
    def pending_restores(self) -> frozenset[PanelKind]:
        return frozenset(self._pending_restores)

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------

    def rotate_model(self) -> bool:
        """Quarter turn forward; dropped while another rotation is in flight."""
        return self._rotate(QUARTER_TURN)

    def rotate_back_model(self) -> bool:
        """Quarter turn back; deferred (not dropped) while another rotation is in flight."""
        if not self.scene_attached:
            return False
        if self.is_animating:
            self._deferred_rotate_backs += 1
            logger.debug("Rotate-back deferred (%d queued)", self._deferred_rotate_backs)
            return True
        return self._rotate(-QUARTER_TURN)

    def _rotate(self, radians: float) -> bool:
        if not self.scene_attached:
            return False
        if self.is_animating:
            logger.debug("Rotation by %.3f dropped: another rotation in flight", radians)
            return False
        self.is_animating = True
        self._yaw += radians
        self._emit(RotateBy(radians=radians, duration=self.timings.rotation))
        self._rotation_handle = self._call_later(
            self.timings.rotation, self._finish_rotation
        )
        return True

    def _finish_rotation(self) -> None:
        self._rotation_handle = None
        self.is_animating = False
        if self._deferred_rotate_backs:
            self._deferred_rotate_backs -= 1
            self._rotate(-QUARTER_TURN)

    # ------------------------------------------------------------------
    # Loading rotation
    # ------------------------------------------------------------------

    def start_loading_rotation(self) -> None:
        """Spin the model continuously until ``stop_loading_rotation``."""
        if not self.scene_attached or self.is_loading:
            return
        self._loading_origin = self._yaw
        self.is_loading = True
        self._loading_tick()

    def _loading_tick(self) -> None:
        self.rotate_model()
        self._loading_handle = self._call_later(
            self.timings.loading_period, self._loading_tick
        )

    def stop_loading_rotation(self) -> None:
        """Stop spinning and return the model to where loading started."""
        if self._loading_handle is not None:
            self._loading_handle.cancel()
            self._loading_handle = None
        was_loading = self.is_loading
        self.is_loading = False
        if not was_loading or not self.scene_attached:
            return
        self._yaw = self._loading_origin
        self._emit(RotateTo(yaw=self._loading_origin, duration=self.timings.restore))

    # ------------------------------------------------------------------
    # Blinking
    # ------------------------------------------------------------------

    def _start_blinking_for(self, kind: PanelKind) -> None:
        self._blinking_for.add(kind)
        if self.is_blinking:
            return
        self.is_blinking = True
        self._blink_tick()

    def _blink_tick(self) -> None:
        low = self.timings.blink_low_opacity
        self._opacity = low if self._opacity == 1.0 else 1.0
        self._emit(SetOpacity(opacity=self._opacity, duration=self.timings.blink_fade))
        self._blink_handle = self._call_later(self.timings.blink_period, self._blink_tick)

    def _stop_blinking_for(self, kind: PanelKind) -> None:
        self._blinking_for.discard(kind)
        if self._blinking_for or not self.is_blinking:
            return
        if self._blink_handle is not None:
            self._blink_handle.cancel()
            self._blink_handle = None
        self.is_blinking = False
        self._opacity = 1.0
        self._emit(SetOpacity(opacity=1.0, duration=self.timings.blink_fade))

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Cancel every scheduled effect and detach renderers and listeners."""
        handles = [self._rotation_handle, self._blink_handle, self._loading_handle]
        handles.extend(self._pending_restores.values())
        for handle in handles:
            if handle is not None:
                handle.cancel()
        self._rotation_handle = None
        self._blink_handle = None
        self._loading_handle = None
        self._pending_restores.clear()
        self._blinking_for.clear()
        self._deferred_rotate_backs = 0
        self.is_animating = False
        self.is_blinking = False
        self.is_loading = False
        self._renderers.clear()
        self._listeners.clear()
        self._closed = True
        logger.debug("Panel visibility controller closed")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _emit(self, command: AnimationCommand) -> None:
        for renderer in list(self._renderers):
            try:
                renderer.apply(command)
            except Exception:
                logger.exception("Renderer %r failed to apply %r", renderer, command)

    def _call_later(self, delay: float, callback: Callable, *args) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback, *args)
