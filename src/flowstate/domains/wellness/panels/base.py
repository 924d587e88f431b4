"""Shared open/submit/close protocol for the dashboard feature panels.

Lifecycle::

    HIDDEN --mount()--> VISIBLE --submit()--> SUBMITTING --fade--> HIDDEN
                           |                                         ^
                           +-------- close() / flag cleared ---------+

On submit a panel starts fading out straight away and dispatches its
backend call as a separate task; it does not wait for the outcome. When the
fade finishes it clears its own flag in the controller. The outcome is
published to the dashboard's toast queue, which outlives the panel.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Union

from flowstate.core.http.models import SubmissionOutcome, TwoStepOutcome

if TYPE_CHECKING:
    from flowstate.core.http.client import SubmissionClient
    from flowstate.core.notifications.toasts import ToastQueue
    from flowstate.domains.wellness.viewstate.controller import PanelVisibilityController
    from flowstate.domains.wellness.viewstate.models import PanelKind

logger = logging.getLogger(__name__)

Outcome = Union[SubmissionOutcome, TwoStepOutcome]


class PanelState(str, Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"
    SUBMITTING = "submitting"
    RESULT = "result"


class FeaturePanel:
    """Base class for the five feature panels.

    Subclasses set ``kind``, the toast messages, and implement ``_perform``
    (and ``has_input`` / ``_take_input`` when they gather input).
    """

    kind: ClassVar[PanelKind]
    success_message: ClassVar[str] = "Submitted"
    failure_message: ClassVar[str] = "Submission failed"

    def __init__(
        self,
        controller: PanelVisibilityController,
        client: SubmissionClient,
        toasts: ToastQueue,
    ) -> None:
        self.controller = controller
        self.client = client
        self.toasts = toasts
        self.state = PanelState.HIDDEN
        self.opacity = 0.0
        self.is_loading = False
        self._flag_cleared = False
        self._close_task: asyncio.Task | None = None
        self._submission_task: asyncio.Task | None = None

    @property
    def fade_duration(self) -> float:
        return self.controller.timings.panel_fade

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Fade in. The model rotation belongs to the controller's show transition."""
        if self.state is not PanelState.HIDDEN:
            return
        self.state = PanelState.VISIBLE
        self.opacity = 1.0

    def has_input(self) -> bool:
        return True

    @property
    def can_submit(self) -> bool:
        return self.state is PanelState.VISIBLE and not self.is_loading and self.has_input()

    def submit(self) -> asyncio.Task | None:
        """Close the panel and dispatch its submission without awaiting it.

        Returns the dispatch task, or ``None`` when the submit is ignored
        (not visible, no input, or a submission already in flight).
        """
        if self.is_loading:
            logger.debug("Ignoring %s submit: submission already in flight", self.kind.value)
            return None
        if self.state is not PanelState.VISIBLE or not self.has_input():
            logger.debug("Ignoring %s submit in state %s", self.kind.value, self.state.value)
            return None

        captured = self._take_input()
        self.is_loading = True
        self.state = PanelState.SUBMITTING
        self.close()
        self._submission_task = asyncio.create_task(
            self._dispatch(captured), name=f"submit-{self.kind.value}"
        )
        return self._submission_task

    def dismiss(self) -> asyncio.Task | None:
        """Close without submitting."""
        return self.close()

    def close(self) -> asyncio.Task | None:
        """Fade out, then clear this panel's flag in the controller."""
        if self.state is PanelState.HIDDEN:
            return None
        if self._close_task is None:
            self.opacity = 0.0
            self._close_task = asyncio.create_task(
                self._finish_close(), name=f"close-{self.kind.value}"
            )
        return self._close_task

    def on_flag_cleared(self) -> asyncio.Task | None:
        """The controller hid this panel from outside; fade out without re-hiding."""
        self._flag_cleared = True
        return self.close()

    async def _finish_close(self) -> None:
        await asyncio.sleep(self.fade_duration)
        self.state = PanelState.HIDDEN
        if not self._flag_cleared:
            self.controller.hide(self.kind)

    @property
    def has_pending_tasks(self) -> bool:
        return any(
            task is not None and not task.done()
            for task in (self._close_task, self._submission_task)
        )

    def cancel_tasks(self) -> None:
        """Cancel pending fade and submission tasks (dashboard teardown)."""
        for task in (self._close_task, self._submission_task):
            if task is not None and not task.done():
                task.cancel()

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def _take_input(self) -> Any:
        """Snapshot (and reset) whatever the user entered."""
        return None

    async def _perform(self, captured: Any) -> Outcome:
        raise NotImplementedError

    async def _dispatch(self, captured: Any) -> bool:
        try:
            outcome = await self._perform(captured)
        finally:
            self.is_loading = False
        self._report(outcome)
        return outcome.success

    def _report(self, outcome: Outcome) -> None:
        if outcome.success:
            self.toasts.info(self.success_message, panel=self.kind.value)
        else:
            self.toasts.error(self._failure_text(outcome), panel=self.kind.value)

    def _failure_text(self, outcome: Outcome) -> str:
        if isinstance(outcome, TwoStepOutcome):
            return outcome.error_message or self.failure_message
        if outcome.status_code is not None:
            return f"{self.failure_message} (Status: {outcome.status_code})"
        return f"{self.failure_message}: {outcome.error_message}"

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        """Render-ready view of the panel."""
        return {
            "kind": self.kind.value,
            "title": self.kind.label,
            "state": self.state.value,
            "opacity": self.opacity,
            "fade_duration": self.fade_duration,
            "is_loading": self.is_loading,
            "can_submit": self.can_submit,
        }
