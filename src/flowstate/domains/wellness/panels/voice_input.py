"""Voice input panel: push-to-talk transcript, editable before sending."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from flowstate.core.http.models import SubmissionOutcome
from flowstate.domains.wellness.panels.base import FeaturePanel
from flowstate.domains.wellness.panels.schedule import CREATE_EVENT_ENDPOINT
from flowstate.domains.wellness.viewstate.models import PanelKind

if TYPE_CHECKING:
    from flowstate.core.http.client import SubmissionClient
    from flowstate.core.notifications.toasts import ToastQueue
    from flowstate.domains.wellness.viewstate.controller import PanelVisibilityController

logger = logging.getLogger(__name__)


@runtime_checkable
class VoiceRecorder(Protocol):
    """Speech-to-text collaborator (microphone plus recognizer)."""

    @property
    def is_recording(self) -> bool: ...

    @property
    def transcribed_text(self) -> str:
        """Best transcript so far for the current (or last) recording."""
        ...

    def start_recording(self) -> None: ...

    def stop_recording(self) -> None: ...


class VoiceInputPanel(FeaturePanel):
    """Holds a transcript the user can correct, then creates an event from it."""

    kind = PanelKind.VOICE_INPUT
    success_message = "Voice input submitted"
    failure_message = "Failed to submit voice input"

    def __init__(
        self,
        controller: PanelVisibilityController,
        client: SubmissionClient,
        toasts: ToastQueue,
        recorder: VoiceRecorder | None = None,
    ) -> None:
        super().__init__(controller, client, toasts)
        self.recorder = recorder
        self.editable_text = ""

    @property
    def is_recording(self) -> bool:
        return self.recorder is not None and self.recorder.is_recording

    def set_text(self, text: str) -> None:
        self.editable_text = text

    def press_record(self) -> bool:
        """Start recording while the mic button is held."""
        if self.recorder is None:
            logger.debug("No voice recorder configured; type the message instead")
            return False
        if not self.recorder.is_recording:
            self.recorder.start_recording()
        return True

    def sync_transcript(self) -> None:
        """Mirror the live transcript into the text field while recording."""
        if self.is_recording:
            self.editable_text = self.recorder.transcribed_text

    def release_record(self) -> str:
        """Stop recording and keep the final transcript as editable text."""
        if self.recorder is None:
            return self.editable_text
        final_text = self.recorder.transcribed_text
        self.recorder.stop_recording()
        self.editable_text = final_text
        return final_text

    def has_input(self) -> bool:
        return bool(self.editable_text)

    def _take_input(self) -> str:
        return self.editable_text

    async def _perform(self, captured: str) -> SubmissionOutcome:
        return await self.client.submit(CREATE_EVENT_ENDPOINT, {"user_input": captured})

    def snapshot(self) -> dict[str, Any]:
        view = super().snapshot()
        view["text"] = self.editable_text
        view["placeholder"] = "Speak or type your message..."
        view["is_recording"] = self.is_recording
        return view
