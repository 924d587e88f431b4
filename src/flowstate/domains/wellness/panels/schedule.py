"""Schedule panel: free-text event creation."""

from __future__ import annotations

from typing import Any

from flowstate.core.http.models import SubmissionOutcome
from flowstate.domains.wellness.panels.base import FeaturePanel
from flowstate.domains.wellness.viewstate.models import PanelKind

CREATE_EVENT_ENDPOINT = "/create-event"


class SchedulePanel(FeaturePanel):
    """Sends the typed schedule text to the event-creation service."""

    kind = PanelKind.SCHEDULE
    success_message = "Schedule submitted"
    failure_message = "Failed to submit schedule"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.text = ""

    def set_text(self, text: str) -> None:
        self.text = text

    def has_input(self) -> bool:
        return bool(self.text)

    def _take_input(self) -> str:
        text, self.text = self.text, ""
        return text

    async def _perform(self, captured: str) -> SubmissionOutcome:
        return await self.client.submit(CREATE_EVENT_ENDPOINT, {"user_input": captured})

    def snapshot(self) -> dict[str, Any]:
        view = super().snapshot()
        view["text"] = self.text
        view["placeholder"] = "Enter schedule details..."
        return view
