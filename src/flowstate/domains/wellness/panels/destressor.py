"""Destressor panel: request activity recommendations and schedule them."""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Callable, Sequence

from flowstate.core.http.client import ResponseDecodeError
from flowstate.core.http.models import (
    SubmissionOutcome,
    SubmissionRequest,
    TwoStepOutcome,
)
from flowstate.domains.wellness.panels.base import FeaturePanel
from flowstate.domains.wellness.viewstate.models import PanelKind

if TYPE_CHECKING:
    from flowstate.core.http.client import SubmissionClient
    from flowstate.core.notifications.toasts import ToastQueue
    from flowstate.domains.wellness.viewstate.controller import PanelVisibilityController

RECOMMENDATIONS_ENDPOINT = "/get_destresser_recommendations"
DESTRESSOR_CALENDAR_ENDPOINT = "/add_destresser_to_calendar"

CALENDAR_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
SCHEDULING_WINDOW = timedelta(days=7)


class DestressorPanel(FeaturePanel):
    """Two-step flow: recommendations, then a calendar slot in the coming week."""

    kind = PanelKind.DESTRESSOR
    success_message = "Destressor added to calendar"
    failure_message = "Failed to add destressor to calendar"

    def __init__(
        self,
        controller: PanelVisibilityController,
        client: SubmissionClient,
        toasts: ToastQueue,
        *,
        stress_level: int = 5,
        available_time: int = 30,
        preferred_activities: Sequence[str] = ("meditation", "exercise", "reading"),
        clock: Callable[[], datetime] = datetime.now,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(controller, client, toasts)
        self.stress_level = stress_level
        self.available_time = available_time
        self.preferred_activities = list(preferred_activities)
        self._clock = clock
        self._rng = rng or random.Random()

    def recommendation_payload(self) -> dict[str, Any]:
        return {
            "stress_level": self.stress_level,
            "available_time": self.available_time,
            "preferred_activities": list(self.preferred_activities),
        }

    def pick_time_slot(self) -> str:
        """A uniformly random local time between now and a week from now."""
        offset = self._rng.uniform(0, SCHEDULING_WINDOW.total_seconds())
        slot = self._clock() + timedelta(seconds=offset)
        return slot.strftime(CALENDAR_TIME_FORMAT)

    async def _perform(self, captured: None) -> TwoStepOutcome:
        return await self.client.submit_two_step(
            SubmissionRequest(
                endpoint=RECOMMENDATIONS_ENDPOINT,
                payload=self.recommendation_payload(),
            ),
            self._calendar_request,
            commit_failure_label=self.failure_message,
        )

    def _calendar_request(self, plan: SubmissionOutcome) -> SubmissionRequest:
        recommendations = parse_recommendations(plan)
        return SubmissionRequest(
            endpoint=DESTRESSOR_CALENDAR_ENDPOINT,
            payload={
                "destresser_data": recommendations,
                "date_time": self.pick_time_slot(),
            },
        )

    def snapshot(self) -> dict[str, Any]:
        view = super().snapshot()
        view["request"] = self.recommendation_payload()
        return view


def parse_recommendations(plan: SubmissionOutcome) -> list[dict[str, Any]]:
    """Decode the recommendations body, which must be a JSON array of objects."""
    try:
        data = plan.json()
    except ValueError as exc:
        raise ResponseDecodeError(f"Invalid response format: {exc}") from exc
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ResponseDecodeError(
            "Invalid response format: expected a list of recommendation objects"
        )
    return data
