"""Workout panel: fetch a generated plan, then put it on the calendar."""

from __future__ import annotations

from flowstate.core.http.models import (
    SubmissionOutcome,
    SubmissionRequest,
    TwoStepOutcome,
)
from flowstate.domains.wellness.panels.base import FeaturePanel
from flowstate.domains.wellness.viewstate.models import PanelKind

WORKOUT_PLAN_ENDPOINT = "/get_workout_plan"
WORKOUT_CALENDAR_ENDPOINT = "/add_workout_to_calendar"


class WorkoutPanel(FeaturePanel):
    kind = PanelKind.WORKOUT
    success_message = "Workout added to calendar"
    failure_message = "Failed to add workout to calendar"

    async def _perform(self, captured: None) -> TwoStepOutcome:
        return await self.client.submit_two_step(
            SubmissionRequest(endpoint=WORKOUT_PLAN_ENDPOINT),
            _forward_plan,
            commit_failure_label=self.failure_message,
        )


def _forward_plan(plan: SubmissionOutcome) -> SubmissionRequest:
    # The calendar service takes the plan exactly as generated.
    return SubmissionRequest(endpoint=WORKOUT_CALENDAR_ENDPOINT, content=plan.body)
