"""Tests for the workout and destressor panels (plan request, then calendar commit)."""

from __future__ import annotations

import asyncio
import json
import random
from datetime import datetime, timedelta

import pytest

from flowstate.core.http.client import ResponseDecodeError
from flowstate.core.http.models import SubmissionOutcome
from flowstate.domains.wellness.panels import DestressorPanel, WorkoutPanel
from flowstate.domains.wellness.panels.destressor import CALENDAR_TIME_FORMAT, parse_recommendations
from flowstate.domains.wellness.viewstate.models import PanelKind

NOW = datetime(2026, 3, 2, 9, 30, 0)


def _run(coro):
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def _submit(panel):
    async def _scenario():
        panel.controller.show(panel.kind)
        panel.mount()
        success = await panel.submit()
        await asyncio.sleep(0.02)
        return success

    return _run(_scenario())


# ------------------------------------------------------------------
# Workout
# ------------------------------------------------------------------

class TestWorkoutPanel:
    def test_plan_is_forwarded_to_calendar_unchanged(self, controller, submission_client, toasts, backend):
        plan = b'{"plan": ["row 2k", "plank 3x60s"], "weeks": 4}'
        backend.set("/get_workout_plan", (200, plan))

        assert _submit(WorkoutPanel(controller, submission_client, toasts)) is True
        assert backend.paths() == ["/get_workout_plan", "/add_workout_to_calendar"]
        assert backend.requests[1].content == plan
        assert [t.message for t in toasts.drain()] == ["Workout added to calendar"]

    def test_plan_failure_skips_calendar(self, controller, submission_client, toasts, backend):
        backend.set("/get_workout_plan", 500)

        assert _submit(WorkoutPanel(controller, submission_client, toasts)) is False
        assert backend.paths() == ["/get_workout_plan"]
        [toast] = toasts.drain()
        assert toast.is_error
        assert "500" in toast.message

    def test_calendar_failure_names_the_commit_step(self, controller, submission_client, toasts, backend):
        backend.set("/add_workout_to_calendar", 502)

        assert _submit(WorkoutPanel(controller, submission_client, toasts)) is False
        [toast] = toasts.drain()
        assert toast.message == "Failed to add workout to calendar (Status: 502)"


# ------------------------------------------------------------------
# Destressor
# ------------------------------------------------------------------

def _destressor(controller, client, toasts, **kwargs):
    return DestressorPanel(
        controller, client, toasts, clock=lambda: NOW, rng=random.Random(7), **kwargs
    )


class TestDestressorPanel:
    def test_recommendations_then_calendar(self, controller, submission_client, toasts, backend):
        panel = _destressor(controller, submission_client, toasts, stress_level=8, available_time=15)

        assert _submit(panel) is True
        assert backend.paths() == ["/get_destresser_recommendations", "/add_destresser_to_calendar"]
        assert backend.body_of("/get_destresser_recommendations") == {
            "stress_level": 8,
            "available_time": 15,
            "preferred_activities": ["meditation", "exercise", "reading"],
        }
        commit = backend.body_of("/add_destresser_to_calendar")
        assert commit["destresser_data"] == [{"activity": "meditation", "minutes": 10}]
        slot = datetime.strptime(commit["date_time"], CALENDAR_TIME_FORMAT)
        assert NOW <= slot <= NOW + timedelta(days=7)
        assert [t.message for t in toasts.drain()] == ["Destressor added to calendar"]

    def test_time_slot_format_and_window(self, controller, submission_client, toasts):
        panel = _destressor(controller, submission_client, toasts)
        for _ in range(50):
            value = panel.pick_time_slot()
            assert len(value) == 19
            assert value[10] == "T"
            slot = datetime.strptime(value, CALENDAR_TIME_FORMAT)
            assert NOW <= slot <= NOW + timedelta(days=7)

    def test_non_list_recommendations_abort_before_calendar(
        self, controller, submission_client, toasts, backend
    ):
        backend.set("/get_destresser_recommendations", (200, {"activity": "walk"}))

        assert _submit(_destressor(controller, submission_client, toasts)) is False
        assert backend.paths() == ["/get_destresser_recommendations"]
        [toast] = toasts.drain()
        assert toast.message.startswith("Invalid response format")

    def test_calendar_failure_reports_status(self, controller, submission_client, toasts, backend):
        backend.set("/add_destresser_to_calendar", 500)

        assert _submit(_destressor(controller, submission_client, toasts)) is False
        [toast] = toasts.drain()
        assert toast.message == "Failed to add destressor to calendar (Status: 500)"


@pytest.mark.parametrize("body", [b"not json", b'"text"', b"[1, 2]", b'{"a": 1}'])
def test_parse_recommendations_rejects_bad_shapes(body):
    with pytest.raises(ResponseDecodeError):
        parse_recommendations(SubmissionOutcome(success=True, status_code=200, body=body))


def test_parse_recommendations_accepts_empty_list():
    outcome = SubmissionOutcome(success=True, status_code=200, body=json.dumps([]).encode())
    assert parse_recommendations(outcome) == []
