"""Shared test fixtures for FlowState tests."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BACKEND_BASE_URL", "http://backend.test")
    monkeypatch.setenv("HEALTH_API_KEY", "")
    monkeypatch.setenv("ANIMATION_TIME_SCALE", "0.01")

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from flowstate.core.animation.commands import AnimationCommand, RotateBy, SetOpacity  # noqa: E402
from flowstate.core.http.client import SubmissionClient  # noqa: E402
from flowstate.core.notifications.toasts import ToastQueue  # noqa: E402
from flowstate.domains.wellness.viewstate.controller import PanelVisibilityController  # noqa: E402
from flowstate.domains.wellness.viewstate.models import AnimationTimings  # noqa: E402

# One hundredth of real time: fades 3ms, rotations 20ms, hide delays 30-80ms.
FAST = AnimationTimings().scaled(0.01)


# ---------------------------------------------------------------------------
# Fake backend (httpx.MockTransport)
# ---------------------------------------------------------------------------

Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """Route table of canned responses plus a log of every request received.

    Routes map a path to either a status code, a ``(status, json_body)``
    tuple, or a handler ``request -> httpx.Response``. Unknown paths 404.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def set(self, path: str, response: Any) -> None:
        self.routes[path] = response

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def body_of(self, path: str) -> Any:
        for request in self.requests:
            if request.url.path == path:
                return json.loads(request.content) if request.content else None
        raise AssertionError(f"No request to {path}")

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        if callable(route):
            return route(request)
        if isinstance(route, int):
            return httpx.Response(route)
        status, body = route
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def client(self, base_url: str = "http://backend.test") -> SubmissionClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(self.handle))
        return SubmissionClient(base_url, http_client=http)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend({
        "/create-event": (201, {"status": "created"}),
        "/get_workout_plan": (200, {"plan": ["squats", "lunges"]}),
        "/add_workout_to_calendar": (200, {"status": "ok"}),
        "/get_destresser_recommendations": (200, [{"activity": "meditation", "minutes": 10}]),
        "/add_destresser_to_calendar": (200, {"status": "ok"}),
        "/heart_disease_prediction": (
            200,
            {"prediction": "0", "probabilities": [0.9, 0.1], "status": "ok"},
        ),
    })


@pytest.fixture
def submission_client(backend: FakeBackend) -> SubmissionClient:
    return backend.client()


# ---------------------------------------------------------------------------
# Scene and view state
# ---------------------------------------------------------------------------

class RecordingRenderer:
    """Scene renderer that keeps every command it receives."""

    def __init__(self) -> None:
        self.commands: list[AnimationCommand] = []

    def apply(self, command: AnimationCommand) -> None:
        self.commands.append(command)

    def rotations(self) -> list[float]:
        return [c.radians for c in self.commands if isinstance(c, RotateBy)]

    def opacities(self) -> list[float]:
        return [c.opacity for c in self.commands if isinstance(c, SetOpacity)]


@pytest.fixture
def fast_timings() -> AnimationTimings:
    return FAST


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def controller(renderer: RecordingRenderer) -> PanelVisibilityController:
    ctrl = PanelVisibilityController(FAST)
    ctrl.attach_renderer(renderer)
    yield ctrl
    ctrl.close()


@pytest.fixture
def toasts() -> ToastQueue:
    return ToastQueue()


# ---------------------------------------------------------------------------
# Voice recorder fake
# ---------------------------------------------------------------------------

class FakeRecorder:
    """Push-to-talk recorder whose transcript the test controls."""

    def __init__(self, transcript: str = "") -> None:
        self.transcript = transcript
        self._recording = False
        self.start_count = 0

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def transcribed_text(self) -> str:
        return self.transcript

    def start_recording(self) -> None:
        self._recording = True
        self.start_count += 1

    def stop_recording(self) -> None:
        self._recording = False


@pytest.fixture
def recorder() -> FakeRecorder:
    return FakeRecorder("Lunch with Sam on Friday at noon")
