"""Request and outcome models for backend submissions."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal

TwoStepStage = Literal["plan", "commit"]


@dataclass(frozen=True)
class SubmissionRequest:
    """A pending outbound call to one backend endpoint.

    Exactly one of ``payload`` (serialized to JSON on send) or ``content``
    (sent as-is) is normally set; neither means an empty body.
    """

    endpoint: str
    payload: dict[str, Any] | None = None
    content: bytes | None = None
    method: str = "POST"


@dataclass(frozen=True)
class SubmissionOutcome:
    """What the caller learns once a submission settles."""

    success: bool
    status_code: int | None = None
    error_message: str | None = None
    body: bytes = b""

    def json(self) -> Any:
        """Decode the response body as JSON (raises ``ValueError`` on bad data)."""
        return json.loads(self.body)


@dataclass(frozen=True)
class TwoStepOutcome:
    """Result of a generate-then-commit submission."""

    plan: SubmissionOutcome
    commit: SubmissionOutcome | None = None
    failed_stage: TwoStepStage | None = None
    error_message: str | None = None

    @property
    def success(self) -> bool:
        return self.failed_stage is None and self.commit is not None and self.commit.success
