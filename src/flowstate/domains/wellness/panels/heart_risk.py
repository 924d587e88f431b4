"""Heart-risk panel: run the prediction service and show a health score.

Unlike the other panels this one stays open while the request runs and then
shows the result until the user dismisses it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from flowstate.core.http.client import ResponseDecodeError
from flowstate.core.http.models import SubmissionOutcome
from flowstate.domains.wellness.panels.base import FeaturePanel, PanelState
from flowstate.domains.wellness.viewstate.models import PanelKind

logger = logging.getLogger(__name__)

HEART_PREDICTION_ENDPOINT = "/heart_disease_prediction"

NEEDS_ATTENTION_MESSAGE = "Your heart health needs attention"
REGULAR_MESSAGE = "Your heart health is regular"


@dataclass(frozen=True)
class HeartRiskResult:
    """Decoded prediction-service response."""

    prediction: str
    probabilities: list[float]
    status: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> HeartRiskResult:
        """Parse the service response; raises ``ResponseDecodeError`` on a bad shape."""
        if not isinstance(data, dict):
            raise ResponseDecodeError("Expected a JSON object from the prediction service")
        prediction = data.get("prediction")
        probabilities = data.get("probabilities")
        if not isinstance(prediction, str):
            raise ResponseDecodeError("Missing or invalid 'prediction'")
        if (
            not isinstance(probabilities, list)
            or len(probabilities) < 2
            or not all(isinstance(p, (int, float)) for p in probabilities)
        ):
            raise ResponseDecodeError("Missing or invalid 'probabilities'")
        return cls(
            prediction=prediction,
            probabilities=[float(p) for p in probabilities],
            status=str(data.get("status", "")),
        )

    @property
    def risk_probability(self) -> float:
        return self.probabilities[1]

    @property
    def health_score(self) -> int:
        return health_score(self.risk_probability)

    @property
    def message(self) -> str:
        return health_message(self.prediction)


def health_score(risk_probability: float) -> int:
    """0-100 score, higher is healthier (truncated toward zero)."""
    return int(100 - (risk_probability * 100))


def health_message(prediction: str) -> str:
    return NEEDS_ATTENTION_MESSAGE if prediction == "1" else REGULAR_MESSAGE


class HeartRiskPanel(FeaturePanel):
    kind = PanelKind.HEART_RISK
    success_message = "Heart health check complete"
    failure_message = "Heart health check failed"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.result: HeartRiskResult | None = None
        self.show_error = False
        self.error_message = ""

    @property
    def can_submit(self) -> bool:
        return super().can_submit and self.result is None

    def submit(self) -> asyncio.Task | None:
        """Start the check; the panel stays open and moves to RESULT on success."""
        if self.is_loading:
            logger.debug("Ignoring heart risk check: already in flight")
            return None
        if self.state is not PanelState.VISIBLE or self.result is not None:
            return None
        self.is_loading = True
        self.show_error = False
        self._submission_task = asyncio.create_task(
            self._check(), name=f"submit-{self.kind.value}"
        )
        return self._submission_task

    def dismiss(self) -> asyncio.Task | None:
        if self.is_loading:
            logger.debug("Ignoring heart risk dismiss while the check is running")
            return None
        return self.close()

    async def _check(self) -> bool:
        try:
            outcome = await self.client.submit(HEART_PREDICTION_ENDPOINT, {})
            result, error = _decode(outcome)
        finally:
            self.is_loading = False

        if result is None:
            self.show_error = True
            self.error_message = error
            self.toasts.error(error, panel=self.kind.value)
            return False

        self.result = result
        if self.state is PanelState.VISIBLE:
            self.state = PanelState.RESULT
        logger.info("Heart risk check: prediction=%s score=%d", result.prediction, result.health_score)
        self.toasts.info(f"{result.message} (score {result.health_score})", panel=self.kind.value)
        return True

    def snapshot(self) -> dict[str, Any]:
        view = super().snapshot()
        view["show_error"] = self.show_error
        view["error_message"] = self.error_message
        if self.result is not None:
            view["result"] = {
                "prediction": self.result.prediction,
                "message": self.result.message,
                "health_score": self.result.health_score,
                "status": self.result.status,
            }
        return view


def _decode(outcome: SubmissionOutcome) -> tuple[HeartRiskResult | None, str]:
    if not outcome.success:
        if outcome.status_code is not None:
            return None, f"{HeartRiskPanel.failure_message} (Status: {outcome.status_code})"
        return None, f"{HeartRiskPanel.failure_message}: {outcome.error_message}"
    try:
        return HeartRiskResult.from_dict(outcome.json()), ""
    except (ValueError, ResponseDecodeError) as exc:
        return None, f"Invalid response from prediction service: {exc}"
