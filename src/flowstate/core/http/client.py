"""HTTP submission client for the FlowState backend services.

Every feature panel hands its user input to this client. Submissions are
at-most-once: no retries, no idempotency key, the transport's default
timeout. Expected failures (transport errors, non-2xx responses, payloads
that cannot be encoded) come back as a failed ``SubmissionOutcome`` rather
than an exception, because the panel that issued the call has usually closed
by the time the outcome is known.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

import httpx

from flowstate.core.http.models import (
    SubmissionOutcome,
    SubmissionRequest,
    TwoStepOutcome,
)

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


class SubmissionClient:
    """POSTs panel payloads to the backend and reports what happened.

    Usage::

        client = SubmissionClient("http://127.0.0.1:5002")
        outcome = await client.submit("/create-event", {"user_input": "Gym at 6"})
        if not outcome.success:
            print(outcome.error_message)
    """

    def __init__(
        self,
        base_url: str,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise against a backend base URL.

        Args:
            base_url: Scheme and host of the backend, e.g. ``http://127.0.0.1:5002``.
            http_client: Optional pre-built ``httpx.AsyncClient`` (tests inject one
                with a mock transport). When omitted the client owns its own.

        Raises:
            SubmissionConfigError: If ``base_url`` is not an absolute http(s) URL.
        """
        self.base_url = _validate_base_url(base_url)
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def url_for(self, endpoint: str) -> str:
        """Join an endpoint path onto the base URL."""
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    async def submit(
        self, endpoint: str, payload: dict[str, Any] | None
    ) -> SubmissionOutcome:
        """POST ``payload`` as JSON to ``endpoint``."""
        return await self.send(SubmissionRequest(endpoint=endpoint, payload=payload))

    async def submit_raw(self, endpoint: str, content: bytes) -> SubmissionOutcome:
        """POST pre-encoded JSON bytes to ``endpoint`` unchanged."""
        return await self.send(SubmissionRequest(endpoint=endpoint, content=content))

    async def send(self, request: SubmissionRequest) -> SubmissionOutcome:
        """Issue one request and collapse every expected failure into an outcome."""
        url = self.url_for(request.endpoint)
        headers: dict[str, str] = {}
        content = request.content

        if request.payload is not None:
            try:
                content = json.dumps(request.payload).encode("utf-8")
            except (TypeError, ValueError) as exc:
                logger.warning("Could not encode payload for %s: %s", request.endpoint, exc)
                return SubmissionOutcome(
                    success=False,
                    error_message=f"Could not encode request to {request.endpoint}: {exc}",
                )

        if content is not None:
            headers["Content-Type"] = JSON_CONTENT_TYPE

        logger.info("Submitting %s %s", request.method, request.endpoint)
        try:
            response = await self._client.request(
                request.method, url, content=content, headers=headers
            )
        except httpx.HTTPError as exc:
            logger.warning("Request to %s failed: %s", request.endpoint, exc)
            return SubmissionOutcome(
                success=False,
                error_message=f"Could not reach {request.endpoint}: {exc}",
            )

        status = response.status_code
        if 200 <= status <= 299:
            return SubmissionOutcome(success=True, status_code=status, body=response.content)

        logger.warning("Request to %s returned status %d", request.endpoint, status)
        return SubmissionOutcome(
            success=False,
            status_code=status,
            error_message=f"Request to {request.endpoint} failed with status {status}",
            body=response.content,
        )

    async def submit_two_step(
        self,
        plan_request: SubmissionRequest,
        build_commit: Callable[[SubmissionOutcome], SubmissionRequest],
        *,
        commit_failure_label: str | None = None,
    ) -> TwoStepOutcome:
        """Fetch a generated plan, then commit it to a second endpoint.

        A failed plan call, or a plan that ``build_commit`` rejects with
        ``ResponseDecodeError``, aborts the operation before the commit call
        is issued. Commit failures are reported with ``failed_stage="commit"``.
        """
        plan = await self.send(plan_request)
        if not plan.success:
            return TwoStepOutcome(
                plan=plan, failed_stage="plan", error_message=plan.error_message
            )

        try:
            commit_request = build_commit(plan)
        except ResponseDecodeError as exc:
            logger.warning("Rejected plan from %s: %s", plan_request.endpoint, exc)
            return TwoStepOutcome(plan=plan, failed_stage="plan", error_message=str(exc))

        commit = await self.send(commit_request)
        if not commit.success:
            label = commit_failure_label or f"Failed to submit to {commit_request.endpoint}"
            if commit.status_code is not None:
                message = f"{label} (Status: {commit.status_code})"
            else:
                message = f"{label}: {commit.error_message}"
            return TwoStepOutcome(
                plan=plan, commit=commit, failed_stage="commit", error_message=message
            )

        return TwoStepOutcome(plan=plan, commit=commit)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()


# ------------------------------------------------------------------
# Exceptions
# ------------------------------------------------------------------

class SubmissionError(Exception):
    """Base exception for submission client errors."""


class SubmissionConfigError(SubmissionError, ValueError):
    """The backend base URL is malformed (a programmer error)."""


class ResponseDecodeError(SubmissionError):
    """A successful response carried a body of the wrong shape."""


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _validate_base_url(base_url: str) -> str:
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise SubmissionConfigError(f"Invalid backend URL {base_url!r}: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise SubmissionConfigError(
            f"Backend URL must be an absolute http(s) URL, got {base_url!r}"
        )
    return str(url).rstrip("/")
