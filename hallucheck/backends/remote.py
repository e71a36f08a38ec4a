"""
Remote Classifier Backend — Hugging Face Inference API.

POSTs {"inputs": text} to a hosted AI-text detector and maps the
label probabilities onto the shared result shape. The HTTP client is
created per call; pass `transport` to route requests elsewhere.

Every failure mode raises BackendUnavailable:
- No token configured (or the "hf_xxx" placeholder)
- Circuit breaker open after consecutive failures
- Network error, timeout, or non-2xx status
- Payload without the expected label/score pairs
"""

from __future__ import annotations

import time
from typing import Any, Optional

import httpx

from hallucheck.backends import ScoringBackend
from hallucheck.config import settings
from hallucheck.errors import BackendUnavailable
from hallucheck.logging import get_logger
from hallucheck.scorer import AggregateResult, from_classifier

logger = get_logger("backends.remote")

PLACEHOLDER_TOKEN = "hf_xxx"

# Circuit breaker settings
_CB_FAILURE_THRESHOLD = 3   # Open after this many consecutive failures
_CB_RECOVERY_TIMEOUT = 60   # Seconds before trying again (half-open)


class CircuitBreaker:
    """Simple circuit breaker: closed → open → half-open → closed.

    When open, the backend refuses immediately so the fallback chain
    moves on to local scoring instead of waiting on a dead endpoint.
    """

    def __init__(
        self,
        failure_threshold: int = _CB_FAILURE_THRESHOLD,
        recovery_timeout: float = _CB_RECOVERY_TIMEOUT,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._failures = 0
        self._last_failure_time: float = 0
        self._state = "closed"  # closed | open | half-open

    @property
    def state(self) -> str:
        if self._state == "open":
            if time.monotonic() - self._last_failure_time >= self.recovery_timeout:
                self._state = "half-open"
        return self._state

    def record_success(self) -> None:
        self._failures = 0
        self._state = "closed"

    def record_failure(self) -> None:
        self._failures += 1
        self._last_failure_time = time.monotonic()
        if self._failures >= self.failure_threshold:
            self._state = "open"
            logger.warning(
                "Circuit breaker OPEN — %d consecutive classifier failures. "
                "Local-only scoring for %ds.",
                self._failures, self.recovery_timeout,
            )

    @property
    def is_open(self) -> bool:
        return self.state == "open"


def parse_classifier_response(
    data: Any,
    machine_label: str = "LABEL_1",
    human_label: str = "LABEL_0",
) -> tuple[float, float]:
    """
    Extract (machine_prob, human_prob) from a classifier payload.

    Accepts the nested form [[{"label", "score"}, ...]] and the flat
    form [{"label", "score"}, ...]. A missing label reads as 0.0; if
    neither label is present the payload is rejected.
    """
    if not isinstance(data, list) or not data:
        raise BackendUnavailable(f"Unexpected classifier payload: {str(data)[:200]}")

    entries = data[0] if isinstance(data[0], list) else data
    scores: dict[str, float] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        label = entry.get("label")
        try:
            scores[label] = float(entry.get("score", 0))
        except (TypeError, ValueError):
            continue

    if machine_label not in scores and human_label not in scores:
        raise BackendUnavailable(
            f"Classifier payload has neither {machine_label} nor {human_label}"
        )
    return scores.get(machine_label, 0.0), scores.get(human_label, 0.0)


class RemoteClassifierBackend(ScoringBackend):
    """Hosted AI-text classifier with a circuit breaker."""

    name = "remote"

    def __init__(
        self,
        api_token: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        machine_label: Optional[str] = None,
        human_label: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_token = api_token if api_token is not None else settings.HF_API_TOKEN
        self._url = url or settings.CLASSIFIER_URL
        self._timeout = timeout if timeout is not None else settings.CLASSIFIER_TIMEOUT
        self._machine_label = machine_label or settings.MACHINE_LABEL
        self._human_label = human_label or settings.HUMAN_LABEL
        self._transport = transport
        self.circuit_breaker = CircuitBreaker()

    @property
    def configured(self) -> bool:
        return bool(self._api_token) and self._api_token != PLACEHOLDER_TOKEN

    async def score(self, text: str) -> AggregateResult:
        if not self.configured:
            raise BackendUnavailable("No classifier token configured")

        # Circuit breaker — fast-fail when the endpoint is known to be down
        if self.circuit_breaker.is_open:
            raise BackendUnavailable("Classifier circuit breaker is open")

        try:
            data = await self._post(text)
            machine_prob, human_prob = parse_classifier_response(
                data, self._machine_label, self._human_label,
            )
        except BackendUnavailable:
            self.circuit_breaker.record_failure()
            raise
        except (httpx.HTTPError, ValueError) as e:
            self.circuit_breaker.record_failure()
            raise BackendUnavailable(f"Classifier request failed: {e}") from e

        self.circuit_breaker.record_success()
        return from_classifier(machine_prob, human_prob)

    async def _post(self, text: str) -> Any:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_token}",
        }
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport,
        ) as client:
            resp = await client.post(self._url, json={"inputs": text}, headers=headers)
            if not resp.is_success:
                raise BackendUnavailable(
                    f"Classifier responded with status {resp.status_code}"
                )
            return resp.json()
