"""
Backend Tests — remote classifier, fallback chain, timeouts.

No real network calls: the remote backend is pointed at an
httpx.MockTransport so each failure mode can be produced on demand.
"""

from __future__ import annotations

import asyncio
import json
import time

import httpx
import pytest

from hallucheck.analyzers import Analyzer, AnalyzerResult

from hallucheck.backends import ScoringBackend
from hallucheck.backends.factory import FallbackChain, build_backend, get_backend
from hallucheck.backends.local import LocalHeuristicBackend
from hallucheck.backends.remote import (
    CircuitBreaker,
    RemoteClassifierBackend,
    parse_classifier_response,
)
from hallucheck.config import Settings
from hallucheck.detector import score_text, score_with_timeout
from hallucheck.errors import (
    AggregationFailure,
    BackendUnavailable,
    InvalidInput,
    ScoringTimeout,
)

TEXT = (
    "Furthermore, it is important to note that, moreover, in conclusion, "
    "this report demonstrates significant findings."
)
CLASSIFIER_URL = "https://classifier.test/models/detector"


# ============================================================
# MOCK BACKENDS
# ============================================================

class FailingBackend(ScoringBackend):
    """Raises the configured error on every call."""

    name = "failing"

    def __init__(self, error: Exception):
        self._error = error
        self.calls = 0

    async def score(self, text):
        self.calls += 1
        raise self._error


class BusyAnalyzer(Analyzer):
    """Blocks the calling thread, like a heavy analysis would."""

    name = "busy"
    label = "Busy analysis"

    def analyze(self, text):
        time.sleep(0.5)
        return AnalyzerResult(score=0)


class SlowBackend(ScoringBackend):
    name = "slow"

    async def score(self, text):
        await asyncio.sleep(5)
        return LocalHeuristicBackend().score_sync(text)


def _remote(handler, token: str = "hf_test") -> RemoteClassifierBackend:
    return RemoteClassifierBackend(
        api_token=token,
        url=CLASSIFIER_URL,
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


def _ok_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=[[
        {"label": "LABEL_1", "score": 0.873},
        {"label": "LABEL_0", "score": 0.127},
    ]])


# ============================================================
# RESPONSE PARSING
# ============================================================

class TestParseClassifierResponse:

    def test_nested_payload(self):
        data = [[{"label": "LABEL_1", "score": 0.8}, {"label": "LABEL_0", "score": 0.2}]]
        assert parse_classifier_response(data) == (0.8, 0.2)

    def test_flat_payload(self):
        data = [{"label": "LABEL_0", "score": 0.6}, {"label": "LABEL_1", "score": 0.4}]
        assert parse_classifier_response(data) == (0.4, 0.6)

    def test_missing_label_reads_zero(self):
        assert parse_classifier_response([[{"label": "LABEL_1", "score": 0.9}]]) == (0.9, 0.0)

    def test_custom_labels(self):
        data = [[{"label": "Fake", "score": 0.7}, {"label": "Real", "score": 0.3}]]
        assert parse_classifier_response(data, "Fake", "Real") == (0.7, 0.3)

    @pytest.mark.parametrize("data", [
        None,
        [],
        {"error": "Model is currently loading"},
        [[{"label": "OTHER", "score": 1.0}]],
        [["not", "dicts"]],
    ])
    def test_malformed(self, data):
        with pytest.raises(BackendUnavailable):
            parse_classifier_response(data)


# ============================================================
# REMOTE BACKEND
# ============================================================

class TestRemoteClassifier:

    @pytest.mark.asyncio
    async def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return _ok_handler(request)

        result = await _remote(handler).score(TEXT)
        assert result.score == 87
        assert result.confidence == 100
        assert result.source == "remote"
        assert result.band == "high"
        assert seen["auth"] == "Bearer hf_test"
        assert seen["body"] == {"inputs": TEXT}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["", "hf_xxx"])
    async def test_unconfigured(self, token):
        backend = _remote(_ok_handler, token=token)
        assert backend.configured is False
        with pytest.raises(BackendUnavailable):
            await backend.score(TEXT)

    @pytest.mark.asyncio
    async def test_error_status(self):
        backend = _remote(lambda request: httpx.Response(503, json={"error": "loading"}))
        with pytest.raises(BackendUnavailable):
            await backend.score(TEXT)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        backend = _remote(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(BackendUnavailable):
            await backend.score(TEXT)

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(BackendUnavailable):
            await _remote(handler).score(TEXT)

    @pytest.mark.asyncio
    async def test_circuit_opens_after_repeated_failures(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        backend = _remote(handler)
        for _ in range(3):
            with pytest.raises(BackendUnavailable):
                await backend.score(TEXT)
        assert backend.circuit_breaker.is_open

        with pytest.raises(BackendUnavailable):
            await backend.score(TEXT)
        assert len(calls) == 3


class TestCircuitBreaker:

    def test_starts_closed(self):
        assert CircuitBreaker().state == "closed"

    def test_success_resets(self):
        breaker = CircuitBreaker(failure_threshold=2)
        breaker.record_failure()
        breaker.record_success()
        breaker.record_failure()
        assert breaker.is_open is False

    def test_half_open_after_recovery(self):
        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        breaker.record_failure()
        assert breaker.state == "half-open"


# ============================================================
# FALLBACK CHAIN
# ============================================================

class TestFallbackChain:

    @pytest.mark.asyncio
    async def test_network_error_falls_back_to_local(self):
        remote = FailingBackend(ConnectionError("network down"))
        chain = FallbackChain([remote, LocalHeuristicBackend()])
        result = await chain.score(TEXT)
        assert remote.calls == 1
        assert result.source == "local"
        assert result.score == 52

    @pytest.mark.asyncio
    async def test_remote_result_wins(self):
        chain = FallbackChain([_remote(_ok_handler), LocalHeuristicBackend()])
        result = await chain.score(TEXT)
        assert result.source == "remote"

    @pytest.mark.asyncio
    async def test_unreachable_remote_falls_back(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        chain = FallbackChain([_remote(handler), LocalHeuristicBackend()])
        result = await chain.score(TEXT)
        assert result.source == "local"

    @pytest.mark.asyncio
    async def test_last_resort_error_propagates(self):
        chain = FallbackChain([
            FailingBackend(BackendUnavailable("down")),
            FailingBackend(AggregationFailure()),
        ])
        with pytest.raises(AggregationFailure):
            await chain.score(TEXT)

    def test_empty_chain_rejected(self):
        with pytest.raises(ValueError):
            FallbackChain([])


class TestFactory:

    def test_local_only_without_token(self):
        chain = build_backend(Settings(HF_API_TOKEN=""))
        assert [b.name for b in chain.backends] == ["local"]

    def test_remote_first_with_token(self):
        chain = build_backend(Settings(HF_API_TOKEN="hf_real_token", REMOTE_ENABLED=True))
        assert [b.name for b in chain.backends] == ["remote", "local"]

    def test_remote_disabled(self):
        chain = build_backend(Settings(HF_API_TOKEN="hf_real_token", REMOTE_ENABLED=False))
        assert [b.name for b in chain.backends] == ["local"]

    def test_named_backends(self):
        assert isinstance(get_backend("local"), LocalHeuristicBackend)
        assert isinstance(get_backend("remote"), RemoteClassifierBackend)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            get_backend("gpt")


# ============================================================
# ORCHESTRATION
# ============================================================

class TestScoreText:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_empty_text_rejected(self, text):
        with pytest.raises(InvalidInput):
            await score_text(text, backend=LocalHeuristicBackend())

    @pytest.mark.asyncio
    async def test_short_text_still_scores(self):
        result = await score_text("abcde", backend=LocalHeuristicBackend())
        assert 0 <= result.score <= 100

    @pytest.mark.asyncio
    async def test_timeout(self):
        with pytest.raises(ScoringTimeout):
            await score_with_timeout(TEXT, timeout=0.01, backend=SlowBackend())

    @pytest.mark.asyncio
    async def test_timeout_interrupts_local_analysis(self):
        backend = LocalHeuristicBackend([BusyAnalyzer()])
        with pytest.raises(ScoringTimeout):
            await score_with_timeout(TEXT, timeout=0.05, backend=backend)

    @pytest.mark.asyncio
    async def test_within_timeout(self):
        result = await score_with_timeout(TEXT, timeout=5, backend=LocalHeuristicBackend())
        assert result.score == 52
