"""
Backend factory and fallback chain.
"""

from __future__ import annotations

from typing import Optional, Sequence

from hallucheck.backends import ScoringBackend
from hallucheck.config import Settings, settings as default_settings
from hallucheck.logging import get_logger
from hallucheck.scorer import AggregateResult

logger = get_logger("backends")


class FallbackChain(ScoringBackend):
    """
    Try backends in order; the first result wins.

    Any error from a backend before the last is logged and skipped.
    The last backend's error propagates unchanged.
    """

    name = "chain"

    def __init__(self, backends: Sequence[ScoringBackend]):
        if not backends:
            raise ValueError("FallbackChain needs at least one backend")
        self.backends = tuple(backends)

    async def score(self, text: str) -> AggregateResult:
        *fallible, last_resort = self.backends
        for backend in fallible:
            try:
                return await backend.score(text)
            except Exception as e:
                logger.info(
                    "Backend %s unavailable, falling back", backend.name,
                    extra={"backend": backend.name, "error": str(e),
                           "error_type": type(e).__name__},
                )
        return await last_resort.score(text)


def build_backend(settings: Optional[Settings] = None) -> ScoringBackend:
    """Remote classifier (when configured) falling back to local heuristics."""
    from hallucheck.backends.local import LocalHeuristicBackend
    from hallucheck.backends.remote import RemoteClassifierBackend

    settings = settings or default_settings
    backends: list[ScoringBackend] = []
    if settings.REMOTE_ENABLED:
        remote = RemoteClassifierBackend(
            api_token=settings.HF_API_TOKEN,
            url=settings.CLASSIFIER_URL,
            timeout=settings.CLASSIFIER_TIMEOUT,
            machine_label=settings.MACHINE_LABEL,
            human_label=settings.HUMAN_LABEL,
        )
        if remote.configured:
            backends.append(remote)
    backends.append(LocalHeuristicBackend())
    return FallbackChain(backends)


def get_backend(backend_name: str = "auto") -> ScoringBackend:
    """Factory — returns a backend by name."""
    if backend_name == "auto":
        return build_backend()
    elif backend_name == "local":
        from hallucheck.backends.local import LocalHeuristicBackend
        return LocalHeuristicBackend()
    elif backend_name == "remote":
        from hallucheck.backends.remote import RemoteClassifierBackend
        return RemoteClassifierBackend()
    else:
        raise ValueError(f"Unknown scoring backend: {backend_name}")
