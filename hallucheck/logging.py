"""
Structured Logging

Everything logs under the "hallucheck" namespace. In production each
record is one JSON line; set HALLUCHECK_LOG_FORMAT=text for a
readable console format during development.

Context travels through `extra=`. Only the keys in EXTRA_FIELDS are
copied into the JSON entry, so arbitrary attributes never leak into
log output.

Usage:
    from hallucheck.logging import get_logger, elapsed_ms
    logger = get_logger("detector")
    logger.info("Score complete", extra={"score": 52, "source": "local",
                                         "duration_ms": elapsed_ms(start)})
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Optional

from hallucheck.config import settings

NAMESPACE = "hallucheck"

EXTRA_FIELDS = (
    # scoring
    "score", "confidence", "source", "band", "factors_count",
    # backends / analyzers
    "backend", "analyzer", "error", "error_type",
    # requests
    "duration_ms", "status_code", "method", "path",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            key: getattr(record, key)
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        })
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Console format for development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Logger:
    """
    Install the package handler. Safe to call more than once.

    `level` and `fmt` default to HALLUCHECK_LOG_LEVEL / HALLUCHECK_LOG_FORMAT.
    Only the handler installed here is replaced; handlers added by
    anyone else (test capture, embedding apps) are left alone.
    """
    level = (level or settings.LOG_LEVEL).upper()
    fmt = fmt or settings.LOG_FORMAT

    root = logging.getLogger(NAMESPACE)
    root.setLevel(getattr(logging, level, logging.INFO))
    for existing in [h for h in root.handlers if getattr(h, "_hallucheck", False)]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    handler._hallucheck = True
    root.addHandler(handler)

    # httpx logs every classifier request at INFO
    for noisy in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{NAMESPACE}.{name}")


def elapsed_ms(start: float) -> float:
    """Milliseconds since a time.monotonic() reading, one decimal."""
    return round((time.monotonic() - start) * 1000, 1)
