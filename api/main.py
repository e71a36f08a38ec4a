"""
Hallucheck API — Main Application

POST /score    — Score text for hallucination likelihood
GET  /lexicon  — List the lexicons and score bands
GET  /health   — Health check
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from hallucheck import __version__
from hallucheck.backends import ScoringBackend
from hallucheck.backends.remote import RemoteClassifierBackend
from hallucheck.config import settings
from hallucheck.detector import ERROR_SUGGESTIONS, get_default_backend, score_with_timeout
from hallucheck.errors import HallucheckError, InvalidInput, ScoringTimeout
from hallucheck.lexicon import LEXICONS
from hallucheck.logging import elapsed_ms, get_logger, setup_logging
from hallucheck.scorer import BANDS
from hallucheck.schemas.score import (
    ScoreRequest,
    ScoreResponse,
    ErrorResponse,
    LexiconResponse,
    HealthResponse,
)

logger = get_logger("api")


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup."""
    setup_logging()
    logger.info("Hallucheck API starting")
    yield
    logger.info("Hallucheck API shutting down")


app = FastAPI(
    title="Hallucheck API",
    description="Heuristic hallucination likelihood scoring for text",
    version=__version__,
    lifespan=lifespan,
)

# CORS — set HALLUCHECK_CORS_ORIGINS in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
    allow_credentials=False,
)


# ============================================================
# ERROR HANDLERS
# ============================================================

_STATUS_BY_ERROR = {
    InvalidInput: 422,
    ScoringTimeout: 504,
}


@app.exception_handler(HallucheckError)
async def scoring_error_handler(request: Request, exc: HallucheckError):
    """Surfaced scoring errors become an error state: message + suggestions, no score."""
    status = _STATUS_BY_ERROR.get(type(exc), 500)
    logger.warning(
        f"Scoring failed: {exc.error_type}",
        extra={"error": str(exc), "error_type": exc.error_type,
               "path": request.url.path, "status_code": status},
    )
    body = ErrorResponse(
        detail=str(exc),
        error_type=exc.error_type,
        suggestions=list(ERROR_SUGGESTIONS),
    )
    return JSONResponse(status_code=status, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Body validation (missing, empty, too short, too long) is invalid input."""
    errors = exc.errors()
    detail = str(errors[0].get("msg", "Invalid request")) if errors else "Invalid request"
    # pydantic prefixes messages raised from validators
    detail = detail.removeprefix("Value error, ")
    return await scoring_error_handler(request, InvalidInput(detail))


@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    body = ErrorResponse(
        detail="Internal server error. The analysis could not be completed.",
        error_type="internal",
        suggestions=list(ERROR_SUGGESTIONS),
    )
    return JSONResponse(status_code=500, content=body.model_dump())


def get_scoring_backend() -> ScoringBackend:
    """Dependency — the configured backend chain."""
    return get_default_backend()


# ============================================================
# ROUTES
# ============================================================

@app.post(
    "/score",
    response_model=ScoreResponse,
    responses={500: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
)
async def score(
    request: ScoreRequest,
    backend: ScoringBackend = Depends(get_scoring_backend),
):
    """Score text for hallucination likelihood."""
    result = await score_with_timeout(
        request.text, timeout=settings.SCORE_TIMEOUT, backend=backend,
    )
    return result.to_dict()


@app.get("/lexicon", response_model=LexiconResponse)
async def lexicon():
    """Return every lexicon and the score band table."""
    return {
        "lexicons": {name: list(entries) for name, entries in LEXICONS.items()},
        "bands": [
            {
                "key": band.key,
                "floor": band.floor,
                "factors": list(band.factors),
                "recommendations": list(band.recommendations),
            }
            for band in BANDS
        ],
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check."""
    return {
        "status": "operational",
        "version": __version__,
        "remote_classifier_configured": (
            settings.REMOTE_ENABLED and RemoteClassifierBackend().configured
        ),
        "score_timeout_seconds": settings.SCORE_TIMEOUT,
    }


# --- Security + Version Headers Middleware ---
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security and version headers to all responses."""
    response = await call_next(request)
    response.headers["X-Hallucheck-Version"] = __version__
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# --- Request Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with method, path, status, duration."""
    path = request.url.path
    if path == "/health":
        return await call_next(request)

    start = time.monotonic()
    response = await call_next(request)
    duration_ms = elapsed_ms(start)

    logger.info(
        f"{request.method} {path} → {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.HOST, port=settings.PORT)
