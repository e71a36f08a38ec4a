"""
API Schemas — Request and Response Models

Pydantic models for the Hallucheck API.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from hallucheck.config import settings


# ============================================================
# SCORE
# ============================================================

class ScoreRequest(BaseModel):
    """POST /score request body."""
    text: str = Field(..., max_length=settings.MAX_TEXT_LENGTH,
                      description="The text to score (at least 10 characters after trimming).")

    model_config = {"json_schema_extra": {"examples": [
        {"text": "Furthermore, it is important to note that, moreover, in conclusion, "
                 "this report demonstrates significant findings."},
    ]}}

    @field_validator("text")
    @classmethod
    def _check_length(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Please enter some content to analyze.")
        if len(trimmed) < settings.MIN_TEXT_LENGTH:
            raise ValueError(
                f"Please enter at least {settings.MIN_TEXT_LENGTH} characters "
                "for meaningful analysis."
            )
        return trimmed


class ScoreResponse(BaseModel):
    """POST /score response body."""
    score: int = Field(..., ge=0, le=100)
    confidence: int = Field(..., ge=0, le=100)
    factors: list[str]
    recommendations: list[str]
    summary: str
    band: str
    source: str


class ErrorResponse(BaseModel):
    """Body for any surfaced scoring error. Carries no score."""
    detail: str
    error_type: str
    suggestions: list[str] = []


# ============================================================
# LEXICON
# ============================================================

class BandResponse(BaseModel):
    key: str
    floor: Optional[int]
    factors: list[str]
    recommendations: list[str]


class LexiconResponse(BaseModel):
    """GET /lexicon response body."""
    lexicons: dict[str, list[str]]
    bands: list[BandResponse]


# ============================================================
# HEALTH
# ============================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    remote_classifier_configured: bool
    score_timeout_seconds: float
