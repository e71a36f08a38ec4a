"""
Hallucheck Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Remote Classifier (Hugging Face Inference API) ---
    HF_API_TOKEN: str = os.getenv("HALLUCHECK_HF_TOKEN", os.getenv("HF_TOKEN", ""))
    CLASSIFIER_URL: str = os.getenv(
        "HALLUCHECK_CLASSIFIER_URL",
        "https://api-inference.huggingface.co/models/facebook/roberta-base-openai-detector",
    )
    MACHINE_LABEL: str = os.getenv("HALLUCHECK_MACHINE_LABEL", "LABEL_1")
    HUMAN_LABEL: str = os.getenv("HALLUCHECK_HUMAN_LABEL", "LABEL_0")
    CLASSIFIER_TIMEOUT: float = float(os.getenv("HALLUCHECK_CLASSIFIER_TIMEOUT", "10"))
    REMOTE_ENABLED: bool = _env_bool("HALLUCHECK_REMOTE_ENABLED", "true")

    # --- Scoring ---
    SCORE_TIMEOUT: float = float(os.getenv("HALLUCHECK_SCORE_TIMEOUT", "30"))
    MIN_TEXT_LENGTH: int = int(os.getenv("HALLUCHECK_MIN_TEXT_LENGTH", "10"))
    MAX_TEXT_LENGTH: int = int(os.getenv("HALLUCHECK_MAX_TEXT_LENGTH", "50000"))

    # --- Server ---
    HOST: str = os.getenv("HALLUCHECK_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("HALLUCHECK_PORT", "8000"))

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("HALLUCHECK_LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("HALLUCHECK_LOG_FORMAT", "json")  # "json" or "text"

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("HALLUCHECK_CORS_ORIGINS", "*")


settings = Settings()
