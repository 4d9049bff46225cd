"""
Configuration settings for the study-notes service.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = ROOT_DIR / ".env"

load_dotenv(ENV_PATH)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


class Config:
    """Main configuration class, populated from the environment / .env."""

    # Server
    PORT = _env_int("PORT", 3001)
    MAX_UPLOAD_MB = _env_int("MAX_UPLOAD_MB", 50)
    OUTPUT_DIR = ROOT_DIR / "outputs"

    # API keys
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

    # Models per agent
    SUMMARY_MODEL = os.getenv("SUMMARY_MODEL", "gpt-4o-mini")
    EXTRACTION_MODEL = os.getenv("EXTRACTION_MODEL", "gpt-4o-mini")
    VERIFICATION_MODEL = os.getenv("VERIFICATION_MODEL", "gpt-4o-mini")
    SEARCH_MODEL = os.getenv("SEARCH_MODEL", "gpt-4o")

    # Prompt input limits (characters)
    SUMMARY_MAX_CHARS = 6000
    CLAIM_MAX_CHARS = 8000

    # Minimum note length accepted for summarizing / fact-checking
    MIN_TEXT_LENGTH = 50

    # Fact-check pipeline
    FACT_CHECK_BATCH_SIZE = _env_int("FACT_CHECK_BATCH_SIZE", 3)
    FACT_CHECK_BATCH_DELAY = _env_float("FACT_CHECK_BATCH_DELAY", 1.0)  # seconds

    # Evidence sources
    SEMANTIC_SCHOLAR_URL = "https://api.semanticscholar.org/graph/v1/paper/search"
    SEMANTIC_SCHOLAR_TIMEOUT = _env_float("SEMANTIC_SCHOLAR_TIMEOUT", 5.0)
    SEMANTIC_SCHOLAR_LIMIT = 3

    # OCR
    OCR_LANG = os.getenv("OCR_LANG", "kor+eng")

    # Grounding signal
    GROUNDING_THRESHOLD = 0.2
