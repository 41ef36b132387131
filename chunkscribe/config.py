"""Configuration constants, pipeline defaults, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Chunking parameters, service endpoints, and upload
limits are plain module-level values, not buried in logic.

HOW: python-dotenv loads the .env file on import. Constants are read from
the environment with sensible defaults. The load_*_api_key() functions
provide a clear error when a key is missing.

RULES:
- API keys are loaded from .env via python-dotenv, never hardcoded
- Placeholder keys copied from an example .env count as missing
- TARGET_SAMPLE_RATE / CHUNK_DURATION_S define the per-chunk budget:
  120 s x 16000 Hz x 2 bytes = 3.84 MB, far below the 35 MB upload ceiling
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Audio pipeline defaults
# ---------------------------------------------------------------------------

TARGET_SAMPLE_RATE = int(os.getenv("TARGET_SAMPLE_RATE", "16000"))
"""Output rate of the resampler. 16 kHz is enough for intelligible speech."""

CHUNK_DURATION_S = float(os.getenv("CHUNK_DURATION_S", "120"))
"""Maximum duration of a single transcription request, in seconds."""

CHUNK_PACING_S = float(os.getenv("CHUNK_PACING_S", "1.0"))
"""Pause between consecutive chunk requests to stay under rate limits."""

CHUNK_MAX_RETRIES = int(os.getenv("CHUNK_MAX_RETRIES", "0"))
"""Extra attempts per chunk on a rate-limit response (0 = fail fast)."""

MAX_UPLOAD_BYTES = int(float(os.getenv("MAX_UPLOAD_MB", "35")) * 1024 * 1024)
"""Request ceiling of the transcription service and of our own upload route."""

SUPPORTED_AUDIO_FORMATS: set[str] = {
    ".aac", ".aiff", ".flac", ".m4a", ".mp3", ".mp4",
    ".oga", ".ogg", ".opus", ".wav", ".webm",
}
"""Audio file extensions accepted by the CLI (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# Service configuration
# ---------------------------------------------------------------------------

GROQ_BASE_URL = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
GROQ_MODEL = os.getenv("GROQ_MODEL", "whisper-large-v3")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash-8b")
PORT = int(os.getenv("PORT", "5000"))


def _load_key(env_name: str, placeholder: str, signup_url: str) -> str:
    key = os.getenv(env_name, "").strip()
    if not key or key == placeholder:
        raise ValueError(
            "Missing {}. Get one free at {} and add it to the .env file.".format(
                env_name, signup_url
            )
        )
    return key


def load_groq_api_key() -> str:
    """Load the Groq API key used for Whisper transcription.

    RULES:
    - Raises ValueError if the key is missing, empty, or the placeholder
    - Never returns a default/placeholder value
    """
    return _load_key(
        "GROQ_API_KEY", "your_groq_api_key_here", "https://console.groq.com"
    )


def load_gemini_api_key() -> str:
    """Load the Google Gemini API key used for report generation."""
    return _load_key(
        "GEMINI_API_KEY",
        "your_gemini_api_key_here",
        "https://aistudio.google.com/app/apikey",
    )
