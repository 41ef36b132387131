"""Transcription API response dataclasses.

WHY: The OpenAI-compatible transcription endpoint returns a JSON object
whose only guaranteed field is ``text``; verbose formats add language and
duration. A typed dataclass keeps the parsing in one place.

HOW: from_dict() tolerates missing optional fields and strips the text.

RULES:
- text is always a str (missing or null text becomes "")
- language/duration are None unless the service sent them
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TranscriptionResult:
    """Parsed body of a successful ``POST /audio/transcriptions`` call."""

    text: str
    language: str | None = None
    duration_s: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> TranscriptionResult:
        duration = data.get("duration")
        return cls(
            text=(data.get("text") or "").strip(),
            language=data.get("language"),
            duration_s=float(duration) if duration is not None else None,
        )


@dataclass
class ModelInfo:
    """One entry of ``GET /models``."""

    id: str
    owned_by: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ModelInfo:
        return cls(id=data["id"], owned_by=data.get("owned_by"))
