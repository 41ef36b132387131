"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation.

HOW: One model per request/response body. All fields carry Field
descriptions so the /docs UI is self-explanatory.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- ErrorResponse is shared by every failing endpoint; ``kind`` mirrors
  PipelineError.kind so clients can branch without parsing messages
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class AnalyzeRequest(BaseModel):
    """Transcript to turn into a structured report."""

    text: str = Field(default="", description="Transcript text to analyze.")


class ReportRequest(BaseModel):
    """Markdown report to render as PDF."""

    analysis: str = Field(default="", description="Markdown report from POST /analyze.")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TranscriptionResponse(BaseModel):
    """Result of a completed transcription."""

    text: str = Field(description="Full transcript, chunk texts joined in order.")
    service: str = Field(description="Transcription service used.")
    characters: int = Field(description="Length of the transcript in characters.")
    chunks: int = Field(description="Number of chunks the audio was split into.")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "text": "Bonjour à tous, on commence par le point budget.",
                "service": "Groq Whisper",
                "characters": 48,
                "chunks": 1,
            }
        ]
    }}


class AnalysisResponse(BaseModel):
    """Markdown business report generated from a transcript."""

    analysis: str = Field(description="Markdown report.")
    service: str = Field(description="Language model service used.")
    characters: int = Field(description="Length of the report in characters.")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    - kind is a stable machine-checkable error identifier
    - chunk_index is set only when a specific chunk's request failed
    """

    detail: str = Field(description="Human-readable error description.")
    kind: Optional[str] = Field(default=None, description="Machine-checkable error kind.")
    chunk_index: Optional[int] = Field(
        default=None, description="Index of the chunk whose transcription failed."
    )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    message: str = Field(description="Human-readable status message.")
    timestamp: str = Field(description="Server time, ISO 8601 UTC.")
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
