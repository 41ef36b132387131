"""Typed error taxonomy for the transcription pipeline.

WHY: Every stage fails fast and aborts the whole request. Callers (CLI,
HTTP API, tests) need to tell failures apart without parsing messages:
a bad upload is the user's problem, a 401 is a configuration problem, a
429 means "wait and retry the whole thing".

HOW: One base class, PipelineError, carries a human-readable message, a
machine-checkable ``kind`` string, and the HTTP status the API layer
should answer with. Each pipeline stage has its own subclass; remote
request failures are subtyped by cause.

RULES:
- ``kind`` is stable and snake_case; clients may switch on it
- TranscriptionRequestError.chunk_index is set by the orchestrator to the
  index of the chunk whose request failed
- error_for_status() is the single place HTTP codes map to error classes
"""

from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base class for every failure the pipeline reports to its caller."""

    kind = "pipeline"
    http_status = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DecodeError(PipelineError):
    """Input bytes are not audio, or use a codec no backend can decode."""

    kind = "decode"
    http_status = 422


class ResampleError(PipelineError):
    """PCM buffer is malformed (zero channels, non-positive rate, NaNs)."""

    kind = "resample"
    http_status = 422


class SplitError(PipelineError):
    """The source buffer to split is empty."""

    kind = "split"
    http_status = 422


class EncodeError(PipelineError):
    """WAV encoding failed. Not expected for a valid PCM buffer."""

    kind = "encode"
    http_status = 500


class TranscriptionRequestError(PipelineError):
    """The transcription service rejected or failed a request.

    RULES:
    - status_code is the HTTP status from the service, or None for
      transport failures and unexpected collaborator exceptions
    - chunk_index is None until the orchestrator tags the error
    """

    kind = "transcription_request"
    http_status = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        chunk_index: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.chunk_index = chunk_index

    def __str__(self) -> str:
        if self.chunk_index is None:
            return self.message
        return "Chunk {}: {}".format(self.chunk_index, self.message)


class Unauthorized(TranscriptionRequestError):
    kind = "unauthorized"
    http_status = 401


class PayloadTooLarge(TranscriptionRequestError):
    kind = "payload_too_large"
    http_status = 413


class RateLimited(TranscriptionRequestError):
    kind = "rate_limited"
    http_status = 429


class UnknownTranscriptionError(TranscriptionRequestError):
    kind = "unknown"
    http_status = 500


class EmptyTranscriptError(PipelineError):
    """Every chunk came back empty (silent or too-short audio)."""

    kind = "empty_transcript"
    http_status = 400

    def __init__(
        self,
        message: str = "No text transcribed. Audio might be silent or too short.",
    ) -> None:
        super().__init__(message)


class AnalysisError(PipelineError):
    """The language model failed to produce a report.

    The HTTP status is per-instance: 401 for key problems, 429 for quota,
    500 for everything else.
    """

    kind = "analysis"

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.http_status = status_code


def error_for_status(status_code: int, body: str) -> TranscriptionRequestError:
    """Map a non-2xx transcription response to the matching error class.

    RULES:
    - 401 → Unauthorized
    - 413 → PayloadTooLarge
    - 429 → RateLimited
    - anything else → UnknownTranscriptionError (body kept for details)
    """
    if status_code == 401:
        return Unauthorized("Invalid API key", status_code=status_code)
    if status_code == 413:
        return PayloadTooLarge(
            "Audio file too large. Try splitting into smaller chunks.",
            status_code=status_code,
        )
    if status_code == 429:
        return RateLimited(
            "Rate limit exceeded. Please wait a moment.", status_code=status_code
        )
    return UnknownTranscriptionError(
        "Transcription failed ({}): {}".format(status_code, body),
        status_code=status_code,
    )
