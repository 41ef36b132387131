"""Core orchestration: the sequential chunk loop and caller-side session state.

WHY: Separates the "what order do we call the service in" logic from the
audio math and from the HTTP/CLI surfaces, so each is testable alone.

HOW: orchestrator.py holds transcribe_chunks() and the end-to-end
transcribe_audio(); session.py holds the caller-owned state object.
"""

from chunkscribe.core.orchestrator import (
    Progress,
    transcribe_audio,
    transcribe_chunks,
)
from chunkscribe.core.session import TranscriptionSession

__all__ = ["Progress", "TranscriptionSession", "transcribe_audio", "transcribe_chunks"]
