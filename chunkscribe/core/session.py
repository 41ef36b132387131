"""Caller-owned state for one interactive transcription session.

WHY: A front end (the CLI here, a GUI or web page elsewhere) tracks the
selected file, the transcript, the report, the last error, and a progress
counter. That state belongs to the caller, not to the pipeline: the
orchestrator only ever writes to it through the progress callback.

HOW: A plain mutable dataclass. on_progress is bound-method friendly, so
``transcribe_chunks(..., on_progress=session.on_progress)`` just works.

RULES:
- select_file() validates the file is audio and resets all results
- begin_transcription() clears text, analysis, error, and progress
- Only the orchestrator (via on_progress) writes progress; readers may
  look at it at any time
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from chunkscribe.config import SUPPORTED_AUDIO_FORMATS
from chunkscribe.core.orchestrator import Progress


def is_audio_file(path: Path) -> bool:
    """True for a known audio extension or any ``audio/*`` MIME guess."""
    if path.suffix.lower() in SUPPORTED_AUDIO_FORMATS:
        return True
    mime, _ = mimetypes.guess_type(path.name)
    return bool(mime and mime.startswith("audio/"))


@dataclass
class TranscriptionSession:
    """Everything a front end displays about the current recording."""

    file: Optional[Path] = None
    text: str = ""
    analysis: str = ""
    error: str = ""
    busy: bool = False
    progress: Progress = field(default_factory=lambda: Progress(0, 0))

    def select_file(self, path: Path) -> None:
        """Select a new recording, clearing results from the previous one.

        Raises:
            ValueError: If ``path`` does not look like an audio file.
        """
        if not is_audio_file(path):
            self.file = None
            self.error = "Please select a valid audio file (MP3, WAV, M4A, etc.)"
            raise ValueError(self.error)
        self.file = path
        self.text = ""
        self.analysis = ""
        self.error = ""
        self.progress = Progress(0, 0)

    def begin_transcription(self) -> None:
        self.busy = True
        self.text = ""
        self.analysis = ""
        self.error = ""
        self.progress = Progress(0, 0)

    def on_progress(self, progress: Progress) -> None:
        self.progress = progress

    def finish(self, *, text: str = "", error: str = "") -> None:
        self.busy = False
        if text:
            self.text = text
        self.error = error

    def reset_progress(self) -> None:
        self.progress = Progress(0, 0)
