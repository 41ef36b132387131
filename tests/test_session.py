"""Tests for TranscriptionSession, the caller-owned UI state."""

from __future__ import annotations

from pathlib import Path

import pytest

from chunkscribe.core.orchestrator import Progress
from chunkscribe.core.session import TranscriptionSession, is_audio_file


class TestIsAudioFile:

    @pytest.mark.parametrize("name", ["a.mp3", "b.WAV", "c.m4a", "d.flac", "e.ogg"])
    def test_audio_extensions(self, name):
        assert is_audio_file(Path(name))

    @pytest.mark.parametrize("name", ["notes.txt", "slides.pdf", "noext"])
    def test_non_audio(self, name):
        assert not is_audio_file(Path(name))


class TestSession:

    def test_select_file_resets_results(self):
        session = TranscriptionSession(text="old", analysis="old report", error="boom")
        session.select_file(Path("meeting.mp3"))
        assert session.file == Path("meeting.mp3")
        assert (session.text, session.analysis, session.error) == ("", "", "")
        assert session.progress == Progress(0, 0)

    def test_select_non_audio_sets_error(self):
        session = TranscriptionSession()
        with pytest.raises(ValueError, match="valid audio file"):
            session.select_file(Path("notes.txt"))
        assert session.file is None
        assert session.error.startswith("Please select a valid audio file")

    def test_progress_callback_updates_state(self):
        session = TranscriptionSession()
        session.begin_transcription()
        assert session.busy
        session.on_progress(Progress(2, 5))
        assert session.progress.percentage == 40

    def test_finish_with_text(self):
        session = TranscriptionSession()
        session.begin_transcription()
        session.finish(text="done")
        assert not session.busy
        assert session.text == "done"
        assert session.error == ""

    def test_finish_with_error_keeps_no_text(self):
        session = TranscriptionSession()
        session.begin_transcription()
        session.finish(error="Chunk 1: Invalid API key")
        assert session.text == ""
        assert session.error == "Chunk 1: Invalid API key"

    def test_reset_progress(self):
        session = TranscriptionSession(progress=Progress(3, 3))
        session.reset_progress()
        assert session.progress == Progress(0, 0)
