"""Shared test fixtures for the chunkscribe test suite.

WHY: Most test modules need small, deterministic PCM buffers and encoded
audio files. Generating them here keeps every test self-contained with no
audio assets on disk and no network access.

HOW: Fixtures build sine tones and silence with numpy, and encode them to
in-memory WAV/FLAC with soundfile when a test needs real file bytes.

RULES:
- No fixture touches the network; remote services are always faked
- Generated audio is deterministic (no random noise)
- API keys are set to dummy values so client constructors never fail
"""

from __future__ import annotations

import io

import numpy as np
import pytest
import soundfile as sf

from chunkscribe.audio.pcm import Chunk, PCMBuffer


def sine(freq: float, seconds: float, rate: int, amplitude: float = 0.5) -> np.ndarray:
    """A float32 sine tone of ``seconds`` at ``rate``."""
    t = np.arange(int(round(seconds * rate))) / rate
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


def encode_file(samples: np.ndarray, rate: int, fmt: str = "WAV", subtype: str = "PCM_16") -> bytes:
    """Encode (channels, frames) samples to an in-memory audio file."""
    out = io.BytesIO()
    sf.write(out, np.atleast_2d(samples).T, rate, format=fmt, subtype=subtype)
    return out.getvalue()


def make_chunks(count: int, rate: int = 16000, seconds: float = 0.1):
    """``count`` consecutive silent chunks, indexed 0..count-1."""
    frames = int(seconds * rate)
    return [
        Chunk(
            index=i,
            start_frame=i * frames,
            end_frame=(i + 1) * frames,
            buffer=PCMBuffer(rate, np.zeros(frames, dtype=np.float32)),
        )
        for i in range(count)
    ]


@pytest.fixture(autouse=True)
def _dummy_api_keys(monkeypatch):
    """Give clients a syntactically valid key so constructors succeed."""
    monkeypatch.setenv("GROQ_API_KEY", "gsk_test_key")
    monkeypatch.setenv("GEMINI_API_KEY", "gemini_test_key")


@pytest.fixture
def stereo_44k():
    """Two seconds of 44.1 kHz stereo: 440 Hz left, 880 Hz right."""
    left = sine(440, 2.0, 44100)
    right = sine(880, 2.0, 44100)
    return PCMBuffer(44100, np.stack([left, right]))


@pytest.fixture
def mono_16k():
    """One second of a 16 kHz mono 440 Hz tone."""
    return PCMBuffer(16000, sine(440, 1.0, 16000))


@pytest.fixture
def silent_16k():
    """One second of 16 kHz mono silence."""
    return PCMBuffer(16000, np.zeros(16000, dtype=np.float32))


@pytest.fixture
def wav_bytes_stereo():
    """A real 3 s, 48 kHz stereo 16-bit WAV file."""
    left = sine(300, 3.0, 48000)
    right = sine(600, 3.0, 48000)
    return encode_file(np.stack([left, right]), 48000)


@pytest.fixture
def wav_bytes_mono_16k():
    """A real 1 s, 16 kHz mono 16-bit WAV file."""
    return encode_file(sine(440, 1.0, 16000), 16000)


@pytest.fixture
def chunk_factory():
    """Factory fixture: ``chunk_factory(n)`` gives n silent indexed chunks."""
    return make_chunks


@pytest.fixture
def audio_file_factory():
    """Factory fixture: ``audio_file_factory(samples, rate, fmt)`` gives file bytes."""
    return encode_file


@pytest.fixture
def tone():
    """Factory fixture: ``tone(freq, seconds, rate)`` gives a float32 sine."""
    return sine
