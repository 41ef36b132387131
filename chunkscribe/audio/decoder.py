"""Audio decoding from opaque bytes into a PCMBuffer.

WHY: Uploads arrive as whatever the user recorded: WAV from a field
recorder, MP3 from a podcast, M4A from a phone. The rest of the pipeline
only wants float PCM with a known rate and channel count.

HOW: soundfile (libsndfile) is tried first. It decodes WAV, FLAC, OGG and
MP3 in-process, without touching disk. Anything it rejects goes to pydub,
which shells out to ffmpeg and covers the container formats libsndfile
does not (M4A/AAC, MP4, WebM). pydub's integer samples are scaled to
[-1, 1] by their sample width.

RULES:
- Empty input is a DecodeError, not an empty buffer
- The filename (if any) is only a format hint for ffmpeg
- Both backends failing raises DecodeError chained to the pydub error
- No side effects: nothing is written except pydub's own temp files
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional

import numpy as np
import soundfile as sf
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from chunkscribe.audio.pcm import PCMBuffer
from chunkscribe.errors import DecodeError

logger = logging.getLogger(__name__)


def decode_audio(data: bytes, filename: Optional[str] = None) -> PCMBuffer:
    """Decode an encoded audio byte buffer.

    Args:
        data: Raw bytes of an audio file in any supported container.
        filename: Optional original filename, used as a format hint.

    Returns:
        A PCMBuffer at the source's native sample rate and channel count.

    Raises:
        DecodeError: If the bytes are empty, not audio, or use a codec
            neither backend supports.
    """
    if not data:
        raise DecodeError("Audio input is empty")

    try:
        return _decode_with_soundfile(data)
    except (RuntimeError, TypeError, ValueError) as exc:
        logger.debug("soundfile could not decode %s (%s); trying ffmpeg", filename, exc)

    try:
        return _decode_with_pydub(data, filename)
    except (CouldntDecodeError, OSError, ValueError) as exc:
        raise DecodeError(
            "Could not decode audio{}: unsupported or corrupt file".format(
                " '{}'".format(filename) if filename else ""
            )
        ) from exc


def _decode_with_soundfile(data: bytes) -> PCMBuffer:
    samples, sample_rate = sf.read(io.BytesIO(data), dtype="float32", always_2d=True)
    # soundfile returns (frames, channels)
    return PCMBuffer(sample_rate=int(sample_rate), samples=samples.T)


def _decode_with_pydub(data: bytes, filename: Optional[str]) -> PCMBuffer:
    segment = AudioSegment.from_file(io.BytesIO(data), format=_format_hint(filename))
    raw = np.array(segment.get_array_of_samples(), dtype=np.float32)
    full_scale = float(1 << (8 * segment.sample_width - 1))
    channels = segment.channels
    frames = raw.reshape(-1, channels).T / full_scale
    return PCMBuffer(sample_rate=int(segment.frame_rate), samples=frames)


def _format_hint(filename: Optional[str]) -> Optional[str]:
    if not filename:
        return None
    suffix = Path(filename).suffix.lower().lstrip(".")
    # ffmpeg knows M4A under its container name
    return {"m4a": "mp4"}.get(suffix, suffix) or None
