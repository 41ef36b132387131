"""16-bit PCM WAV container encoding.

WHY: Each chunk must reach the transcription service as a self-contained
file any standard reader accepts. Uncompressed 16-bit WAV is universally
understood and cheap to produce; at 16 kHz mono it costs 32 kB/s.

HOW: Samples are clamped to [-1, 1] and quantized with asymmetric scaling
(negatives x 32768, positives x 32767, truncated toward zero) so the full
int16 range is used without overflow. The canonical 44-byte RIFF header is
packed with struct in one little-endian call.

RULES:
- Header layout (offsets): 0 RIFF, 4 size-8, 8 WAVE, 12 "fmt ", 16 16,
  20 format=1, 22 channels, 24 rate, 28 byte rate, 32 block align,
  34 bits=16, 36 "data", 40 data size, 44 samples
- Declared sizes always match the payload length exactly
- Multi-channel input is interleaved frame by frame
- Deterministic: identical buffers produce identical bytes
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

import numpy as np

from chunkscribe.audio.pcm import PCMBuffer
from chunkscribe.errors import EncodeError

WAV_HEADER_SIZE = 44
WAV_MIME_TYPE = "audio/wav"
BITS_PER_SAMPLE = 16

_BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
_PCM_FORMAT = 1
_FMT_CHUNK_SIZE = 16
_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")
_MAX_DATA_SIZE = 0xFFFFFFFF - (WAV_HEADER_SIZE - 8)


@dataclass(frozen=True)
class WavHeader:
    """Parsed fields of a canonical 44-byte WAV header."""

    riff_size: int
    audio_format: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int


def quantize(samples: np.ndarray) -> np.ndarray:
    """Convert float samples to little-endian int16 with asymmetric scaling."""
    clipped = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
    scaled = np.where(clipped < 0, clipped * 32768.0, clipped * 32767.0)
    return np.trunc(scaled).astype("<i2")


def encode_wav(buffer: PCMBuffer) -> bytes:
    """Serialize a PCMBuffer into a 16-bit PCM WAV byte string.

    Raises:
        EncodeError: If the buffer has no channels, a non-positive rate,
            or more audio than a RIFF size field can describe.
    """
    channels = buffer.channel_count
    if channels == 0:
        raise EncodeError("Cannot encode a buffer with zero channels")
    if buffer.sample_rate <= 0:
        raise EncodeError(
            "Cannot encode a buffer with sample rate {}".format(buffer.sample_rate)
        )

    block_align = channels * _BYTES_PER_SAMPLE
    data_size = buffer.frame_count * block_align
    if data_size > _MAX_DATA_SIZE:
        raise EncodeError(
            "Audio payload of {} bytes exceeds the WAV size limit".format(data_size)
        )

    header = _HEADER_STRUCT.pack(
        b"RIFF",
        WAV_HEADER_SIZE - 8 + data_size,
        b"WAVE",
        b"fmt ",
        _FMT_CHUNK_SIZE,
        _PCM_FORMAT,
        channels,
        buffer.sample_rate,
        buffer.sample_rate * block_align,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )
    # (channels, frames) -> (frames, channels) so samples interleave per frame
    payload = quantize(buffer.samples).T.tobytes()
    return header + payload


def read_wav_header(data: bytes) -> WavHeader:
    """Parse the canonical header written by encode_wav().

    Raises:
        ValueError: If ``data`` is too short or the magic tags are wrong.
    """
    if len(data) < WAV_HEADER_SIZE:
        raise ValueError("WAV data shorter than the 44-byte header")
    (riff, riff_size, wave, fmt, _fmt_size, audio_format, channels, sample_rate,
     byte_rate, block_align, bits, data_tag, data_size) = _HEADER_STRUCT.unpack_from(data)
    if (riff, wave, fmt, data_tag) != (b"RIFF", b"WAVE", b"fmt ", b"data"):
        raise ValueError("Not a canonical PCM WAV header")
    return WavHeader(
        riff_size=riff_size,
        audio_format=audio_format,
        channels=channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits,
        data_size=data_size,
    )
