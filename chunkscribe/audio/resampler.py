"""Downmix to mono and resample to the transcription rate.

WHY: Speech recognition gains nothing from stereo or from rates above
16 kHz, while both multiply the bytes sent per request. Converting every
source to 16 kHz mono keeps each 120 s chunk around 3.8 MB.

HOW: Channels are averaged into one, then scipy.signal.resample_poly
converts the rate. The up/down ratio is reduced by its GCD to keep the
polyphase filter small (44100 → 16000 becomes 160/441).

RULES:
- Output always has exactly one channel at target_rate
- Output frame count is ceil(frames * up / down): duration within 1 sample
- Zero channels, non-positive rates, or non-finite samples → ResampleError
- A zero-frame input yields a zero-frame output (the splitter rejects it)
"""

from __future__ import annotations

from math import gcd

import numpy as np
from scipy.signal import resample_poly

from chunkscribe.audio.pcm import PCMBuffer
from chunkscribe.config import TARGET_SAMPLE_RATE
from chunkscribe.errors import ResampleError


def to_mono(buffer: PCMBuffer, target_rate: int = TARGET_SAMPLE_RATE) -> PCMBuffer:
    """Convert a PCMBuffer to a single channel at ``target_rate``.

    Args:
        buffer: Source audio at any rate and channel count.
        target_rate: Desired output sample rate in Hz.

    Returns:
        A new mono PCMBuffer; the input is left untouched.

    Raises:
        ResampleError: If the source buffer or target rate is malformed.
    """
    if buffer.channel_count == 0:
        raise ResampleError("Cannot resample a buffer with zero channels")
    if buffer.sample_rate <= 0:
        raise ResampleError(
            "Cannot resample a buffer with sample rate {}".format(buffer.sample_rate)
        )
    if target_rate <= 0:
        raise ResampleError("Target sample rate must be positive, got {}".format(target_rate))
    if not np.all(np.isfinite(buffer.samples)):
        raise ResampleError("Buffer contains non-finite samples")

    mono = _mixdown(buffer.samples)
    if buffer.sample_rate != target_rate and mono.size:
        mono = _resample(mono, buffer.sample_rate, target_rate)
    return PCMBuffer(sample_rate=target_rate, samples=mono[np.newaxis, :])


def _mixdown(samples: np.ndarray) -> np.ndarray:
    if samples.shape[0] == 1:
        return samples[0].copy()
    return samples.mean(axis=0)


def _resample(mono: np.ndarray, from_rate: int, to_rate: int) -> np.ndarray:
    common = gcd(from_rate, to_rate)
    up = to_rate // common
    down = from_rate // common
    return resample_poly(mono, up, down).astype(np.float32)
