"""PCM buffer and chunk dataclasses shared by every audio stage.

WHY: The decoder, resampler, splitter, and encoder all pass audio around.
A single typed container with an explicit sample rate avoids the classic
bug of a bare ndarray whose rate lives in some other variable.

HOW: PCMBuffer wraps a 2-D float32 array of shape (channels, frames).
Storing all channels in one array makes the equal-length invariant
structural. Chunk tags a PCMBuffer with its position in the source.

RULES:
- samples are float32, nominal range [-1, 1], shape (channels, frames)
- Stages return new buffers; nothing mutates a buffer in place
- duration_s is derived: frame_count / sample_rate (0.0 for a bad rate)
- Chunk.start_frame / end_frame are offsets into the source (end exclusive)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass(frozen=True, eq=False)
class PCMBuffer:
    """Decoded audio: a sample rate plus per-channel float samples."""

    sample_rate: int
    samples: np.ndarray

    def __post_init__(self) -> None:
        arr = np.asarray(self.samples, dtype=np.float32)
        if arr.ndim == 1:
            arr = arr[np.newaxis, :]
        if arr.ndim != 2:
            raise ValueError(
                "samples must have shape (channels, frames), got {}".format(arr.shape)
            )
        object.__setattr__(self, "samples", arr)

    @classmethod
    def from_channels(
        cls, sample_rate: int, channels: Sequence[Sequence[float]]
    ) -> PCMBuffer:
        """Build a buffer from a list of per-channel sample sequences.

        Raises:
            ValueError: If the channels differ in length.
        """
        lengths = {len(ch) for ch in channels}
        if len(lengths) > 1:
            raise ValueError(
                "All channels must have equal length, got {}".format(sorted(lengths))
            )
        frames = lengths.pop() if lengths else 0
        arr = np.array(channels, dtype=np.float32).reshape(len(channels), frames)
        return cls(sample_rate=sample_rate, samples=arr)

    @property
    def channel_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def frame_count(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration_s(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.frame_count / self.sample_rate

    def channel(self, index: int) -> np.ndarray:
        return self.samples[index]


@dataclass(frozen=True, eq=False)
class Chunk:
    """A contiguous time window of a source buffer.

    RULES:
    - index is 0-based and defines reassembly order
    - buffer.frame_count == end_frame - start_frame
    """

    index: int
    start_frame: int
    end_frame: int
    buffer: PCMBuffer

    @property
    def duration_s(self) -> float:
        return self.buffer.duration_s
