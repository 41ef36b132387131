"""Split a long PCM buffer into bounded-duration chunks.

WHY: The transcription service caps request size. Cutting the source into
fixed windows keeps every request under that cap no matter how long the
recording is.

HOW: Integer frame arithmetic: the window is round(max_duration_s * rate)
frames and the chunk count is the ceiling of frames / window. Each chunk
is a slice of the source array, so splitting copies no audio.

RULES:
- Chunks are contiguous, non-overlapping, and cover the source exactly once
- Only the last chunk may be shorter than the window
- A source no longer than the window yields one chunk wrapping the very
  same buffer object; the caller never needs a special case
- An empty source raises SplitError
"""

from __future__ import annotations

from typing import List

from chunkscribe.audio.pcm import Chunk, PCMBuffer
from chunkscribe.config import CHUNK_DURATION_S
from chunkscribe.errors import SplitError


def split_chunks(
    buffer: PCMBuffer,
    max_duration_s: float = CHUNK_DURATION_S,
) -> List[Chunk]:
    """Divide ``buffer`` into an ordered list of chunks.

    Raises:
        SplitError: If the buffer has no frames or no channels.
        ValueError: If max_duration_s is not positive.
    """
    if max_duration_s <= 0:
        raise ValueError("max_duration_s must be positive, got {}".format(max_duration_s))
    total = buffer.frame_count
    if total == 0 or buffer.channel_count == 0:
        raise SplitError("Cannot split an empty audio buffer")

    window = max(1, int(round(max_duration_s * buffer.sample_rate)))
    if total <= window:
        return [Chunk(index=0, start_frame=0, end_frame=total, buffer=buffer)]

    count = -(-total // window)
    chunks: List[Chunk] = []
    for index in range(count):
        start = index * window
        end = min(start + window, total)
        chunks.append(Chunk(
            index=index,
            start_frame=start,
            end_frame=end,
            buffer=PCMBuffer(
                sample_rate=buffer.sample_rate,
                samples=buffer.samples[:, start:end],
            ),
        ))
    return chunks
