"""Decode → downmix/resample → split, as one call.

WHY: Every caller (CLI, HTTP API) prepares audio the same way before the
network loop starts. Keeping the three CPU-bound steps together lets the
async layer push them into a worker thread with a single to_thread call.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from chunkscribe.audio.decoder import decode_audio
from chunkscribe.audio.pcm import Chunk
from chunkscribe.audio.resampler import to_mono
from chunkscribe.audio.splitter import split_chunks
from chunkscribe.config import CHUNK_DURATION_S, TARGET_SAMPLE_RATE

logger = logging.getLogger(__name__)


def prepare_chunks(
    data: bytes,
    filename: Optional[str] = None,
    *,
    sample_rate: int = TARGET_SAMPLE_RATE,
    chunk_duration_s: float = CHUNK_DURATION_S,
) -> List[Chunk]:
    """Turn raw audio bytes into mono, resampled, bounded-duration chunks."""
    source = decode_audio(data, filename)
    logger.info(
        "Decoded %s: %.1fs, %d Hz, %d channel(s)",
        filename or "audio", source.duration_s, source.sample_rate, source.channel_count,
    )
    mono = to_mono(source, sample_rate)
    chunks = split_chunks(mono, chunk_duration_s)
    logger.info(
        "Prepared %d chunk(s) of up to %.0fs at %d Hz mono",
        len(chunks), chunk_duration_s, sample_rate,
    )
    return chunks
