"""Sequential chunk transcription with pacing and progress reporting.

WHY: A long recording becomes N bounded chunks, but the caller wants one
transcript. The chunks must be sent one at a time: the service rate-limits
bursts, and a parallel fan-out would both trip that limit and complicate
ordering. This module is the loop that ties the audio stages to the
transcription collaborator.

HOW: For each chunk in index order: encode to WAV, check it against the
upload budget, await the collaborator, record the text, report progress,
then sleep for the pacing interval (skipped after the last chunk). The
texts are joined with single spaces and trimmed. Ordering is guaranteed by
the loop itself; there is no locking because nothing runs concurrently.

RULES:
- Strictly sequential; one in-flight request at most
- Any chunk failure aborts the run with chunk_index set on the error;
  later chunks are never sent and partial text is discarded
- Non-pipeline exceptions from the collaborator become
  UnknownTranscriptionError (CancelledError is not an Exception and passes)
- Retries (opt-in, max_retries > 0) apply to RateLimited only
- Progress: (0, total) before the first request, then once per chunk
- An empty joined transcript raises EmptyTranscriptError
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Optional

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from chunkscribe.audio.pcm import Chunk
from chunkscribe.audio.prepare import prepare_chunks
from chunkscribe.audio.wav import WAV_MIME_TYPE, encode_wav
from chunkscribe.config import (
    CHUNK_DURATION_S,
    CHUNK_MAX_RETRIES,
    CHUNK_PACING_S,
    MAX_UPLOAD_BYTES,
    TARGET_SAMPLE_RATE,
)
from chunkscribe.errors import (
    EmptyTranscriptError,
    PayloadTooLarge,
    PipelineError,
    RateLimited,
    TranscriptionRequestError,
    UnknownTranscriptionError,
)

logger = logging.getLogger(__name__)

TranscribeFn = Callable[[bytes, str, str], Awaitable[str]]
"""Collaborator signature: (wav_bytes, filename, mime_type) -> text."""

SleepFn = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class Progress:
    """Chunks completed out of chunks total."""

    current: int
    total: int

    @property
    def percentage(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.current / self.total * 100)


ProgressFn = Callable[[Progress], None]


def chunk_filename(chunk: Chunk, total: int) -> str:
    """Upload filename for a chunk: audio.wav when unsplit, chunk_N.wav otherwise."""
    if total == 1:
        return "audio.wav"
    return "chunk_{}.wav".format(chunk.index)


async def transcribe_chunks(
    chunks: Sequence[Chunk],
    transcribe: TranscribeFn,
    *,
    pacing_s: float = CHUNK_PACING_S,
    on_progress: Optional[ProgressFn] = None,
    max_retries: int = CHUNK_MAX_RETRIES,
    max_chunk_bytes: int = MAX_UPLOAD_BYTES,
    sleep: SleepFn = asyncio.sleep,
) -> str:
    """Transcribe chunks one by one and return the joined transcript.

    Args:
        chunks: Chunks in index order, as produced by split_chunks().
        transcribe: Async collaborator taking (bytes, filename, mime type).
        pacing_s: Pause between consecutive requests.
        on_progress: Optional callback receiving a Progress after each chunk.
        max_retries: Extra attempts per chunk on RateLimited (0 = none).
        max_chunk_bytes: Upload ceiling; larger chunks fail before sending.
        sleep: Awaitable sleep, injectable for tests.

    Returns:
        The per-chunk texts joined by single spaces and trimmed.

    Raises:
        ValueError: If chunk indices are not 0..N-1 in order.
        TranscriptionRequestError: From the first failing chunk, with
            chunk_index set.
        EmptyTranscriptError: If no text was recovered at all.
    """
    total = len(chunks)
    for position, chunk in enumerate(chunks):
        if chunk.index != position:
            raise ValueError(
                "Chunks must be in index order: expected {}, got {}".format(
                    position, chunk.index
                )
            )

    if on_progress:
        on_progress(Progress(0, total))

    texts: list[str] = []
    for position, chunk in enumerate(chunks):
        filename = chunk_filename(chunk, total)
        payload = encode_wav(chunk.buffer)
        if len(payload) > max_chunk_bytes:
            raise PayloadTooLarge(
                "Encoded chunk is {:.1f} MB, above the {:.1f} MB upload limit".format(
                    len(payload) / 1024 / 1024, max_chunk_bytes / 1024 / 1024
                ),
                chunk_index=chunk.index,
            )

        logger.info(
            "Transcribing chunk %d/%d (%s, %.1fs)",
            position + 1, total, filename, chunk.duration_s,
        )
        try:
            text = await _transcribe_one(transcribe, payload, filename, max_retries, sleep)
        except TranscriptionRequestError as exc:
            exc.chunk_index = chunk.index
            raise
        except PipelineError:
            raise
        except Exception as exc:
            raise UnknownTranscriptionError(
                "Transcription failed: {}".format(exc), chunk_index=chunk.index
            ) from exc

        texts.append(text or "")
        logger.debug("Chunk %d/%d done: %d characters", position + 1, total, len(texts[-1]))
        if on_progress:
            on_progress(Progress(position + 1, total))

        if position < total - 1:
            await sleep(pacing_s)

    transcript = " ".join(texts).strip()
    if not transcript:
        raise EmptyTranscriptError()
    logger.info("Transcription complete: %d characters", len(transcript))
    return transcript


async def _transcribe_one(
    transcribe: TranscribeFn,
    payload: bytes,
    filename: str,
    max_retries: int,
    sleep: SleepFn,
) -> str:
    if max_retries <= 0:
        return await transcribe(payload, filename, WAV_MIME_TYPE)

    text = ""
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max_retries + 1),
        retry=retry_if_exception_type(RateLimited),
        wait=wait_exponential(multiplier=1, min=1, max=30),
        sleep=sleep,
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    ):
        with attempt:
            text = await transcribe(payload, filename, WAV_MIME_TYPE)
    return text


async def transcribe_audio(
    data: bytes,
    transcribe: TranscribeFn,
    *,
    filename: Optional[str] = None,
    sample_rate: int = TARGET_SAMPLE_RATE,
    chunk_duration_s: float = CHUNK_DURATION_S,
    pacing_s: float = CHUNK_PACING_S,
    on_progress: Optional[ProgressFn] = None,
    max_retries: int = CHUNK_MAX_RETRIES,
    max_chunk_bytes: int = MAX_UPLOAD_BYTES,
    sleep: SleepFn = asyncio.sleep,
) -> str:
    """Run the whole pipeline: prepare chunks off-loop, then transcribe them.

    WHY: The decode/resample/split stages are CPU-bound and would stall
    the event loop (and every other request on an API server) for large
    files. They run in a worker thread; the network loop stays on the loop.

    Independent calls share no state, so two files may be transcribed
    concurrently by running two of these.
    """
    chunks = await asyncio.to_thread(
        prepare_chunks,
        data,
        filename,
        sample_rate=sample_rate,
        chunk_duration_s=chunk_duration_s,
    )
    return await transcribe_chunks(
        chunks,
        transcribe,
        pacing_s=pacing_s,
        on_progress=on_progress,
        max_retries=max_retries,
        max_chunk_bytes=max_chunk_bytes,
        sleep=sleep,
    )
