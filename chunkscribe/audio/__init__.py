"""Audio preparation package: decode, downmix/resample, split, encode.

WHY: Hosted transcription accepts bounded requests only. This package turns
any recording into an ordered list of small, self-contained WAV payloads.

HOW: Four single-purpose modules (decoder, resampler, splitter, wav) plus
prepare.py, which chains the first three. All stages exchange PCMBuffer
objects defined in pcm.py.

RULES:
- Everything here is synchronous and CPU-bound; async callers use to_thread
- No stage mutates its input buffer
"""

from chunkscribe.audio.decoder import decode_audio
from chunkscribe.audio.pcm import Chunk, PCMBuffer
from chunkscribe.audio.prepare import prepare_chunks
from chunkscribe.audio.resampler import to_mono
from chunkscribe.audio.splitter import split_chunks
from chunkscribe.audio.wav import WAV_MIME_TYPE, encode_wav, read_wav_header

__all__ = [
    "Chunk",
    "PCMBuffer",
    "WAV_MIME_TYPE",
    "decode_audio",
    "encode_wav",
    "prepare_chunks",
    "read_wav_header",
    "split_chunks",
    "to_mono",
]
