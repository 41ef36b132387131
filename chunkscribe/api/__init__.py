"""Remote service clients: Whisper transcription and Gemini analysis.

WHY: The pipeline treats both services as collaborators behind two
operations, transcribe() and summarize(). This package is the only place
that knows their URLs, auth, and error shapes.

HOW: TranscriptionClient wraps httpx.AsyncClient; AnalysisClient wraps
google-generativeai. Both translate service failures into the typed
errors in chunkscribe.errors.

RULES:
- All transcription HTTP calls go through TranscriptionClient
- All language-model calls go through AnalysisClient
"""

from chunkscribe.api.analysis import AnalysisClient
from chunkscribe.api.client import TranscriptionClient
from chunkscribe.api.models import ModelInfo, TranscriptionResult

__all__ = ["AnalysisClient", "ModelInfo", "TranscriptionClient", "TranscriptionResult"]
