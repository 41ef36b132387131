"""FastAPI application exposing transcription, analysis, and PDF export.

WHY: A browser UI (or curl, or an automation tool) needs an HTTP façade
over the pipeline: upload a recording and get text back, post text and
get a report back, post a report and get a PDF back. FastAPI provides
request validation, multipart parsing, and OpenAPI docs.

HOW: Three thin endpoints over the core: POST /transcribe runs
transcribe_audio() with a TranscriptionClient as the collaborator, POST
/analyze calls AnalysisClient.summarize(), POST /report renders the PDF.
Every PipelineError is turned into a JSON ErrorResponse by a single
exception handler using the error's own http_status and kind.

RULES:
- Upload field name is "audio"; only audio/* content types; max 35 MB,
  checked from the declared size and a bounded read (never buffered whole)
- Client factories are FastAPI dependencies so tests can override them
- A missing API key is a 500 with an actionable message, checked only
  after the request itself has been validated
- Audio preparation runs in a worker thread (see transcribe_audio)
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import asyncio
import datetime as dt
import logging
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Optional

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from chunkscribe import __version__
from chunkscribe.api.analysis import SERVICE_NAME as ANALYSIS_SERVICE
from chunkscribe.api.analysis import AnalysisClient
from chunkscribe.api.client import SERVICE_NAME as TRANSCRIPTION_SERVICE
from chunkscribe.api.client import TranscriptionClient
from chunkscribe.config import (
    CHUNK_DURATION_S,
    CHUNK_MAX_RETRIES,
    CHUNK_PACING_S,
    MAX_UPLOAD_BYTES,
    PORT,
    TARGET_SAMPLE_RATE,
)
from chunkscribe.core.orchestrator import Progress, transcribe_audio
from chunkscribe.errors import PipelineError
from chunkscribe.report.pdf import render_report
from chunkscribe.server.models import (
    AnalysisResponse,
    AnalyzeRequest,
    ErrorResponse,
    HealthResponse,
    ReportRequest,
    TranscriptionResponse,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="chunkscribe API",
    description=(
        "Transcribe audio recordings of any length with Whisper (split into "
        "bounded chunks and transcribed in order), summarize transcripts into "
        "French business reports with Gemini, and export reports as PDF."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


@dataclass
class PipelineOptions:
    """Tunables passed through to transcribe_audio()."""

    sample_rate: int = TARGET_SAMPLE_RATE
    chunk_duration_s: float = CHUNK_DURATION_S
    pacing_s: float = CHUNK_PACING_S
    max_retries: int = CHUNK_MAX_RETRIES
    max_upload_bytes: int = MAX_UPLOAD_BYTES


def get_pipeline_options() -> PipelineOptions:
    return PipelineOptions()


def get_transcription_client_factory() -> Callable[[], Any]:
    """Return a zero-arg factory producing an async-context transcription client."""
    return TranscriptionClient


def get_analysis_client_factory() -> Callable[[], Any]:
    return AnalysisClient


def _build_client(factory: Callable[[], Any]) -> Any:
    try:
        return factory()
    except ValueError as exc:
        # Missing or placeholder API key
        raise HTTPException(status_code=500, detail=str(exc))


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    logger.error("%s failed (%s): %s", request.url.path, exc.kind, exc, exc_info=exc)
    body = ErrorResponse(
        detail=str(exc),
        kind=exc.kind,
        chunk_index=getattr(exc, "chunk_index", None),
    )
    return JSONResponse(status_code=exc.http_status, content=body.model_dump())


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness check for load balancers and the UI.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        message="Server is running",
        timestamp=dt.datetime.now(dt.timezone.utc).isoformat(),
        version=__version__,
    )


@app.post(
    "/transcribe",
    response_model=TranscriptionResponse,
    tags=["transcription"],
    summary="Transcribe an audio recording",
    description=(
        "Upload an audio file as multipart field 'audio'. The recording is "
        "decoded, converted to 16 kHz mono, split into chunks of at most "
        "120 s, and transcribed chunk by chunk in order."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Missing, non-audio, or silent upload"},
        401: {"model": ErrorResponse, "description": "Invalid transcription API key"},
        413: {"model": ErrorResponse, "description": "Upload or chunk too large"},
        422: {"model": ErrorResponse, "description": "Audio could not be decoded"},
        429: {"model": ErrorResponse, "description": "Transcription rate limit hit"},
        500: {"model": ErrorResponse, "description": "Missing API key or service failure"},
    },
)
async def transcribe(
    audio: Annotated[
        Optional[UploadFile],
        File(description="Audio file to transcribe (MP3, WAV, M4A, ...)."),
    ] = None,
    options: PipelineOptions = Depends(get_pipeline_options),
    client_factory: Callable[[], Any] = Depends(get_transcription_client_factory),
) -> TranscriptionResponse:
    if audio is None:
        raise HTTPException(status_code=400, detail="No audio file provided")
    if not (audio.content_type or "").startswith("audio/"):
        raise HTTPException(status_code=400, detail="Only audio files are allowed")

    too_large = HTTPException(
        status_code=413,
        detail="Audio file too large (max {} MB)".format(
            options.max_upload_bytes // (1024 * 1024)
        ),
    )
    if audio.size is not None and audio.size > options.max_upload_bytes:
        raise too_large
    # One byte past the limit is enough to tell an oversized upload apart
    content = await audio.read(options.max_upload_bytes + 1)
    if len(content) > options.max_upload_bytes:
        raise too_large
    filename = audio.filename or "audio"
    logger.info("Processing audio: %s (%.2fMB)", filename, len(content) / 1024 / 1024)

    client = _build_client(client_factory)
    chunk_count = 0

    def _track(progress: Progress) -> None:
        nonlocal chunk_count
        chunk_count = progress.total
        logger.debug("%s: %d/%d chunks (%d%%)", filename, progress.current,
                     progress.total, progress.percentage)

    async with client:
        text = await transcribe_audio(
            content,
            client.transcribe,
            filename=filename,
            sample_rate=options.sample_rate,
            chunk_duration_s=options.chunk_duration_s,
            pacing_s=options.pacing_s,
            on_progress=_track,
            max_retries=options.max_retries,
            max_chunk_bytes=options.max_upload_bytes,
        )

    return TranscriptionResponse(
        text=text,
        service=TRANSCRIPTION_SERVICE,
        characters=len(text),
        chunks=chunk_count,
    )


@app.post(
    "/analyze",
    response_model=AnalysisResponse,
    tags=["analysis"],
    summary="Generate a business report from a transcript",
    responses={
        400: {"model": ErrorResponse, "description": "No text provided"},
        401: {"model": ErrorResponse, "description": "Invalid Gemini API key"},
        429: {"model": ErrorResponse, "description": "Gemini rate limit hit"},
        500: {"model": ErrorResponse, "description": "Missing API key or model failure"},
    },
)
async def analyze(
    body: AnalyzeRequest,
    client_factory: Callable[[], Any] = Depends(get_analysis_client_factory),
) -> AnalysisResponse:
    if not body.text.strip():
        raise HTTPException(status_code=400, detail="No text provided for analysis")

    client = _build_client(client_factory)
    analysis = await client.summarize(body.text)
    return AnalysisResponse(
        analysis=analysis,
        service=ANALYSIS_SERVICE,
        characters=len(analysis),
    )


@app.post(
    "/report",
    tags=["analysis"],
    summary="Render a report as PDF",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "PDF document"},
        400: {"model": ErrorResponse, "description": "No analysis provided"},
    },
)
async def export_report(body: ReportRequest) -> Response:
    if not body.analysis.strip():
        raise HTTPException(
            status_code=400,
            detail="No analysis to export. Please analyze the text first.",
        )
    report = await asyncio.to_thread(render_report, body.analysis)
    return Response(
        content=report.content,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(report.filename)},
    )


def run_api() -> None:
    """Entry point for the chunkscribe-api console script."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=PORT)
