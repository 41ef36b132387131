"""Async HTTP client for the Groq (OpenAI-compatible) Whisper API.

WHY: The orchestrator needs a ``transcribe(bytes, filename, mime) -> text``
collaborator. This module wraps the remote endpoint behind that exact
signature, so the chunk loop never sees HTTP details and tests can swap
in a plain async function.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. TranscriptionClient is
an async context manager: enter it to get an authenticated client, exit
to close the connection pool. transcribe() posts one multipart request;
non-2xx responses are mapped to typed errors by errors.error_for_status.

RULES:
- Always use the async context manager (async with TranscriptionClient() as c:)
- The audio bytes are sent unmodified as the ``file`` part
- Default model is whisper-large-v3 with response_format=json
- 401 / 413 / 429 / other map to Unauthorized / PayloadTooLarge /
  RateLimited / UnknownTranscriptionError; transport errors map to Unknown
- ``transport`` exists for tests (httpx.MockTransport)
"""

from __future__ import annotations

import logging

import httpx

from chunkscribe.api.models import ModelInfo, TranscriptionResult
from chunkscribe.config import GROQ_BASE_URL, GROQ_MODEL, load_groq_api_key
from chunkscribe.errors import UnknownTranscriptionError, error_for_status

logger = logging.getLogger(__name__)

SERVICE_NAME = "Groq Whisper"


class TranscriptionClient:
    """Async client for the ``/audio/transcriptions`` endpoint.

    RULES:
    - api_key defaults to load_groq_api_key() from .env
    - base_url defaults to GROQ_BASE_URL from config
    - model defaults to GROQ_MODEL from config
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or load_groq_api_key()
        self._base_url = (base_url or GROQ_BASE_URL).rstrip("/")
        self._model = model or GROQ_MODEL
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> TranscriptionClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=httpx.Timeout(300.0, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "TranscriptionClient must be used as an async context manager: "
                "async with TranscriptionClient() as client: ..."
            )
        return self._client

    async def transcribe(
        self,
        audio: bytes,
        filename: str = "audio.wav",
        mime_type: str = "audio/wav",
    ) -> str:
        """Transcribe one audio payload and return its stripped text.

        WHY: This is the per-chunk collaborator the orchestrator calls.

        HOW: Sends a multipart/form-data POST with the audio as ``file``
        plus ``model`` and ``response_format`` form fields.

        Returns:
            The transcript text, possibly "" for silent audio.

        Raises:
            TranscriptionRequestError: A subclass matching the failure cause.
        """
        client = self._ensure_client()
        try:
            resp = await client.post(
                "/audio/transcriptions",
                files={"file": (filename, audio, mime_type)},
                data={"model": self._model, "response_format": "json"},
            )
        except httpx.HTTPError as exc:
            raise UnknownTranscriptionError(
                "Transcription request failed: {}".format(exc)
            ) from exc

        if resp.status_code != 200:
            logger.warning(
                "Transcription API returned %d for %s", resp.status_code, filename
            )
            raise error_for_status(resp.status_code, resp.text)

        return TranscriptionResult.from_dict(resp.json()).text

    async def list_models(self) -> list[ModelInfo]:
        """Return the models visible to this API key.

        WHY: The cheapest authenticated call; used to verify a key before
        committing to a long transcription.
        """
        client = self._ensure_client()
        try:
            resp = await client.get("/models")
        except httpx.HTTPError as exc:
            raise UnknownTranscriptionError(
                "Model listing failed: {}".format(exc)
            ) from exc
        if resp.status_code != 200:
            raise error_for_status(resp.status_code, resp.text)
        return [ModelInfo.from_dict(item) for item in resp.json().get("data", [])]
