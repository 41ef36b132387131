"""Tests for TranscriptionClient against a mocked HTTP transport.

WHY: The client is where HTTP status codes become typed errors. Those
errors drive the API's status codes and the CLI's messages, so the
mapping is pinned here.

HOW: httpx.MockTransport answers every request in-process; the handler
records the request so multipart fields and auth headers can be checked.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from chunkscribe.api.client import TranscriptionClient
from chunkscribe.errors import (
    PayloadTooLarge,
    RateLimited,
    TranscriptionRequestError,
    Unauthorized,
    UnknownTranscriptionError,
)


def _client(handler, seen=None):
    def recording_handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return handler(request)

    return TranscriptionClient(
        api_key="gsk_test",
        base_url="https://api.example.test/openai/v1",
        transport=httpx.MockTransport(recording_handler),
    )


def _transcribe(client: TranscriptionClient, audio=b"RIFFdata", filename="audio.wav"):
    async def run():
        async with client:
            return await client.transcribe(audio, filename, "audio/wav")
    return asyncio.run(run())


class TestTranscribe:

    def test_success_returns_stripped_text(self):
        client = _client(lambda r: httpx.Response(200, json={"text": "  Bonjour.  "}))
        assert _transcribe(client) == "Bonjour."

    def test_null_text_is_empty_string(self):
        client = _client(lambda r: httpx.Response(200, json={"text": None}))
        assert _transcribe(client) == ""

    def test_request_shape(self):
        seen = []
        client = _client(lambda r: httpx.Response(200, json={"text": "ok"}), seen)
        _transcribe(client, audio=b"RIFF-chunk-bytes", filename="chunk_3.wav")

        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/openai/v1/audio/transcriptions"
        assert request.headers["Authorization"] == "Bearer gsk_test"
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        body = request.content
        assert b'name="file"; filename="chunk_3.wav"' in body
        assert b"RIFF-chunk-bytes" in body
        assert b'name="model"' in body
        assert b"whisper-large-v3" in body
        assert b'name="response_format"' in body

    @pytest.mark.parametrize(
        "status, error_cls, kind",
        [
            (401, Unauthorized, "unauthorized"),
            (413, PayloadTooLarge, "payload_too_large"),
            (429, RateLimited, "rate_limited"),
            (500, UnknownTranscriptionError, "unknown"),
            (400, UnknownTranscriptionError, "unknown"),
        ],
    )
    def test_status_mapping(self, status, error_cls, kind):
        client = _client(lambda r: httpx.Response(status, text="upstream says no"))
        with pytest.raises(error_cls) as exc_info:
            _transcribe(client)
        assert exc_info.value.status_code == status
        assert exc_info.value.kind == kind
        assert exc_info.value.chunk_index is None

    def test_unknown_error_keeps_body(self):
        client = _client(lambda r: httpx.Response(503, text="maintenance window"))
        with pytest.raises(UnknownTranscriptionError, match="maintenance window"):
            _transcribe(client)

    def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UnknownTranscriptionError) as exc_info:
            _transcribe(_client(handler))
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_requires_context_manager(self):
        client = _client(lambda r: httpx.Response(200, json={"text": "ok"}))
        with pytest.raises(RuntimeError, match="async context manager"):
            asyncio.run(client.transcribe(b"x"))


class TestListModels:

    def test_parses_models(self):
        payload = {"data": [
            {"id": "whisper-large-v3", "owned_by": "OpenAI"},
            {"id": "llama-3.1-8b-instant", "owned_by": "Meta"},
        ]}
        seen = []
        client = _client(lambda r: httpx.Response(200, json=payload), seen)

        async def run():
            async with client:
                return await client.list_models()

        models = asyncio.run(run())
        assert [m.id for m in models] == ["whisper-large-v3", "llama-3.1-8b-instant"]
        assert models[0].owned_by == "OpenAI"
        assert seen[0].url.path == "/openai/v1/models"

    def test_bad_key(self):
        client = _client(lambda r: httpx.Response(401, json={"error": "invalid"}))

        async def run():
            async with client:
                return await client.list_models()

        with pytest.raises(TranscriptionRequestError) as exc_info:
            asyncio.run(run())
        assert isinstance(exc_info.value, Unauthorized)


class TestApiKey:

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("GROQ_API_KEY", raising=False)
        with pytest.raises(ValueError, match="GROQ_API_KEY"):
            TranscriptionClient()

    def test_placeholder_key(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "your_groq_api_key_here")
        with pytest.raises(ValueError, match="console.groq.com"):
            TranscriptionClient()

    def test_env_key_used(self):
        # conftest sets GROQ_API_KEY
        client = TranscriptionClient()
        assert client._api_key == "gsk_test_key"
