"""Tests for AnalysisClient with a fake Gemini model.

HOW: genai.configure and genai.GenerativeModel are monkeypatched so no
request leaves the process. The fake records the prompt it was given.
"""

from __future__ import annotations

import asyncio

import pytest
from google.api_core import exceptions as google_exceptions

from chunkscribe.api import analysis
from chunkscribe.api.analysis import REPORT_PROMPT, AnalysisClient, build_report_prompt
from chunkscribe.errors import AnalysisError


class FakeResponse:
    def __init__(self, text):
        self.text = text


class BlockedResponse:
    """Mimics a response whose prompt was blocked: no candidates, no text."""

    @property
    def text(self):
        raise ValueError(
            "Invalid operation: The `response.parts` quick accessor requires a single candidate"
        )


class FakeModel:
    """Stands in for genai.GenerativeModel."""

    instances = []

    def __init__(self, model_name):
        self.model_name = model_name
        self.prompts = []
        self.result = FakeResponse("# Rapport\n\n## Aperçu\nTout va bien.")
        FakeModel.instances.append(self)

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


@pytest.fixture
def fake_genai(monkeypatch):
    configured = {}
    FakeModel.instances = []
    monkeypatch.setattr(analysis.genai, "configure", lambda **kw: configured.update(kw))
    monkeypatch.setattr(analysis.genai, "GenerativeModel", FakeModel)
    return configured


class TestSummarize:

    def test_returns_model_text(self, fake_genai):
        client = AnalysisClient()
        report = asyncio.run(client.summarize("On a parlé du budget."))
        assert report.startswith("# Rapport")
        assert fake_genai == {"api_key": "gemini_test_key"}
        assert FakeModel.instances[0].model_name == "gemini-1.5-flash-8b"

    def test_prompt_ends_with_transcript(self, fake_genai):
        client = AnalysisClient(model="gemini-test")
        asyncio.run(client.summarize("Transcript body here."))
        prompt = FakeModel.instances[0].prompts[0]
        assert prompt.endswith("Text to analyze:\n\nTranscript body here.")
        assert "## Points sensibles" in prompt
        assert "## Suggestion IA" in prompt

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_text_rejected_before_call(self, fake_genai, text):
        client = AnalysisClient()
        with pytest.raises(ValueError, match="No text provided"):
            asyncio.run(client.summarize(text))
        assert FakeModel.instances[0].prompts == []

    @pytest.mark.parametrize(
        "exc, status",
        [
            (google_exceptions.PermissionDenied("API key not valid"), 401),
            (google_exceptions.InvalidArgument("API key not valid"), 401),
            (google_exceptions.ResourceExhausted("quota"), 429),
            (google_exceptions.InternalServerError("oops"), 500),
        ],
    )
    def test_google_errors_mapped(self, fake_genai, exc, status):
        client = AnalysisClient()
        FakeModel.instances[0].result = exc
        with pytest.raises(AnalysisError) as exc_info:
            asyncio.run(client.summarize("some text"))
        assert exc_info.value.http_status == status
        assert exc_info.value.kind == "analysis"

    def test_blocked_response_is_analysis_error(self, fake_genai):
        client = AnalysisClient()
        FakeModel.instances[0].result = BlockedResponse()
        with pytest.raises(AnalysisError, match="blocked or empty") as exc_info:
            asyncio.run(client.summarize("some text"))
        assert exc_info.value.http_status == 500
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_missing_key(self, fake_genai, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            AnalysisClient()


class TestPrompt:

    def test_template_has_single_placeholder(self):
        assert REPORT_PROMPT.count("{transcript}") == 1

    def test_build_report_prompt(self):
        assert build_report_prompt("xyz").endswith("xyz")
