"""Transcript summarization into a French business report via Gemini.

WHY: A raw meeting transcript is long and unstructured. The report step
asks a language model to restructure it into fixed sections (overview,
context, pain points, expectations, tasks, recommendations) that a
consultant can hand to a client.

HOW: Wraps google-generativeai. The prompt template is a fixed formatting
contract with the model; the transcript is appended verbatim. The async
generate_content_async call keeps the HTTP server's event loop free.

RULES:
- REPORT_PROMPT is passed through unmodified apart from the transcript
- Blank input raises ValueError before any API call
- Invalid key / bad request → AnalysisError(401); quota → AnalysisError(429);
  a blocked or empty response → AnalysisError(500);
  any other Google API failure → AnalysisError(500)
"""

from __future__ import annotations

import logging

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from chunkscribe.config import GEMINI_MODEL, load_gemini_api_key
from chunkscribe.errors import AnalysisError

logger = logging.getLogger(__name__)

SERVICE_NAME = "Google Gemini"

REPORT_PROMPT = """You are a professional Business Analyst. Analyze the following text and create a structured French business report.

Format the report in Markdown with these sections:

# [DATE] [TITLE]

**Date et heure:** [Extract or "À préciser"]
**Lieu:** [Extract or "À préciser"]
**Client:** [Extract or "À préciser"]

## Aperçu
[Brief summary of the project scope and value proposition]

## Contexte
[Background, current situation, timeline, and key stakeholders]

## Points sensibles
[For each problem identified:]
### [Problem Title]
[Description]
- **Impact:** [Consequences]
- **Situation actuelle:** [Current state with examples]
- **Parties prenantes:** [Who is affected]

## Attentes
[For each objective:]
### [Goal Title]
[Description of what needs to be achieved]
- **Objectif/Délai:** [Goal and timeline]
- **Ressources/KPI:** [Tools and success metrics]
- **Parties prenantes:** [Responsible parties]

## Résumé des autres informations
- [Key secondary information as bullet points]

## Listes de tâches
1. [Task] – **Deadline:** [Date] – **Owner:** [Name/Role]

## Suggestion IA
[4-5 strategic recommendations to address the biggest pain points]

---

Text to analyze:

{transcript}"""

_UNAUTHORIZED_ERRORS = (
    google_exceptions.InvalidArgument,
    google_exceptions.PermissionDenied,
    google_exceptions.Unauthenticated,
)


def build_report_prompt(text: str) -> str:
    """Fill the report template with a transcript."""
    return REPORT_PROMPT.format(transcript=text)


class AnalysisClient:
    """Generate structured reports from transcripts with a Gemini model."""

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        genai.configure(api_key=api_key or load_gemini_api_key())
        self.model_name = model or GEMINI_MODEL
        self._model = genai.GenerativeModel(self.model_name)

    async def summarize(self, text: str) -> str:
        """Return the Markdown report for ``text``.

        Raises:
            ValueError: If ``text`` is blank.
            AnalysisError: If the model call fails.
        """
        if not text or not text.strip():
            raise ValueError("No text provided for analysis")

        logger.info("Analyzing text: %d characters with %s", len(text), self.model_name)
        try:
            response = await self._model.generate_content_async(build_report_prompt(text))
            # .text raises ValueError when the prompt was blocked or no candidate came back
            analysis = response.text
        except _UNAUTHORIZED_ERRORS as exc:
            raise AnalysisError("Invalid Gemini API key", status_code=401) from exc
        except google_exceptions.ResourceExhausted as exc:
            raise AnalysisError(
                "Rate limit exceeded. Please wait a moment.", status_code=429
            ) from exc
        except google_exceptions.GoogleAPIError as exc:
            raise AnalysisError("Analysis failed: {}".format(exc)) from exc
        except ValueError as exc:
            raise AnalysisError(
                "The model returned no report (response blocked or empty)", status_code=500
            ) from exc

        logger.info("Analysis complete: %d characters", len(analysis))
        return analysis
