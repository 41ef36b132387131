"""Command-line interface for chunked transcription and report export.

WHY: Users need a simple way to transcribe long recordings from the
terminal without running the HTTP server. The CLI wires together the
full pipeline (file validation, audio preparation, the chunk loop against
the transcription API, optional analysis, optional PDF) behind one command.

HOW: Uses argparse for the input file and pipeline knobs, and runs the
async pipeline via asyncio.run(). A TranscriptionSession holds the state
the user sees; the orchestrator updates its progress through the
callback and a status line is printed for each update. Status goes to
stderr; output files are written next to the source (or to --output-dir).

RULES:
- Positional argument: input audio file path (optional only with --check-key)
- Validates the file is audio before any API call
- Writes {stem}-transcript.txt; with --analyze also {stem}-report.md;
  with --pdf also business-report-YYYY-MM-DD.pdf
- Status output goes to stderr (not stdout)
- Exit codes: 0 success, 1 error, 130 cancelled
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from chunkscribe.api.analysis import AnalysisClient
from chunkscribe.api.client import TranscriptionClient
from chunkscribe.config import (
    CHUNK_DURATION_S,
    CHUNK_MAX_RETRIES,
    CHUNK_PACING_S,
    TARGET_SAMPLE_RATE,
)
from chunkscribe.core.orchestrator import Progress, transcribe_audio
from chunkscribe.core.session import TranscriptionSession
from chunkscribe.errors import PipelineError
from chunkscribe.report.pdf import render_report

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _progress_printer(session: TranscriptionSession):
    def _on_progress(progress: Progress) -> None:
        session.on_progress(progress)
        if progress.total:
            _status("  Transcribed {}/{} chunk(s) ({}%)".format(
                progress.current, progress.total, progress.percentage
            ))
    return _on_progress


async def _check_key() -> None:
    """Verify the transcription API key by listing models."""
    _status("Testing transcription API key...")
    async with TranscriptionClient() as client:
        models = await client.list_models()
    _status("API key is valid. {} model(s) available.".format(len(models)))
    whisper = [m.id for m in models if "whisper" in m.id]
    if whisper:
        _status("Whisper model(s): {}".format(", ".join(whisper)))
    else:
        _status("Warning: no Whisper model visible to this key.")


async def _run_pipeline(args: argparse.Namespace, session: TranscriptionSession) -> List[Path]:
    """Transcribe, then optionally analyze and export. Returns written files.

    RULES:
    - A file must already be selected on the session
    - Output directory must exist
    - Both API keys are checked before the first chunk is sent
    - The session holds text/analysis/error; nothing else is shared
    - Progress is reset once transcription ends, success or failure
    """
    input_path = session.file
    if input_path is None:
        raise ValueError("No audio file selected")
    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        raise ValueError("Output directory does not exist: {}".format(output_dir))

    analyzer = AnalysisClient() if (args.analyze or args.pdf) else None

    data = input_path.read_bytes()
    _status("Processing audio: {} ({:.2f}MB)".format(input_path.name, len(data) / 1024 / 1024))

    session.begin_transcription()
    try:
        async with TranscriptionClient() as client:
            text = await transcribe_audio(
                data,
                client.transcribe,
                filename=input_path.name,
                sample_rate=args.sample_rate,
                chunk_duration_s=args.chunk_seconds,
                pacing_s=args.pacing,
                on_progress=_progress_printer(session),
                max_retries=args.retries,
            )
    except PipelineError as exc:
        session.finish(error=str(exc))
        raise
    finally:
        session.reset_progress()
    session.finish(text=text)
    _status("Transcription complete: {} characters".format(len(text)))

    written: List[Path] = []
    transcript_path = output_dir / "{}-transcript.txt".format(input_path.stem)
    transcript_path.write_text(session.text + "\n", encoding="utf-8")
    written.append(transcript_path)

    if analyzer is not None:
        _status("Generating report...")
        session.analysis = await analyzer.summarize(session.text)
        report_path = output_dir / "{}-report.md".format(input_path.stem)
        report_path.write_text(session.analysis, encoding="utf-8")
        written.append(report_path)

    if args.pdf:
        _status("Rendering PDF...")
        report = render_report(session.analysis)
        pdf_path = output_dir / report.filename
        pdf_path.write_bytes(report.content)
        written.append(pdf_path)
        _status("  {} page(s)".format(report.page_count))

    return written


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="chunkscribe",
        description="Transcribe audio recordings of any length with Whisper, "
                    "optionally summarizing them into a business report (Markdown/PDF).",
    )
    parser.add_argument(
        "input_file",
        nargs="?",
        help="Path to the audio file to transcribe.",
    )
    parser.add_argument(
        "--analyze",
        action="store_true",
        help="Also generate a Markdown business report with Gemini.",
    )
    parser.add_argument(
        "--pdf",
        action="store_true",
        help="Also export the report as PDF (implies --analyze).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )
    parser.add_argument(
        "--chunk-seconds",
        type=float,
        default=CHUNK_DURATION_S,
        help="Maximum chunk duration in seconds (default: %(default)s).",
    )
    parser.add_argument(
        "--sample-rate",
        type=int,
        default=TARGET_SAMPLE_RATE,
        help="Resample audio to this rate before chunking (default: %(default)s).",
    )
    parser.add_argument(
        "--pacing",
        type=float,
        default=CHUNK_PACING_S,
        help="Seconds to wait between chunk requests (default: %(default)s).",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=CHUNK_MAX_RETRIES,
        help="Retries per chunk on rate-limit responses (default: %(default)s).",
    )
    parser.add_argument(
        "--check-key",
        action="store_true",
        help="Verify the transcription API key and exit.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m chunkscribe`` and the console script.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        if args.check_key:
            asyncio.run(_check_key())
            return
        if not args.input_file:
            parser.error("input_file is required unless --check-key is given")

        session = TranscriptionSession()
        input_path = Path(args.input_file).resolve()
        if not input_path.is_file():
            raise ValueError("File not found: {}".format(input_path))
        session.select_file(input_path)

        written = asyncio.run(_run_pipeline(args, session))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except (PipelineError, ValueError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    _status("")
    _status("Done! Saved {} file(s):".format(len(written)))
    for path in written:
        _status("  {}".format(path))


if __name__ == "__main__":
    main()
