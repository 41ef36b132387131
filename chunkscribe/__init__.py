"""chunkscribe: chunked speech-to-text with optional business-report summaries.

WHY: Hosted Whisper endpoints reject requests above a size ceiling, while
real recordings (meetings, interviews, calls) routinely run for an hour or
more. This package turns a recording of any length into a transcript by
preparing bounded, self-contained WAV chunks and transcribing them in order,
then optionally summarizes the transcript into a structured report.

HOW: Four stages: audio preparation (decode, downmix/resample, split,
encode), sequential chunk orchestration against the transcription API,
summarization via a language model, and PDF rendering of the report. Each
stage is independently testable.

RULES:
- Chunks are always transcribed one at a time, in index order
- Every pipeline failure is a typed PipelineError with a machine-checkable kind
- The core pipeline never owns caller state; progress flows out via callback
"""

__version__ = "0.1.0"
