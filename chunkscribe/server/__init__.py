"""HTTP API server: FastAPI façade over transcription, analysis, and PDF export."""
