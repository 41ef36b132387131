"""Report export: Markdown analysis to paginated PDF."""

from chunkscribe.report.pdf import RenderedReport, ReportRenderer, render_report

__all__ = ["RenderedReport", "ReportRenderer", "render_report"]
