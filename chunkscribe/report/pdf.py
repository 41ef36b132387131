"""Paginated PDF rendering of Markdown business reports.

WHY: The report is shared with clients as a document, not as Markdown.
Only a handful of line conventions matter (headings, bullets, numbered
tasks, bold markers), so a line-walking renderer is enough; no Markdown
parser is needed.

HOW: Each source line is classified by its prefix, given a font size and
weight, wrapped to the printable width with fpdf2's dry-run line
splitter, and drawn line by line at an explicit baseline. The cursor
starts a new page when it passes the bottom margin.

RULES:
- A4 portrait, millimetres, 20 mm margins, Helvetica core font
- "# " 18pt bold, "## " 14pt bold, "### " 12pt bold; 12/10/8 mm per line
- "- " / "* " bullets, "N. " items, and plain text: 10pt, 6 mm per line
- "**" markers are removed from plain text; blank lines add 4 mm
- Text outside Latin-1 is transliterated or replaced (core-font limit)
"""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from fpdf import FPDF
from fpdf.enums import MethodReturnValue

MARGIN_MM = 20.0
FONT_FAMILY = "helvetica"

_NUMBERED = re.compile(r"^\d+\. ")

# style key -> (font size pt, bold, line advance mm)
_STYLES = {
    "h1": (18, True, 12.0),
    "h2": (14, True, 10.0),
    "h3": (12, True, 8.0),
    "bullet": (10, False, 6.0),
    "numbered": (10, False, 6.0),
    "text": (10, False, 6.0),
}
_BLANK_ADVANCE_MM = 4.0

_TRANSLITERATIONS = {
    "•": "-",
    "–": "-",
    "—": "-",
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "…": "...",
    " ": " ",
}


@dataclass
class PlacedLine:
    """One line of text as drawn: page number (1-based), baseline, style."""

    page: int
    y: float
    style: str
    text: str


@dataclass
class RenderedReport:
    content: bytes
    page_count: int
    filename: str
    lines: List[PlacedLine] = field(default_factory=list)


def classify_line(line: str) -> Tuple[Optional[str], str]:
    """Return (style, display text) for one Markdown line; style None = blank."""
    if line.startswith("# "):
        return "h1", line[2:]
    if line.startswith("## "):
        return "h2", line[3:]
    if line.startswith("### "):
        return "h3", line[4:]
    if line.startswith("- ") or line.startswith("* "):
        return "bullet", "  - " + line[2:]
    if _NUMBERED.match(line):
        return "numbered", line
    if line.strip():
        return "text", line.replace("**", "")
    return None, ""


def to_latin1(text: str) -> str:
    """Map text onto what the PDF core fonts can encode."""
    for char, replacement in _TRANSLITERATIONS.items():
        text = text.replace(char, replacement)
    return text.encode("latin-1", errors="replace").decode("latin-1")


def report_filename(today: Optional[dt.date] = None) -> str:
    return "business-report-{}.pdf".format((today or dt.date.today()).isoformat())


class ReportRenderer:
    """Walks a Markdown report and lays it out onto PDF pages."""

    def __init__(self, margin_mm: float = MARGIN_MM) -> None:
        self.margin = margin_mm

    def render(self, markdown: str, today: Optional[dt.date] = None) -> RenderedReport:
        """Render ``markdown`` to PDF bytes.

        Raises:
            ValueError: If the report is empty or blank.
        """
        if not markdown or not markdown.strip():
            raise ValueError("No analysis to export")

        pdf = FPDF(orientation="portrait", unit="mm", format="A4")
        pdf.set_auto_page_break(auto=False)
        pdf.add_page()
        max_width = pdf.w - 2 * self.margin
        bottom = pdf.h - self.margin
        y = self.margin
        placed: List[PlacedLine] = []

        for raw_line in markdown.split("\n"):
            style, text = classify_line(raw_line.rstrip("\r"))
            if style is None:
                y += _BLANK_ADVANCE_MM
                continue

            size, bold, advance = _STYLES[style]
            pdf.set_font(FONT_FAMILY, style="B" if bold else "", size=size)
            wrapped = pdf.multi_cell(
                max_width,
                advance,
                to_latin1(text),
                dry_run=True,
                output=MethodReturnValue.LINES,
            )
            for part in wrapped:
                if y > bottom:
                    pdf.add_page()
                    y = self.margin
                pdf.text(self.margin, y, part)
                placed.append(PlacedLine(page=pdf.page_no(), y=y, style=style, text=part))
                y += advance

        return RenderedReport(
            content=bytes(pdf.output()),
            page_count=pdf.page_no(),
            filename=report_filename(today),
            lines=placed,
        )


def render_report(markdown: str, today: Optional[dt.date] = None) -> RenderedReport:
    """Render a Markdown report with the default layout."""
    return ReportRenderer().render(markdown, today=today)
