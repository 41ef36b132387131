"""Tests for the Markdown-to-PDF report renderer.

WHY: The PDF layout is a contract with the people reading the report:
headings stand out, bullets are indented, and no line is ever drawn
below the bottom margin.

HOW: RenderedReport.lines records where every line was drawn, so
pagination is asserted on coordinates instead of by parsing the PDF.
"""

from __future__ import annotations

import datetime as dt

import pytest

from chunkscribe.report.pdf import (
    MARGIN_MM,
    classify_line,
    render_report,
    report_filename,
    to_latin1,
)

A4_HEIGHT_MM = 297.0

SAMPLE_REPORT = """# 2024-05-02 Atelier de cadrage

**Date et heure:** 2 mai 2024
**Client:** ACME

## Aperçu
Refonte du portail client.

## Points sensibles
### Délais de traitement
- **Impact:** clients mécontents
* Situation actuelle: 3 semaines

## Listes de tâches
1. Cartographier les flux – **Deadline:** juin – **Owner:** PMO
"""


class TestClassifyLine:

    @pytest.mark.parametrize(
        "line, style, text",
        [
            ("# Title", "h1", "Title"),
            ("## Section", "h2", "Section"),
            ("### Sub", "h3", "Sub"),
            ("- item", "bullet", "  - item"),
            ("* item", "bullet", "  - item"),
            ("12. Do it", "numbered", "12. Do it"),
            ("**Lieu:** Paris", "text", "Lieu: Paris"),
            ("#NoSpace", "text", "#NoSpace"),
            ("", None, ""),
            ("   ", None, ""),
        ],
    )
    def test_styles(self, line, style, text):
        assert classify_line(line) == (style, text)


class TestRender:

    def test_pdf_bytes_and_filename(self):
        report = render_report(SAMPLE_REPORT, today=dt.date(2024, 5, 2))
        assert report.content.startswith(b"%PDF")
        assert report.page_count == 1
        assert report.filename == "business-report-2024-05-02.pdf"

    def test_first_line_at_top_margin(self):
        report = render_report(SAMPLE_REPORT)
        first = report.lines[0]
        assert first.page == 1
        assert first.y == pytest.approx(MARGIN_MM)
        assert first.style == "h1"

    def test_line_advances(self):
        report = render_report("# A\n## B\n### C\nplain\n- bullet")
        ys = [line.y for line in report.lines]
        steps = [round(b - a, 6) for a, b in zip(ys, ys[1:])]
        assert steps == [12.0, 10.0, 8.0, 6.0]

    def test_blank_line_advance(self):
        report = render_report("one\n\ntwo")
        assert report.lines[1].y - report.lines[0].y == pytest.approx(6.0 + 4.0)

    def test_pagination_keeps_lines_inside_margins(self):
        markdown = "\n".join("- point numéro {}".format(i) for i in range(120))
        report = render_report(markdown)
        assert report.page_count >= 3
        assert all(MARGIN_MM <= line.y <= A4_HEIGHT_MM - MARGIN_MM for line in report.lines)
        pages = [line.page for line in report.lines]
        assert pages == sorted(pages)
        assert pages[-1] == report.page_count
        # each new page starts at the top margin
        for prev, nxt in zip(report.lines, report.lines[1:]):
            if nxt.page != prev.page:
                assert nxt.y == pytest.approx(MARGIN_MM)

    def test_long_line_wraps(self):
        report = render_report("mot " * 200)
        assert len(report.lines) > 1
        assert {line.style for line in report.lines} == {"text"}

    @pytest.mark.parametrize("markdown", ["", "  \n\n "])
    def test_blank_report_rejected(self, markdown):
        with pytest.raises(ValueError, match="No analysis"):
            render_report(markdown)


class TestHelpers:

    def test_to_latin1_transliterates(self):
        assert to_latin1("café – “ok” • fin…") == 'café - "ok" - fin...'

    def test_to_latin1_replaces_unencodable(self):
        assert to_latin1("ok 🎉") == "ok ?"

    def test_report_filename(self):
        assert report_filename(dt.date(2025, 1, 9)) == "business-report-2025-01-09.pdf"
