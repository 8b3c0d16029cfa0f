"""
Tests for the print layout (pdf_layout, pdf_generator).

Tests cover:
- rows per page and page count for long tables
- rows never split across pages, table header repeated on every page
- zebra striping continuous across page breaks
- footer backfill ("Page X of Y") painted exactly once per page
- text sanitizing and truncation
- generate_pdf end to end (%PDF header, logo placeholder)
"""

import math

import pytest

from selfaccounting.schemas.report import ReportData
from selfaccounting.services.report_generator_service.pdf_generator import (
    generate_pdf,
    render_pdf_pages,
)
from selfaccounting.services.report_generator_service.pdf_layout import (
    FooterText,
    PaginationController,
    _sanitize_for_pdf,
    finalize,
    paint_footer,
)
from selfaccounting.services.logo_service import validate_raster


def _audit_rows(n):
    return [
        {"date": "2024-01-01", "user": f"user{i}", "action": "update", "entity": "expense"}
        for i in range(n)
    ]


def _audit_report(n):
    return {"type": "audit_trail", "data": _audit_rows(n), "metadata": {"organizationName": "Acme"}}


def _rows(pages, tag="row"):
    return [op for page in pages for op in page.ops if op.kind == "rect" and op.tag == tag]


# ---------------------------------------------------------------------------
# PaginationController geometry
# ---------------------------------------------------------------------------


class TestGeometry:
    def test_portrait_rows_per_page(self):
        ctl = PaginationController(lambda c: None)
        assert ctl.content_top == 165
        assert ctl.rows_per_page() == 28

    def test_landscape_rows_per_page(self):
        ctl = PaginationController(lambda c: None, landscape=True)
        assert ctl.page_width > ctl.page_height
        assert ctl.rows_per_page() == 16

    def test_no_header_starts_at_top(self):
        ctl = PaginationController()
        assert ctl.cursor_y == ctl.HEADER_TOP


# ---------------------------------------------------------------------------
# Long tables
# ---------------------------------------------------------------------------


class TestPagination:
    @pytest.mark.parametrize("n", [1, 27, 28, 29, 56, 60, 100])
    def test_page_count(self, n):
        pages = render_pdf_pages(_audit_report(n))
        assert len(pages) == math.ceil(n / 28)

    def test_every_row_drawn_once(self):
        pages = render_pdf_pages(_audit_report(60))
        assert len(_rows(pages)) == 60

    def test_rows_never_cross_bottom_margin(self):
        pages = render_pdf_pages(_audit_report(100))
        for page in pages:
            limit = page.height - 80
            for op in page.ops:
                if op.kind == "rect" and op.tag == "row":
                    assert op.y + op.h <= limit + 1e-6

    def test_header_and_table_header_on_every_page(self):
        pages = render_pdf_pages(_audit_report(60))
        for page in pages:
            assert page.tagged("org_name"), "page header missing"
            assert page.tagged("table_header"), "table header missing"

    def test_zebra_continuous_across_pages(self):
        pages = render_pdf_pages(_audit_report(60))
        rows = _rows(pages)
        tint = rows[0].fill
        assert tint is not None
        for index, op in enumerate(rows):
            assert (op.fill == tint) == (index % 2 == 0)

    def test_second_page_starts_with_row_28(self):
        pages = render_pdf_pages(_audit_report(30))
        cells = [op.text for op in pages[1].ops if op.tag == "cell"]
        # columns: date, user, action, entity
        assert cells[1] == "user28"

    def test_landscape_report(self, make_expense_rows):
        pages = render_pdf_pages({"type": "expense_detail", "data": make_expense_rows(40)})
        assert pages[0].landscape
        # 16 rows per page, the totals row fits under the last 8
        assert len(pages) == 3
        assert len(_rows(pages)) == 40
        assert len(_rows(pages, "total")) == 1


# ---------------------------------------------------------------------------
# Footer backfill
# ---------------------------------------------------------------------------


class TestFooter:
    def test_page_x_of_y_on_every_page(self):
        pages = render_pdf_pages(_audit_report(60))
        finalize(pages, FooterText(disclaimer="system generated", generated_line="Generated by X"))
        for number, page in enumerate(pages, start=1):
            texts = [op.text for op in page.tagged("footer") if op.kind == "text"]
            assert f"Page {number} of 3" in texts
            assert "system generated" in texts

    def test_footer_painted_once(self):
        pages = render_pdf_pages(_audit_report(1))
        paint_footer(pages[0], 1, 1, FooterText())
        count = len(pages[0].tagged("footer"))
        paint_footer(pages[0], 1, 1, FooterText())
        assert len(pages[0].tagged("footer")) == count

    def test_layout_phase_paints_no_footer(self):
        pages = render_pdf_pages(_audit_report(60))
        assert all(not page.tagged("footer") for page in pages)


# ---------------------------------------------------------------------------
# Text handling
# ---------------------------------------------------------------------------


class TestText:
    def test_sanitize_replaces_typographic_characters(self):
        assert _sanitize_for_pdf("a \u2013 b \u201cq\u201d") == 'a - b "q"'

    def test_sanitize_strips_emoji(self):
        assert _sanitize_for_pdf("\U0001F4CA Report") == " Report"

    def test_fit_text_truncates_with_ellipsis(self):
        ctl = PaginationController()
        fitted = ctl.fit_text("A very long vendor name that cannot fit in a narrow column", 60)
        assert fitted.endswith("...")
        assert ctl.string_width(fitted) <= 60

    def test_wrap_text_respects_width(self):
        ctl = PaginationController()
        lines = ctl.wrap_text("word " * 60, 200)
        assert len(lines) > 1
        assert all(ctl.string_width(line) <= 200 for line in lines)


# ---------------------------------------------------------------------------
# generate_pdf
# ---------------------------------------------------------------------------


class TestGeneratePdf:
    def test_pdf_bytes(self, expense_report):
        result = generate_pdf(expense_report)
        assert result[:4] == b"%PDF"

    def test_empty_report_still_renders(self):
        result = generate_pdf({"type": "audit_trail", "data": []})
        assert result[:4] == b"%PDF"

    def test_text_placeholder_without_logo(self):
        pages = render_pdf_pages(_audit_report(1))
        assert pages[0].tagged("logo_text")

    def test_logo_embedded(self, png_bytes):
        logo = validate_raster(png_bytes)
        pages = render_pdf_pages(_audit_report(1), logo=logo)
        assert any(op.kind == "image" for op in pages[0].ops)
        assert finalize(pages)[:4] == b"%PDF"

    def test_accepts_report_data_model(self):
        report = ReportData(type="audit_trail", data=_audit_rows(2))
        assert generate_pdf(report)[:4] == b"%PDF"

    def test_header_lines(self, expense_report):
        pages = render_pdf_pages(expense_report)
        texts = pages[0].texts()
        assert "Acme Trading LLC" in texts
        assert "Expense Detail Report" in texts
        assert "TRN/VAT: 100200300400003" in texts
        assert "Period: 01 Jan 2024 - 31 Mar 2024" in texts
        assert "Currency: AED" in texts
