"""
Tests for the report dispatcher (generate_report).

Tests cover:
- format aliases and the unsupported-format error
- payload validation errors
- backend failures wrapped in ReportRenderError
- logo resolution only for print documents
- download filenames and content types
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from selfaccounting.exceptions import ReportRenderError, ValidationError
from selfaccounting.services.report_generator_service.dispatcher import (
    content_type_for,
    generate_report,
    normalize_format,
    report_filename,
)

DISPATCHER = "selfaccounting.services.report_generator_service.dispatcher"


class TestFormats:
    @pytest.mark.parametrize("alias,expected", [
        ("print", "print"), ("PDF", "print"), ("sheet", "sheet"),
        ("xlsx", "sheet"), ("Excel", "sheet"), (" csv ", "csv"),
    ])
    def test_aliases(self, alias, expected):
        assert normalize_format(alias) == expected

    def test_unsupported_format(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_format("docx")
        assert exc_info.value.status_code == 400
        assert "print, sheet, csv" in exc_info.value.message

    def test_content_types(self):
        assert content_type_for("pdf") == "application/pdf"
        assert content_type_for("xlsx").endswith("spreadsheetml.sheet")
        assert content_type_for("csv").startswith("text/csv")


class TestGenerateReport:
    @pytest.mark.asyncio
    async def test_csv(self, expense_report):
        result = await generate_report("csv", expense_report)
        assert result.startswith(b"Acme Trading LLC\n")

    @pytest.mark.asyncio
    async def test_xlsx_is_zip(self, expense_report):
        result = await generate_report("xlsx", expense_report)
        assert result[:2] == b"PK"

    @pytest.mark.asyncio
    async def test_print(self, expense_report):
        with patch(f"{DISPATCHER}.resolve_logo", new_callable=AsyncMock, return_value=None) as resolve:
            result = await generate_report("print", expense_report)
        assert result[:4] == b"%PDF"
        resolve.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_print_with_corrupt_logo_buffer(self, expense_report, png_bytes):
        broken = bytearray(png_bytes)
        broken[broken.index(b"IDAT") + 4] ^= 0xFF
        expense_report["metadata"]["logoBuffer"] = bytes(broken)
        with patch("selfaccounting.services.logo_service.get_app_logo_path", return_value=None):
            result = await generate_report("print", expense_report)
        assert result[:4] == b"%PDF"

    @pytest.mark.asyncio
    async def test_print_with_malformed_logo_url(self, expense_report):
        expense_report["metadata"]["logoUrl"] = "http://[::1/logo.png"
        with patch("selfaccounting.services.logo_service.get_app_logo_path", return_value=None):
            result = await generate_report("print", expense_report)
        assert result[:4] == b"%PDF"

    @pytest.mark.asyncio
    async def test_logo_not_resolved_for_exports(self, expense_report):
        with patch(f"{DISPATCHER}.resolve_logo", new_callable=AsyncMock) as resolve:
            await generate_report("sheet", expense_report)
            await generate_report("csv", expense_report)
        resolve.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unsupported_format(self, expense_report):
        with pytest.raises(ValidationError):
            await generate_report("html", expense_report)

    @pytest.mark.asyncio
    async def test_missing_type(self):
        with pytest.raises(ValidationError) as exc_info:
            await generate_report("csv", {"data": []})
        assert exc_info.value.message.startswith("Invalid report data")

    @pytest.mark.asyncio
    async def test_malformed_data(self):
        with pytest.raises(ValidationError):
            await generate_report("csv", {"type": "vat_report", "data": "not a table"})

    @pytest.mark.asyncio
    async def test_backend_failure_wrapped(self, expense_report):
        with patch(f"{DISPATCHER}.generate_csv", side_effect=RuntimeError("boom")):
            with pytest.raises(ReportRenderError) as exc_info:
                await generate_report("csv", expense_report)
        error = exc_info.value
        assert error.status_code == 500
        assert error.report_type == "expense_detail"
        assert error.fmt == "csv"
        assert isinstance(error.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_missing_metadata(self):
        result = await generate_report("csv", {"type": "audit_trail", "data": [{"user": "a"}], "metadata": None})
        assert result.startswith(b"SmartExpense UAE\n")


class TestFilename:
    def test_period_dates(self, trial_balance_report):
        trial_balance_report["metadata"]["reportPeriod"] = {"startDate": "2024-01-01", "endDate": "2024-12-31"}
        assert report_filename(trial_balance_report, "xlsx") == "trial_balance_2024-01-01_2024-12-31.xlsx"

    def test_generated_date_fallback(self, vat_report):
        assert report_filename(vat_report, "csv") == "vat_report_2024-04-02.csv"

    def test_print_extension(self, expense_report):
        assert report_filename(expense_report, "print").endswith(".pdf")

    def test_current_utc_date_when_nothing_known(self):
        name = report_filename({"type": "audit_trail", "data": []}, "csv")
        assert name == f"audit_trail_{datetime.now(timezone.utc):%Y-%m-%d}.csv"
