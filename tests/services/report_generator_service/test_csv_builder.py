"""
Tests for the delimited-text backend (csv_builder).

Tests cover:
- preamble lines and the SUMMARY section
- quoting of commas and embedded quotes
- display-string totals and "\\n" line endings
- spreadsheet-only blocks skipped, empty tables noticed
"""

import csv
from io import StringIO

from selfaccounting.services.report_generator_service.csv_builder import generate_csv


def _text(report):
    return generate_csv(report).decode("utf-8")


def _lines(report):
    return _text(report).split("\n")


class TestPreamble:
    def test_identity_lines(self, expense_report):
        lines = _lines(expense_report)
        assert lines[:6] == [
            "Acme Trading LLC",
            "Expense Detail Report",
            "Period: 01 Jan 2024 - 31 Mar 2024",
            "VAT Number: 100200300400003",
            "Generated: 02 Apr 2024, 09:30",
            "",
        ]

    def test_optional_lines_omitted(self):
        lines = _lines({"type": "audit_trail", "data": [], "metadata": {"generatedAt": "2024-04-02T09:30:00"}})
        assert lines[0] == "SmartExpense UAE"
        assert lines[1] == "Transaction Audit Trail"
        assert lines[2] == "Generated: 02 Apr 2024, 09:30"

    def test_summary_section(self, expense_report):
        lines = _lines(expense_report)
        assert lines[6] == "SUMMARY"
        assert lines[7] == "Total Number of Expenses,3"
        assert "Total Amount (After VAT),AED 318.00" in lines
        assert "Highest Category Spend,Office Supplies (AED 107.00)" in lines


class TestTables:
    def test_header_rows_and_totals(self, expense_report):
        lines = _lines(expense_report)
        assert "Date,Category,Type,Vendor,Description,Amount,Vat,Total,Notes" in lines
        assert "10 Jan 2024,Travel,expense,Emirates,Expense 1,AED 100.00,AED 5.00,AED 105.00,internal" in lines
        assert ",Total,,,,AED 303.00,AED 15.00,AED 318.00," in lines

    def test_quoting(self):
        report = {"type": "vendor_report", "data": [{"vendor": 'Invoice, "ACME" Corp', "amount": 1200}]}
        text = _text(report)
        assert '"Invoice, ""ACME"" Corp","AED 1,200.00"' in text
        rows = list(csv.reader(StringIO(text)))
        assert ['Invoice, "ACME" Corp', "AED 1,200.00"] in rows

    def test_unix_line_endings(self, expense_report):
        text = _text(expense_report)
        assert "\r\n" not in text
        assert text.endswith("\n")

    def test_sheet_only_blocks_skipped(self, expense_report):
        text = _text(expense_report)
        assert "Category Summary" not in text
        assert "Monthly Breakdown" not in text

    def test_empty_table_notice(self):
        assert "No data available." in _lines({"type": "audit_trail", "data": []})

    def test_structured_sections(self, vat_report):
        lines = _lines(vat_report)
        assert "VAT Summary" in lines
        assert "Status,Filed" in lines
        assert "Category Breakdown" in lines
        assert "Total,\"AED 1,500.00\",AED 75.00,\"AED 1,575.00\"" in lines

    def test_utf8_output(self):
        report = {"type": "vendor_report", "data": [{"vendor": "Café Dubaï", "amount": 1}]}
        assert "Café Dubaï" in generate_csv(report).decode("utf-8")
