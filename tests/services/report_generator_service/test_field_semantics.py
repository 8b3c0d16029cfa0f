"""
Tests for field_semantics.classify_field.

Tests cover:
- currency vocabulary (amount, vat, total, debit, credit, balance)
- dates, identifiers, counts, unit prices and percentages
- exact-name overrides taking precedence over substrings
"""

import pytest

from selfaccounting.services.report_generator_service.field_semantics import (
    FieldKind,
    classify_field,
    is_currency_field,
    is_date_field,
)


class TestCurrencyFields:
    @pytest.mark.parametrize("name", [
        "amount", "baseAmount", "vat", "vatAmount", "total", "totalAmount",
        "debit", "credit", "balance", "closingBalance", "outputVat",
    ])
    def test_currency_fields_right_aligned_and_summable(self, name):
        semantics = classify_field(name)
        assert semantics.kind == FieldKind.CURRENCY
        assert semantics.align == "right"
        assert semantics.summable is True

    def test_unit_price_not_summable(self):
        semantics = classify_field("unitPrice")
        assert semantics.kind == FieldKind.CURRENCY
        assert semantics.summable is False

    def test_cost_is_currency(self):
        assert classify_field("averageCost").kind == FieldKind.CURRENCY

    def test_is_currency_field(self):
        assert is_currency_field("vatAmount") is True
        assert is_currency_field("vendor") is False


class TestOtherKinds:
    @pytest.mark.parametrize("name", ["date", "expenseDate", "createdAt", "postedOn", "due_date"])
    def test_dates_centered(self, name):
        semantics = classify_field(name)
        assert semantics.kind == FieldKind.DATE
        assert semantics.align == "center"
        assert is_date_field(name)

    @pytest.mark.parametrize("name", [
        "id", "ID", "linkedExpenseId", "expense_id", "transactionid", "ID_number", "guid", "paidBy",
    ])
    def test_identifiers_centered_text(self, name):
        semantics = classify_field(name)
        assert semantics.kind == FieldKind.TEXT
        assert semantics.align == "center"

    @pytest.mark.parametrize("name", ["quantity", "qty", "openingQty", "count"])
    def test_counts_summable_numbers(self, name):
        semantics = classify_field(name)
        assert semantics.kind == FieldKind.NUMBER
        assert semantics.summable is True

    def test_plain_text(self):
        semantics = classify_field("description")
        assert semantics.kind == FieldKind.TEXT
        assert semantics.align == "left"
        assert semantics.pdf_align == "L"

    def test_empty_name(self):
        assert classify_field("").kind == FieldKind.TEXT


class TestOverrides:
    def test_vat_rate_is_percent(self):
        assert classify_field("vatRate").kind == FieldKind.PERCENT

    def test_vat_number_is_text(self):
        assert classify_field("vatNumber").kind == FieldKind.TEXT
        assert classify_field("vat_number").kind == FieldKind.TEXT

    def test_account_is_text_not_count(self):
        assert classify_field("account").kind == FieldKind.TEXT

    def test_discount_is_currency(self):
        assert classify_field("discount").kind == FieldKind.CURRENCY

    def test_days_overdue_is_not_summed(self):
        semantics = classify_field("daysOverdue")
        assert semantics.kind == FieldKind.NUMBER
        assert semantics.summable is False

    def test_total_transactions_is_a_count(self):
        assert classify_field("totalTransactions").kind == FieldKind.NUMBER
