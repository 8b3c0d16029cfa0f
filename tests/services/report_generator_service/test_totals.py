"""
Tests for totals.

Tests cover:
- calculate_totals: Decimal sums, "Total" label placement, non-summable columns
- display_balance: credit-normal sign inversion
- aggregate_by / monthly_breakdown: pivot aggregation
"""

from decimal import Decimal

from selfaccounting.services.report_generator_service.field_semantics import FieldKind
from selfaccounting.services.report_generator_service.totals import (
    TOTAL_LABEL,
    aggregate_by,
    calculate_totals,
    display_balance,
    is_credit_normal,
    monthly_breakdown,
    sum_column,
)


class TestSumColumn:
    def test_decimal_sum_avoids_float_drift(self):
        rows = [{"amount": 0.1}, {"amount": 0.2}]
        assert sum_column(rows, "amount") == Decimal("0.3")

    def test_skips_missing_and_non_numeric(self):
        rows = [{"amount": "10"}, {"amount": None}, {"amount": "n/a"}, {}]
        assert sum_column(rows, "amount") == Decimal("10")


class TestCalculateTotals:
    def test_label_in_first_text_column(self):
        rows = [
            {"date": "2024-01-01", "vendor": "A", "description": "x", "amount": 10, "vat": 0.5},
            {"date": "2024-01-02", "vendor": "B", "description": "y", "amount": 20, "vat": 1},
        ]
        totals = calculate_totals(rows, ["date", "vendor", "description", "amount", "vat"])
        assert totals == {
            "date": "",
            "vendor": TOTAL_LABEL,
            "description": "",
            "amount": Decimal("30"),
            "vat": Decimal("1.5"),
        }

    def test_label_falls_back_to_first_blank_column(self):
        totals = calculate_totals([{"date": "2024-01-01", "amount": 5}], ["date", "amount"])
        assert totals == {"date": TOTAL_LABEL, "amount": Decimal("5")}

    def test_unit_price_not_summed(self):
        rows = [{"item": "a", "unitPrice": 10, "quantity": 2}]
        totals = calculate_totals(rows, ["item", "unitPrice", "quantity"])
        assert totals["unitPrice"] == ""
        assert totals["quantity"] == Decimal("2")

    def test_explicit_currency_kind_is_summed(self):
        rows = [{"label": "x", "fee": 3}, {"label": "y", "fee": 4}]
        totals = calculate_totals(rows, ["label", "fee"], {"fee": FieldKind.CURRENCY})
        assert totals["fee"] == Decimal("7")

    def test_empty_rows(self):
        totals = calculate_totals([], ["vendor", "amount"])
        assert totals["amount"] == Decimal("0")


class TestSignConvention:
    def test_credit_normal_types(self):
        for account_type in ("Liability", "liabilities", "Revenue", "Income", "EQUITY"):
            assert is_credit_normal(account_type)

    def test_debit_normal_types(self):
        for account_type in ("Asset", "Expense", None, ""):
            assert not is_credit_normal(account_type)

    def test_liability_inverted(self):
        assert display_balance("Liability", 100) == Decimal("-100")

    def test_asset_as_stored(self):
        assert display_balance("Asset", 100) == Decimal("100")

    def test_non_numeric_balance(self):
        assert display_balance("Asset", None) is None


class TestAggregation:
    def test_aggregate_by_category(self):
        rows = [
            {"category": "Travel", "amount": 100, "vat": 5, "total": 105},
            {"category": "Meals", "amount": 50, "vat": 2.5, "total": 52.5},
            {"category": "Travel", "amount": 200, "vat": 10, "total": 210},
            {"amount": 1, "vat": 0, "total": 1},
        ]
        groups = aggregate_by(rows, ("category",), "Uncategorized")
        assert list(groups) == ["Travel", "Meals", "Uncategorized"]
        assert groups["Travel"] == {
            "count": 2, "amount": Decimal("300"), "vat": Decimal("15"), "total": Decimal("315"),
        }

    def test_aggregate_uses_aliases(self):
        rows = [{"vendorName": "ACME", "baseAmount": 10, "vatAmount": 1, "totalAmount": 11}]
        groups = aggregate_by(rows, ("vendor", "vendorName"), "N/A")
        assert groups["ACME"]["total"] == Decimal("11")

    def test_monthly_breakdown_sorted(self):
        rows = [
            {"date": "2024-03-05", "total": 30, "vat": 3},
            {"date": "2024-01-10", "total": 10, "vat": 1},
            {"date": "2024-01-20", "amount": 5},
            {"date": "not a date", "total": 999},
        ]
        assert monthly_breakdown(rows) == [
            ("Jan 2024", Decimal("15"), Decimal("1")),
            ("Mar 2024", Decimal("30"), Decimal("3")),
        ]
