"""Tests for selfaccounting/currency_utils.py"""

from datetime import date, datetime
from decimal import Decimal

from selfaccounting.currency_utils import (
    amount_in_words,
    describe_filters,
    format_currency,
    format_date,
    format_datetime,
    format_header_label,
    format_number,
    format_percent,
    format_period,
    number_to_words,
    parse_date,
    resolve_currency_options,
    round_amount,
    sheet_number_format,
    to_decimal,
)


class TestToDecimal:
    def test_int_and_float(self):
        assert to_decimal(5) == Decimal("5")
        assert to_decimal(12.34) == Decimal("12.34")

    def test_numeric_string_with_separators(self):
        assert to_decimal(" 1,234.50 ") == Decimal("1234.50")

    def test_non_numeric_returns_none(self):
        assert to_decimal("abc") is None
        assert to_decimal("") is None
        assert to_decimal(None) is None

    def test_bool_is_not_a_number(self):
        assert to_decimal(True) is None

    def test_nan_returns_none(self):
        assert to_decimal(float("nan")) is None


class TestResolveCurrencyOptions:
    def test_defaults(self):
        assert resolve_currency_options(None) == ("code", 2, "standard")

    def test_camel_case_mapping(self):
        opts = {"displayFormat": "Symbol", "rounding": 3, "roundingMethod": "UP"}
        assert resolve_currency_options(opts) == ("symbol", 3, "up")

    def test_invalid_values_fall_back(self):
        opts = {"displayFormat": "emoji", "rounding": "many", "roundingMethod": "banker"}
        assert resolve_currency_options(opts) == ("code", 2, "standard")

    def test_rounding_clamped(self):
        assert resolve_currency_options({"rounding": 12})[1] == 6
        assert resolve_currency_options({"rounding": -1})[1] == 0


class TestRoundAmount:
    def test_standard_rounds_half_up(self):
        assert round_amount(12.345, 2, "standard") == Decimal("12.35")

    def test_up_and_down(self):
        assert round_amount(12.341, 2, "up") == Decimal("12.35")
        assert round_amount(12.349, 2, "down") == Decimal("12.34")

    def test_no_negative_zero(self):
        assert str(round_amount(-0.001, 2)) == "0.00"

    def test_non_numeric_is_zero(self):
        assert round_amount("n/a") == Decimal("0.00")


class TestFormatCurrency:
    def test_code_format_default(self):
        assert format_currency(1234.5) == "AED 1,234.50"

    def test_rounding_up(self):
        assert format_currency(12.341, "AED", {"rounding": 2, "roundingMethod": "up"}) == "AED 12.35"

    def test_rounding_down(self):
        assert format_currency(12.349, "AED", {"rounding": 2, "roundingMethod": "down"}) == "AED 12.34"

    def test_symbol_format(self):
        assert format_currency(1234.5, "USD", {"displayFormat": "symbol"}) == "$1,234.50"

    def test_both_format(self):
        assert format_currency(1234.5, "USD", {"displayFormat": "both"}) == "USD $1,234.50"

    def test_symbol_without_known_symbol_uses_code(self):
        assert format_currency(10, "AED", {"displayFormat": "symbol"}) == "AED 10.00"

    def test_negative_values(self):
        assert format_currency(-100, "AED") == "AED -100.00"
        assert format_currency(-100, "USD", {"displayFormat": "symbol"}) == "-$100.00"

    def test_zero_places(self):
        assert format_currency(1234.5, "AED", {"rounding": 0}) == "AED 1,235"

    def test_currency_is_upper_cased(self):
        assert format_currency(1, "aed") == "AED 1.00"


class TestFormatNumber:
    def test_thousands_separator(self):
        assert format_number(1234567.891) == "1,234,567.89"


class TestSheetNumberFormat:
    def test_default(self):
        assert sheet_number_format("AED") == '"AED" #,##0.00'

    def test_zero_places(self):
        assert sheet_number_format("usd", {"rounding": 0}) == '"USD" #,##0'


class TestDates:
    def test_parse_iso_string(self):
        assert parse_date("2024-01-05") == datetime(2024, 1, 5)

    def test_parse_iso_with_zulu(self):
        assert parse_date("2024-01-05T10:00:00Z").hour == 10

    def test_parse_date_object(self):
        assert parse_date(date(2024, 2, 29)) == datetime(2024, 2, 29)

    def test_parse_epoch_millis(self):
        assert parse_date(0) == datetime(1970, 1, 1)

    def test_parse_garbage_returns_none(self):
        assert parse_date("yesterday") is None

    def test_format_date(self):
        assert format_date("2024-01-05") == "05 Jan 2024"

    def test_format_date_unparseable_returned_unchanged(self):
        assert format_date("Q1 2024") == "Q1 2024"
        assert format_date(None) == ""

    def test_format_datetime(self):
        assert format_datetime("2024-01-05T14:30:00") == "05 Jan 2024, 14:30"

    def test_format_period(self):
        assert format_period("2024-01-01", "2024-01-31") == "01 Jan 2024 - 31 Jan 2024"
        assert format_period("2024-01-01", None) == "From 01 Jan 2024"
        assert format_period(None, "2024-01-31") == "Until 31 Jan 2024"
        assert format_period(None, None) == ""


class TestLabels:
    def test_camel_case(self):
        assert format_header_label("vatAmount") == "Vat Amount"

    def test_snake_case(self):
        assert format_header_label("linked_expense_id") == "Linked Expense Id"

    def test_percent(self):
        assert format_percent(5) == "5%"
        assert format_percent(12.5) == "12.5%"
        assert format_percent("x") == ""

    def test_describe_filters(self):
        filters = {"status": ["approved", "pending"], "category": "Travel", "vendor": None}
        assert describe_filters(filters) == "status: approved, pending; category: Travel"

    def test_describe_no_filters(self):
        assert describe_filters(None) == ""


class TestAmountInWords:
    def test_number_to_words(self):
        assert number_to_words(0) == "Zero"
        assert number_to_words(1250) == "One Thousand Two Hundred Fifty"
        assert number_to_words(42) == "Forty-Two"
        assert number_to_words(2000001) == "Two Million One"

    def test_dirhams_and_fils(self):
        assert amount_in_words(100.5, "AED") == "One Hundred Dirhams and Fifty Fils Only"

    def test_singular_unit(self):
        assert amount_in_words(1, "USD") == "One Dollar Only"

    def test_unknown_currency(self):
        assert amount_in_words(100.25, "XYZ") == "XYZ One Hundred and 25/100 Only"
