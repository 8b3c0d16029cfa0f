"""
Value formatting bound to a single report's currency settings.

Part of the report_generator_service package.
"""

from decimal import Decimal
from typing import Any, Optional

from selfaccounting.currency_utils import (
    format_currency,
    format_date,
    format_number,
    format_percent,
    parse_date,
    resolve_currency_options,
    round_amount,
    sheet_number_format,
    to_decimal,
)
from selfaccounting.services.report_generator_service.field_semantics import (
    FieldKind,
    classify_field,
)

NO_DATA_MESSAGE = "No data available."


class ValueFormatter:
    """Formats raw payload values for one report (one currency, one rounding policy)."""

    def __init__(self, currency: str = "AED", currency_settings: Any = None):
        self.currency = (currency or "AED").upper()
        self.options = currency_settings
        self.display_format, self.places, self.rounding_method = resolve_currency_options(
            currency_settings
        )

    @classmethod
    def for_report(cls, report, default_currency: str = "AED") -> "ValueFormatter":
        meta = report.metadata
        currency = meta.currency or report.payload.get("currency") or default_currency
        return cls(str(currency), meta.currency_settings)

    # ----------------------------------------------------------------
    # Scalars
    # ----------------------------------------------------------------

    def money(self, value: Any) -> str:
        return format_currency(value, self.currency, self.options)

    def round(self, value: Any) -> Decimal:
        """Round a figure with the report's rounding policy (done once, at display)."""
        return round_amount(value, self.places, self.rounding_method)

    def date(self, value: Any) -> str:
        return format_date(value)

    def number(self, value: Any) -> str:
        amount = to_decimal(value)
        if amount is None:
            return "" if value is None else str(value)
        if amount == amount.to_integral_value():
            return f"{int(amount):,}"
        return format_number(amount, 2)

    def percent(self, value: Any) -> str:
        return format_percent(value)

    @property
    def sheet_currency_format(self) -> str:
        return sheet_number_format(self.currency, self.options)

    # ----------------------------------------------------------------
    # Cells
    # ----------------------------------------------------------------

    def display(self, value: Any, kind: FieldKind) -> str:
        """Format a value as display text according to its field kind."""
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return f"{len(value)} item(s)" if value else "None"
        if isinstance(value, bool):
            return "Yes" if value else "No"
        if isinstance(value, dict):
            return ", ".join(f"{k}: {v}" for k, v in value.items())
        if kind == FieldKind.CURRENCY:
            if to_decimal(value) is None and isinstance(value, str):
                return value
            return self.money(value)
        if kind == FieldKind.DATE:
            return self.date(value)
        if kind == FieldKind.NUMBER:
            return self.number(value)
        if kind == FieldKind.PERCENT:
            return self.percent(value)
        return str(value)

    def cell(self, value: Any, column: str, kind: Optional[FieldKind] = None) -> str:
        """Format a table cell; the column name decides the kind unless given."""
        return self.display(value, kind or classify_field(column).kind)

    def sheet_value(self, value: Any, kind: FieldKind) -> Any:
        """
        Native spreadsheet value for a cell

        Currency becomes a rounded float, dates become datetimes, counts become
        numbers; anything that cannot be converted falls back to display text.
        """
        if value is None:
            return None
        if kind == FieldKind.CURRENCY:
            amount = to_decimal(value)
            return float(self.round(amount)) if amount is not None else self.display(value, kind)
        if kind == FieldKind.DATE:
            parsed = parse_date(value)
            if parsed is None:
                return self.display(value, kind)
            return parsed.replace(tzinfo=None)
        if kind in (FieldKind.NUMBER, FieldKind.PERCENT):
            amount = to_decimal(value)
            if amount is None:
                return self.display(value, kind)
            return int(amount) if amount == amount.to_integral_value() else float(amount)
        return self.display(value, kind)
