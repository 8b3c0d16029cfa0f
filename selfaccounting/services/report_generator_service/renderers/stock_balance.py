"""
Stock balance renderer.

Part of the report_generator_service package.
"""

from selfaccounting.services.report_generator_service.blocks import Card
from selfaccounting.services.report_generator_service.descriptors import STOCK_BALANCE
from selfaccounting.services.report_generator_service.field_semantics import FieldKind
from selfaccounting.services.report_generator_service.renderers.base import (
    RendererStrategy,
    decimal_sum,
    present_columns,
)
from selfaccounting.services.report_generator_service.renderers.registry import register_renderer
from selfaccounting.services.report_generator_service.totals import calculate_totals

COLUMNS = [
    "sku", "productName", "unit", "openingQty", "inwardsQty", "outwardsQty",
    "adjustmentsQty", "closingQty", "unitCost", "stockValue",
]
LABELS = {
    "sku": "SKU",
    "productName": "Product",
    "unit": "Unit",
    "openingQty": "Opening",
    "inwardsQty": "Inwards",
    "outwardsQty": "Outwards",
    "adjustmentsQty": "Adjustments",
    "closingQty": "Closing",
    "unitCost": "Unit Cost",
    "stockValue": "Value",
}
QTY_COLUMNS = ("openingQty", "inwardsQty", "outwardsQty", "adjustmentsQty", "closingQty")


@register_renderer(STOCK_BALANCE)
class StockBalanceRenderer(RendererStrategy):

    def items(self, report):
        items = report.payload.get("items")
        return [i for i in items if isinstance(i, dict)] if isinstance(items, list) else []

    def render_summary(self, report, fmt):
        data = report.payload
        items = self.items(report)
        summary = dict(data.get("summary") or {})
        if items:
            for column in QTY_COLUMNS:
                if summary.get(column) is None:
                    summary[column] = decimal_sum(i.get(column) for i in items)
            if summary.get("totalValue") is None:
                summary["totalValue"] = decimal_sum(i.get("stockValue") for i in items)
        cards = self.cards_from_specs({"summary": summary})
        if data.get("asOfDate"):
            cards.insert(0, Card("As of", data["asOfDate"], FieldKind.DATE))
        band = self.summary_band("Stock Summary", cards)
        return [band] if band else []

    def render_sections(self, report, fmt):
        items = self.items(report)
        columns = present_columns(items, COLUMNS, required=("productName", "closingQty")) if items else COLUMNS
        block = self.table(
            "Items", items, columns, key="items", labels=LABELS,
            weights=self.descriptor.column_weights, sheet_name="Stock Items",
        )
        if block.rows:
            block.totals = calculate_totals(block.rows, columns)
        return [block]
