"""
VAT report renderer.

Part of the report_generator_service package.
"""

from selfaccounting.services.report_generator_service.blocks import Card
from selfaccounting.services.report_generator_service.descriptors import VAT_REPORT
from selfaccounting.services.report_generator_service.field_semantics import FieldKind
from selfaccounting.services.report_generator_service.renderers.base import (
    RendererStrategy,
    first_present,
)
from selfaccounting.services.report_generator_service.renderers.registry import register_renderer

CATEGORY_COLUMNS = ["category", "taxableAmount", "vatAmount", "totalAmount"]


@register_renderer(VAT_REPORT)
class VatRenderer(RendererStrategy):

    def normalized(self, data):
        """Apply the legacy field names (taxableAmount, vatAmount) and default status."""
        figures = dict(data)
        figures["taxableSupplies"] = first_present(data, "taxableSupplies", "taxableAmount")
        figures["inputVat"] = first_present(data, "inputVat", "vatAmount")
        figures["status"] = data.get("status") or "Pending"
        return figures

    def render_summary(self, report, fmt):
        data = self.normalized(report.payload)
        cards = self.cards_from_specs(data)
        if data.get("taxableSales") is not None:
            cards.insert(1, Card("Taxable Sales", data["taxableSales"]))
        for key, label in (("transactionCount", "Purchase Transactions"), ("salesCount", "Sales Transactions")):
            if data.get(key) is not None:
                cards.append(Card(label, data[key], FieldKind.NUMBER))
        band = self.summary_band("VAT Summary", cards)
        return [band] if band else []

    def render_sections(self, report, fmt):
        return [self.table(
            "Category Breakdown",
            report.payload.get("categoryBreakdown"),
            CATEGORY_COLUMNS,
            key="category_breakdown",
            with_totals=True,
            sheet_name="Category Breakdown",
        )]
