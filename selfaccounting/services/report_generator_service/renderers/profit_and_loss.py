"""
Profit and loss renderer.

Part of the report_generator_service package.
"""

from selfaccounting.services.report_generator_service.descriptors import PROFIT_AND_LOSS
from selfaccounting.services.report_generator_service.renderers.base import (
    RendererStrategy,
    decimal_sum,
    first_present,
)
from selfaccounting.services.report_generator_service.renderers.registry import register_renderer

SECTIONS = (
    ("revenue", "Revenue", "totalRevenue"),
    ("costOfSales", "Cost of Sales", "totalCostOfSales"),
    ("expenses", "Operating Expenses", "totalExpenses"),
)


def line_items(entries):
    rows = []
    for entry in entries if isinstance(entries, list) else []:
        if isinstance(entry, dict):
            rows.append({
                "account": first_present(entry, "accountName", "category", "name") or "",
                "amount": entry.get("amount"),
            })
    return rows


@register_renderer(PROFIT_AND_LOSS)
class ProfitAndLossRenderer(RendererStrategy):

    def figures(self, report):
        """Summary figures, deriving any missing subtotal from the line items."""
        data = report.payload
        summary = dict(data.get("summary") or {})
        for key, _, total_key in SECTIONS:
            if summary.get(total_key) is None and isinstance(data.get(key), list):
                summary[total_key] = decimal_sum(r["amount"] for r in line_items(data[key]))
        if summary.get("grossProfit") is None and summary.get("totalRevenue") is not None:
            summary["grossProfit"] = decimal_sum([summary.get("totalRevenue")]) - decimal_sum(
                [summary.get("totalCostOfSales")]
            )
        if summary.get("netProfit") is None and summary.get("grossProfit") is not None:
            summary["netProfit"] = decimal_sum([summary.get("grossProfit")]) - decimal_sum(
                [summary.get("totalExpenses")]
            )
        return summary

    def render_summary(self, report, fmt):
        band = self.summary_band("Results", self.cards_from_specs({"summary": self.figures(report)}))
        return [band] if band else []

    def render_sections(self, report, fmt):
        data = report.payload
        blocks = []
        for key, title, _ in SECTIONS:
            if key == "costOfSales" and key not in data:
                continue
            block = self.table(
                title, line_items(data.get(key)), ["account", "amount"], key=key,
                labels={"account": "Account", "amount": "Amount"},
                weights={"account": 3.0, "amount": 1.0},
            )
            if block.rows:
                block.totals = {"account": f"Total {title}", "amount": decimal_sum(r["amount"] for r in block.rows)}
            blocks.append(block)
        return blocks
