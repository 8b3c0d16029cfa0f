"""
Balance sheet renderer.

Part of the report_generator_service package.
"""

from selfaccounting.services.report_generator_service.blocks import Card
from selfaccounting.services.report_generator_service.descriptors import BALANCE_SHEET
from selfaccounting.services.report_generator_service.field_semantics import FieldKind
from selfaccounting.services.report_generator_service.renderers.base import (
    RendererStrategy,
    decimal_sum,
)
from selfaccounting.services.report_generator_service.renderers.registry import register_renderer
from selfaccounting.services.report_generator_service.totals import display_balance

# data key -> (section title, account type assumed when a row has none)
SECTIONS = (
    ("assets", "Assets", "Asset"),
    ("liabilities", "Liabilities", "Liability"),
    ("equity", "Equity", "Equity"),
)


def section_rows(entries, default_type):
    """
    Rows with a display ``balance``

    ``balance`` is a stored ledger balance (debit-positive) and is shown in
    display sign; ``amount`` is already display-ready and kept as is.
    """
    rows = []
    for entry in entries if isinstance(entries, list) else []:
        if not isinstance(entry, dict):
            continue
        account_type = entry.get("accountType") or default_type
        if entry.get("balance") is not None:
            value = display_balance(account_type, entry["balance"])
        else:
            value = entry.get("amount")
        rows.append({
            "accountCode": entry.get("accountCode"),
            "accountName": entry.get("accountName") or entry.get("name") or "",
            "balance": value,
        })
    return rows


@register_renderer(BALANCE_SHEET)
class BalanceSheetRenderer(RendererStrategy):

    def sections(self, report):
        data = report.payload
        return {key: section_rows(data.get(key), default_type) for key, _, default_type in SECTIONS}

    def render_summary(self, report, fmt):
        data = report.payload
        sections = self.sections(report)
        summary = dict(data.get("summary") or {})
        for key, total_key in (("assets", "totalAssets"), ("liabilities", "totalLiabilities"),
                               ("equity", "totalEquity")):
            if summary.get(total_key) is None and sections[key]:
                summary[total_key] = decimal_sum(r["balance"] for r in sections[key])
        if summary.get("totalLiabilitiesAndEquity") is None and (
            summary.get("totalLiabilities") is not None or summary.get("totalEquity") is not None
        ):
            summary["totalLiabilitiesAndEquity"] = decimal_sum(
                [summary.get("totalLiabilities"), summary.get("totalEquity")]
            )
        cards = self.cards_from_specs({"summary": summary})
        if data.get("asOfDate"):
            cards.insert(0, Card("As of", data["asOfDate"], FieldKind.DATE))
        band = self.summary_band("Financial Position", cards)
        return [band] if band else []

    def render_sections(self, report, fmt):
        sections = self.sections(report)
        blocks = []
        for key, title, _ in SECTIONS:
            rows = sections[key]
            columns = ["accountName", "balance"]
            if any(r.get("accountCode") for r in rows):
                columns.insert(0, "accountCode")
            block = self.table(
                title, rows, columns, key=key,
                labels={"accountCode": "Code", "accountName": "Account", "balance": "Amount"},
                weights=self.descriptor.column_weights,
            )
            if rows:
                block.totals = {c: "" for c in columns}
                block.totals["accountName"] = f"Total {title}"
                block.totals["balance"] = decimal_sum(r["balance"] for r in rows)
            blocks.append(block)
        return blocks
