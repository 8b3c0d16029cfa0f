"""
Bank reconciliation renderer.

Part of the report_generator_service package.
"""

from selfaccounting.currency_utils import format_date
from selfaccounting.services.report_generator_service.blocks import Card
from selfaccounting.services.report_generator_service.descriptors import BANK_RECONCILIATION
from selfaccounting.services.report_generator_service.field_semantics import FieldKind
from selfaccounting.services.report_generator_service.renderers.base import RendererStrategy
from selfaccounting.services.report_generator_service.renderers.registry import register_renderer

TRANSACTION_COLUMNS = ["date", "description", "amount", "status", "linkedExpenseId"]
TRANSACTION_PRINT_COLUMNS = ["date", "description", "amount", "status"]
UNMATCHED_COLUMNS = ["date", "description", "amount", "type"]


@register_renderer(BANK_RECONCILIATION)
class BankReconciliationRenderer(RendererStrategy):

    def render_summary(self, report, fmt):
        data = report.payload
        figures = {
            "reconciliationId": data.get("reconciliationId") or "N/A",
            "totalTransactions": data.get("totalTransactions") or 0,
            "matched": data.get("matched") or 0,
            "unmatched": data.get("unmatched") or 0,
            "variance": data.get("variance") or 0,
        }
        cards = self.cards_from_specs(figures)

        date_range = data.get("dateRange") or {}
        if date_range.get("startDate") or date_range.get("endDate"):
            text = f"{format_date(date_range.get('startDate'))} to {format_date(date_range.get('endDate'))}"
            cards.insert(1, Card("Date Range", text, FieldKind.TEXT))
        if data.get("bankAccount"):
            cards.insert(1, Card("Bank Account", data["bankAccount"], FieldKind.TEXT))
        for key, label in (
            ("closingBalanceBank", "Closing Balance (Bank)"),
            ("closingBalanceSystem", "Closing Balance (System)"),
            ("adjustments", "Adjustments"),
        ):
            if data.get(key) is not None:
                cards.append(Card(label, data[key]))
        return [self.summary_band("Reconciliation Summary", cards)]

    def render_sections(self, report, fmt):
        data = report.payload
        blocks = [self.table(
            "Transactions",
            data.get("transactions"),
            TRANSACTION_COLUMNS,
            key="transactions",
            labels={"linkedExpenseId": "Linked Expense ID"},
            print_columns=TRANSACTION_PRINT_COLUMNS,
            weights=self.descriptor.column_weights,
            sheet_name="Transactions",
        )]
        for key, title in (
            ("unmatchedBank", "Unmatched Bank Transactions"),
            ("unmatchedSystem", "Unmatched System Entries"),
        ):
            if key in data:
                blocks.append(self.table(
                    title, data.get(key), UNMATCHED_COLUMNS, key=key, with_totals=True,
                ))
        return blocks
