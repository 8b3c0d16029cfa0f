"""
General ledger renderer - one section (and one spreadsheet tab) per account.

Part of the report_generator_service package.
"""

from selfaccounting.services.report_generator_service.blocks import TableBlock
from selfaccounting.services.report_generator_service.descriptors import GENERAL_LEDGER
from selfaccounting.services.report_generator_service.renderers.base import (
    RendererStrategy,
    decimal_sum,
)
from selfaccounting.services.report_generator_service.renderers.registry import register_renderer
from selfaccounting.services.report_generator_service.totals import display_balance

COLUMNS = ["date", "reference", "description", "debit", "credit", "balance"]


def account_title(account) -> str:
    code = account.get("accountCode")
    name = account.get("accountName") or "Account"
    return f"{code} - {name}" if code else name


@register_renderer(GENERAL_LEDGER)
class GeneralLedgerRenderer(RendererStrategy):

    def accounts(self, report):
        accounts = report.payload.get("accounts")
        return [a for a in accounts if isinstance(a, dict)] if isinstance(accounts, list) else []

    def render_summary(self, report, fmt):
        accounts = self.accounts(report)
        summary = dict(report.payload.get("summary") or {})
        entries = [e for a in accounts for e in (a.get("entries") or []) if isinstance(e, dict)]
        if summary.get("totalDebit") is None and entries:
            summary["totalDebit"] = decimal_sum(e.get("debit") for e in entries)
        if summary.get("totalCredit") is None and entries:
            summary["totalCredit"] = decimal_sum(e.get("credit") for e in entries)
        band = self.summary_band("Ledger Summary", self.cards_from_specs({"summary": summary}))
        return [band] if band else []

    def render_sections(self, report, fmt):
        accounts = self.accounts(report)
        if not accounts:
            return [TableBlock("Accounts", COLUMNS, [], key="accounts")]

        blocks = []
        for account in accounts:
            account_type = account.get("accountType")
            entries = [e for e in (account.get("entries") or []) if isinstance(e, dict)]
            rows = []
            if account.get("openingBalance") is not None:
                rows.append({
                    "description": "Opening Balance",
                    "balance": display_balance(account_type, account["openingBalance"]),
                })
            for entry in entries:
                row = {c: entry.get(c) for c in COLUMNS}
                row["balance"] = display_balance(account_type, entry.get("balance"))
                rows.append(row)

            title = account_title(account)
            block = self.table(
                title, rows if entries else [], COLUMNS, key=f"account:{title}",
                weights=self.descriptor.column_weights, sheet_name=title,
            )
            if entries:
                block.totals = {
                    "date": "",
                    "reference": "",
                    "description": "Closing Balance",
                    "debit": decimal_sum(e.get("debit") for e in entries),
                    "credit": decimal_sum(e.get("credit") for e in entries),
                    "balance": display_balance(account_type, account.get("closingBalance"))
                    if account.get("closingBalance") is not None else "",
                }
            blocks.append(block)
        return blocks
