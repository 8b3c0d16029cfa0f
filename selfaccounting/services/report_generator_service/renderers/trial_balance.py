"""
Trial balance renderer.

Accounts carry either a single period (debit / credit / balance) or the
opening / period / closing triple. Balances are stored debit-positive and
displayed sign-inverted for credit-normal account types.

Part of the report_generator_service package.
"""

from selfaccounting.services.report_generator_service.blocks import Card
from selfaccounting.services.report_generator_service.descriptors import TRIAL_BALANCE
from selfaccounting.services.report_generator_service.field_semantics import FieldKind
from selfaccounting.services.report_generator_service.renderers.base import (
    RendererStrategy,
    decimal_sum,
    present_columns,
)
from selfaccounting.services.report_generator_service.renderers.registry import register_renderer
from selfaccounting.services.report_generator_service.totals import display_balance

LEGACY_COLUMNS = ["accountName", "accountType", "debit", "credit", "balance"]
PERIOD_COLUMNS = [
    "accountName", "accountType",
    "openingDebit", "openingCredit", "openingBalance",
    "debit", "credit",
    "closingDebit", "closingCredit", "closingBalance",
]
REQUIRED_COLUMNS = ("accountName", "accountType", "debit", "credit")
PERIOD_KEYS = ("openingDebit", "openingCredit", "openingBalance", "closingDebit", "closingCredit", "closingBalance")
BALANCE_COLUMNS = ("balance", "openingBalance", "closingBalance")
SUMMED_COLUMNS = ("openingDebit", "openingCredit", "debit", "credit", "closingDebit", "closingCredit")

# summary key -> account field it is summed from when the summary omits it
DERIVED_SUMMARY = {
    "openingDebit": "openingDebit",
    "openingCredit": "openingCredit",
    "totalDebit": "debit",
    "totalCredit": "credit",
    "closingDebit": "closingDebit",
    "closingCredit": "closingCredit",
}

LABELS = {
    "accountCode": "Code",
    "accountName": "Account",
    "accountType": "Type",
    "openingDebit": "Opening Debit",
    "openingCredit": "Opening Credit",
    "openingBalance": "Opening Balance",
    "debit": "Debit",
    "credit": "Credit",
    "balance": "Balance",
    "closingDebit": "Closing Debit",
    "closingCredit": "Closing Credit",
    "closingBalance": "Closing Balance",
}


def has_period_columns(accounts) -> bool:
    return any(key in a for a in accounts for key in PERIOD_KEYS)


def display_rows(accounts, balance_columns=BALANCE_COLUMNS):
    """Copies of the account rows with balances in display sign."""
    rows = []
    for account in accounts:
        row = dict(account)
        for column in balance_columns:
            if column in row:
                row[column] = display_balance(row.get("accountType"), row[column])
        rows.append(row)
    return rows


@register_renderer(TRIAL_BALANCE)
class TrialBalanceRenderer(RendererStrategy):

    def accounts(self, report):
        accounts = report.payload.get("accounts")
        return [a for a in accounts if isinstance(a, dict)] if isinstance(accounts, list) else []

    def render_summary(self, report, fmt):
        data = report.payload
        accounts = self.accounts(report)
        summary = dict(data.get("summary") or {})
        for key, field in DERIVED_SUMMARY.items():
            if summary.get(key) is None and any(field in a for a in accounts):
                summary[key] = decimal_sum(a.get(field) for a in accounts)
        if summary.get("totalBalance") is None and accounts:
            summary["totalBalance"] = decimal_sum([summary.get("totalDebit")]) - decimal_sum([summary.get("totalCredit")])

        cards = self.cards_from_specs({"summary": summary})
        if summary.get("accountCount") is not None:
            cards.append(Card("Accounts", summary["accountCount"], FieldKind.NUMBER))
        band = self.summary_band("Trial Balance Summary", cards)
        return [band] if band else []

    def render_sections(self, report, fmt):
        accounts = self.accounts(report)
        if has_period_columns(accounts):
            columns = present_columns(accounts, PERIOD_COLUMNS, required=REQUIRED_COLUMNS)
        else:
            columns = list(LEGACY_COLUMNS)
        if any("accountCode" in a for a in accounts):
            columns.insert(0, "accountCode")

        block = self.table(
            "Accounts",
            display_rows(accounts),
            columns,
            key="accounts",
            labels=LABELS,
            weights=self.descriptor.column_weights,
            sheet_name="Accounts",
        )
        if block.rows:
            totals = {c: "" for c in columns}
            totals["accountName"] = "Total"
            for column in SUMMED_COLUMNS:
                if column in columns:
                    totals[column] = decimal_sum(a.get(column) for a in accounts)
            block.totals = totals
        return [block]
