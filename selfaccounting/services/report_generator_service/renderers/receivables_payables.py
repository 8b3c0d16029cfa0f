"""
Receivables / payables aging renderer.

Part of the report_generator_service package.
"""

from decimal import Decimal

from selfaccounting.currency_utils import to_decimal
from selfaccounting.services.report_generator_service.blocks import Card, SummaryBand
from selfaccounting.services.report_generator_service.descriptors import PAYABLES, RECEIVABLES
from selfaccounting.services.report_generator_service.field_semantics import FieldKind
from selfaccounting.services.report_generator_service.renderers.base import (
    RendererStrategy,
    decimal_sum,
    present_columns,
)
from selfaccounting.services.report_generator_service.renderers.registry import register_renderer

COLUMNS = [
    "partyName", "invoiceNumber", "invoiceDate", "dueDate",
    "totalAmount", "paidAmount", "balanceDue", "daysOverdue",
]

AGING_BUCKETS = (
    ("current", "Current"),
    ("days1To30", "1-30 Days"),
    ("days31To60", "31-60 Days"),
    ("days61To90", "61-90 Days"),
    ("over90", "Over 90 Days"),
)


def bucket_for(days_overdue) -> str:
    days = to_decimal(days_overdue)
    if days is None or days <= 0:
        return "current"
    if days <= 30:
        return "days1To30"
    if days <= 60:
        return "days31To60"
    if days <= 90:
        return "days61To90"
    return "over90"


def aging_from_entries(entries):
    """Outstanding balance per aging bucket, from each entry's days overdue."""
    aging = {key: Decimal("0") for key, _ in AGING_BUCKETS}
    for entry in entries:
        aging[bucket_for(entry.get("daysOverdue"))] += to_decimal(entry.get("balanceDue")) or Decimal("0")
    return aging


@register_renderer(RECEIVABLES, PAYABLES)
class AgingRenderer(RendererStrategy):

    @property
    def party_label(self) -> str:
        return "Customer" if self.report_type == RECEIVABLES else "Vendor"

    def entries(self, report):
        entries = report.payload.get("entries")
        return [e for e in entries if isinstance(e, dict)] if isinstance(entries, list) else []

    def render_summary(self, report, fmt):
        data = report.payload
        entries = self.entries(report)
        summary = dict(data.get("summary") or {})
        if entries:
            derived = {
                "totalInvoiced": decimal_sum(e.get("totalAmount") for e in entries),
                "totalPaid": decimal_sum(e.get("paidAmount") for e in entries),
                "totalOutstanding": decimal_sum(e.get("balanceDue") for e in entries),
                "overdueAmount": decimal_sum(
                    e.get("balanceDue") for e in entries if bucket_for(e.get("daysOverdue")) != "current"
                ),
            }
            for key, value in derived.items():
                if summary.get(key) is None:
                    summary[key] = value

        blocks = []
        band = self.summary_band("Summary", self.cards_from_specs({"summary": summary}))
        if band:
            blocks.append(band)

        aging = data.get("aging") if isinstance(data.get("aging"), dict) else None
        if aging is None and entries:
            aging = aging_from_entries(entries)
        if aging:
            blocks.append(SummaryBand(
                "Aging",
                [Card(label, aging.get(key) or 0, FieldKind.CURRENCY, key == "over90") for key, label in AGING_BUCKETS],
                key="aging",
                accent=self.descriptor.accent,
            ))
        return blocks

    def render_sections(self, report, fmt):
        entries = self.entries(report)
        columns = present_columns(entries, COLUMNS, required=("partyName", "balanceDue")) if entries else COLUMNS
        block = self.table(
            "Open Items", entries, columns, key="entries", with_totals=True,
            labels={"partyName": self.party_label, "invoiceNumber": "Invoice #", "daysOverdue": "Days Overdue"},
            weights=self.descriptor.column_weights, sheet_name="Open Items",
        )
        return [block]
