"""
Renderer strategy base class and shared block builders.

Part of the report_generator_service package.
"""

from typing import Any, Iterable, List, Mapping, Optional, Sequence

from selfaccounting.currency_utils import format_period, to_decimal
from selfaccounting.services.report_generator_service.blocks import (
    Card,
    SummaryBand,
    TableBlock,
)
from selfaccounting.services.report_generator_service.descriptors import (
    METADATA_SUMMARY_CARDS,
    CardSpec,
    get_descriptor,
    lookup,
)
from selfaccounting.services.report_generator_service.field_semantics import FieldKind
from selfaccounting.services.report_generator_service.formatting import ValueFormatter
from selfaccounting.services.report_generator_service.totals import calculate_totals


class RendererStrategy:
    """
    Describes one report type as format-neutral blocks.

    Subclasses override ``render_summary`` (the summary band) and
    ``render_sections`` (itemized tables). ``render_pdf_pages`` returns
    None to use the shared print layout; only fixed-layout documents
    override it.
    """

    def __init__(self, report_type: str):
        self.report_type = report_type
        self.descriptor = get_descriptor(report_type)

    def render_summary(self, report, fmt: ValueFormatter) -> list:
        return []

    def render_sections(self, report, fmt: ValueFormatter) -> list:
        return []

    def render_pdf_pages(self, report, fmt: ValueFormatter, logo, config) -> Optional[list]:
        return None

    # ----------------------------------------------------------------
    # Helpers for subclasses
    # ----------------------------------------------------------------

    def cards_from_specs(self, data: Mapping[str, Any], specs: Sequence[CardSpec] = None) -> List[Card]:
        """Cards for every spec whose value is present in ``data``."""
        cards = []
        for spec in specs if specs is not None else self.descriptor.cards:
            value = lookup(data, spec.key)
            if value is None:
                continue
            cards.append(Card(spec.label, value, spec.kind, spec.emphasis))
        return cards

    def summary_band(self, title: str, cards: List[Card], key: str = "type_summary") -> Optional[SummaryBand]:
        if not cards:
            return None
        return SummaryBand(title, cards, key=key, accent=self.descriptor.accent)

    def table(
        self,
        title: Optional[str],
        rows: Any,
        columns: Sequence[str],
        key: str = "",
        with_totals: bool = False,
        **kwargs,
    ) -> TableBlock:
        """A table over ``rows``; a missing or non-list value renders the no-data notice."""
        rows = [r for r in rows if isinstance(r, Mapping)] if isinstance(rows, list) else []
        block = TableBlock(title, list(columns), rows, key=key, **kwargs)
        if with_totals and rows:
            block.totals = calculate_totals(rows, block.columns, block.kinds)
        return block


def present_columns(rows: Iterable[Mapping[str, Any]], preferred: Sequence[str],
                    required: Sequence[str] = ()) -> List[str]:
    """Preferred columns that occur in at least one row (required ones always kept)."""
    rows = list(rows)
    return [c for c in preferred if c in required or any(c in row for row in rows)]


def decimal_sum(values: Iterable[Any]):
    total = to_decimal(0)
    for value in values:
        amount = to_decimal(value)
        if amount is not None:
            total += amount
    return total


def first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if isinstance(data, Mapping) and data.get(key) is not None:
            return data.get(key)
    return None


def metadata_summary_band(report, fmt: ValueFormatter) -> Optional[SummaryBand]:
    """
    The "Summary (Period: ...)" band built from metadata.summary

    Compound figures (top category, top vendor, busiest uploader) become
    preformatted text cards.
    """
    summary = report.metadata.summary
    if not summary:
        return None

    cards = []
    by_key = {spec.key: spec for spec in METADATA_SUMMARY_CARDS}

    def add(key):
        spec = by_key[key]
        value = summary.get(key)
        if value is not None:
            cards.append(Card(spec.label, value, spec.kind, spec.emphasis))

    for key in ("totalExpenses", "totalAmountBeforeVat", "totalVatAmount",
                "totalAmountAfterVat", "averageExpenseAmount"):
        add(key)

    category = summary.get("highestCategorySpend")
    if isinstance(category, Mapping) and category.get("category"):
        cards.append(Card(
            "Highest Category Spend", category.get("amount"), FieldKind.TEXT,
            text=f"{category['category']} ({fmt.money(category.get('amount'))})",
        ))
    vendor = summary.get("topVendor")
    if isinstance(vendor, Mapping) and vendor.get("vendor"):
        cards.append(Card(
            "Top Vendor", vendor.get("amount"), FieldKind.TEXT,
            text=f"{vendor['vendor']} ({fmt.money(vendor.get('amount'))})",
        ))

    add("totalCreditNotes")
    add("totalAdjustments")

    uploader = summary.get("userWithHighestUploadCount")
    if isinstance(uploader, Mapping) and uploader.get("user"):
        cards.append(Card(
            "User with Highest Upload Count", uploader.get("count"), FieldKind.TEXT,
            text=f"{uploader['user']} ({uploader.get('count') or 0} uploads)",
        ))

    if not cards:
        return None

    period = report.metadata.report_period
    period_text = format_period(period.start_date, period.end_date) if period else ""
    title = f"Summary (Period: {period_text})" if period_text else "Summary"
    return SummaryBand(title, cards, key="summary")
