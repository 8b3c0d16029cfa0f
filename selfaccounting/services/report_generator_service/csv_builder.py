"""
CSV Builder - single forward pass over the report blocks.

Preamble (organization, title, period, VAT number, generated line), a
SUMMARY section when the metadata carries one, then every block in
document order. Currency and date values are written as their display
strings, so totals read exactly as in the print document.

Part of the report_generator_service package.
"""

import csv
import logging
from datetime import datetime, timezone
from io import StringIO

from selfaccounting.config import Settings, settings as default_settings
from selfaccounting.currency_utils import format_datetime, format_period
from selfaccounting.schemas.report import ReportData
from selfaccounting.services.report_generator_service.blocks import (
    KeyValueBlock,
    SummaryBand,
    TableBlock,
    TextBlock,
)
from selfaccounting.services.report_generator_service.descriptors import report_title
from selfaccounting.services.report_generator_service.formatting import NO_DATA_MESSAGE, ValueFormatter
from selfaccounting.services.report_generator_service.pdf_blocks import card_text, total_text
from selfaccounting.services.report_generator_service.renderers import build_blocks, get_renderer

logger = logging.getLogger(__name__)

TARGET = "csv"
SUMMARY_HEADING = "SUMMARY"


class CsvBuilder:
    """Thin wrapper over csv.writer that knows how to emit blocks."""

    def __init__(self, fmt: ValueFormatter):
        self.fmt = fmt
        self.buffer = StringIO()
        self.writer = csv.writer(self.buffer, lineterminator="\n")

    def row(self, *values):
        self.writer.writerow(["" if v is None else v for v in values])

    def blank(self):
        self.writer.writerow([])

    def write_preamble(self, report: ReportData, title: str, config: Settings):
        meta = report.metadata
        self.row(meta.organization_name or config.default_organization_name)
        self.row(title)
        period = meta.report_period
        if period and (period.start_date or period.end_date):
            self.row(f"Period: {format_period(period.start_date, period.end_date)}")
        if meta.vat_number:
            self.row(f"VAT Number: {meta.vat_number}")
        self.row(f"Generated: {format_datetime(meta.generated_at or datetime.now(timezone.utc))}")
        self.blank()

    def write_cards(self, cards):
        for card in cards:
            self.row(card.label, card_text(card, self.fmt))

    def write_table(self, block: TableBlock):
        if block.title:
            self.row(block.title)
        if block.is_empty:
            self.row(block.empty_message)
            self.blank()
            return
        columns = block.columns_for(TARGET)
        self.row(*[block.label(c) for c in columns])
        for data in block.rows:
            self.row(*[self.fmt.cell(data.get(c), c, block.kinds.get(c)) for c in columns])
        if block.totals:
            self.row(*[total_text(block.totals.get(c), c, block, self.fmt) for c in columns])
        self.blank()

    def write_block(self, block):
        if TARGET not in block.targets:
            return
        if isinstance(block, TableBlock):
            self.write_table(block)
            return
        if isinstance(block, SummaryBand) and block.key == "summary":
            self.row(SUMMARY_HEADING)
        elif block.title:
            self.row(block.title)
        if isinstance(block, (SummaryBand, KeyValueBlock)):
            items = block.cards if isinstance(block, SummaryBand) else block.items
            if items:
                self.write_cards(items)
            else:
                self.row(NO_DATA_MESSAGE)
        elif isinstance(block, TextBlock):
            self.row(block.text)
        self.blank()

    def to_bytes(self) -> bytes:
        return self.buffer.getvalue().encode("utf-8")


def generate_csv(report, config: Settings = None) -> bytes:
    """
    Generate the delimited-text export for a report

    Args:
        report: ReportData or plain mapping
        config: Settings override

    Returns:
        UTF-8 bytes with "\\n" line endings
    """
    config = config or default_settings
    report = ReportData.coerce(report)
    strategy = get_renderer(report)
    fmt = ValueFormatter.for_report(report, config.default_currency)

    builder = CsvBuilder(fmt)
    builder.write_preamble(report, report_title(report.type), config)
    for block in build_blocks(report, fmt, strategy):
        builder.write_block(block)
    data = builder.to_bytes()
    logger.info(f"CSV generated for {report.type}: {len(data)} bytes")
    return data
