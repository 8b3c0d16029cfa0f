"""
XLSX Builder - multi-sheet spreadsheets with openpyxl.

Every workbook starts with a "Summary" sheet carrying the organization
identity header, the summary bands and any table without a sheet of its
own. Breakdown tables (pivots, ledger accounts, itemized sections) get
their own sheets. Currency cells are numeric with a currency number
format, date cells are real dates, so the workbook stays calculable.

Part of the report_generator_service package.
"""

import logging
import re
from datetime import datetime, timezone
from io import BytesIO
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.formatting.rule import CellIsRule
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

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
from selfaccounting.services.report_generator_service.field_semantics import FieldKind
from selfaccounting.services.report_generator_service.formatting import NO_DATA_MESSAGE, ValueFormatter
from selfaccounting.services.report_generator_service.renderers import build_blocks, get_renderer

logger = logging.getLogger(__name__)

TARGET = "sheet"
SUMMARY_SHEET = "Summary"
MAX_SHEET_NAME = 31
DATE_FORMAT = "dd-mmm-yyyy"
MIN_COLUMN_WIDTH = 12

_INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")

HEADER_FILL = PatternFill(start_color="1E3A8A", end_color="1E3A8A", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF")
ZEBRA_FILL = PatternFill(start_color="F9FAFB", end_color="F9FAFB", fill_type="solid")
TOTAL_FILL = PatternFill(start_color="E8EEF5", end_color="E8EEF5", fill_type="solid")
VAT_HIGHLIGHT_FILL = PatternFill(start_color="FFE5E5", end_color="FFE5E5", fill_type="solid")
HEADER_BORDER = Border(*(Side(style="thin", color="000000"),) * 4)
CELL_BORDER = Border(*(Side(style="thin", color="E5E7EB"),) * 4)
TITLE_FONT = Font(bold=True, size=14, color="1E3A8A")
SECTION_FONT = Font(bold=True, size=12, color="1E3A8A")
ORG_FONT = Font(bold=True, size=16)
LABEL_FONT = Font(bold=True)
NOTICE_FONT = Font(italic=True, color="6B7280")

_ALIGN = {
    "left": Alignment(horizontal="left", vertical="center"),
    "center": Alignment(horizontal="center", vertical="center"),
    "right": Alignment(horizontal="right", vertical="center"),
}


def sanitize_sheet_name(name: Optional[str], existing: List[str], fallback: str = "Sheet") -> str:
    """
    Make a valid, unique worksheet name

    Strips []:*?/\\ characters, trims to 31 characters, falls back to
    ``fallback`` when nothing is left, and appends " (2)", " (3)" ... on
    case-insensitive collisions.
    """
    base = _INVALID_SHEET_CHARS.sub("", name or "").strip().strip("'")[:MAX_SHEET_NAME].strip()
    if not base:
        base = fallback
    taken = {e.lower() for e in existing}
    candidate = base
    n = 2
    while candidate.lower() in taken:
        suffix = f" ({n})"
        candidate = base[:MAX_SHEET_NAME - len(suffix)].rstrip() + suffix
        n += 1
    return candidate


def is_vat_column(column: str) -> bool:
    lowered = column.lower()
    return lowered in ("vat", "vatamount", "vat_amount")


class WorkbookBuilder:
    """Writes blocks into a workbook, tracking the next free row per sheet."""

    def __init__(self, report: ReportData, fmt: ValueFormatter, config: Settings):
        self.report = report
        self.fmt = fmt
        self.config = config
        self.wb = Workbook()
        self.summary = self.wb.active
        self.summary.title = SUMMARY_SHEET
        self.next_row = {SUMMARY_SHEET: 1}
        self.widths = {}
        self.frozen = set()

    # ----------------------------------------------------------------
    # Sheets
    # ----------------------------------------------------------------

    def sheet_for(self, block):
        name = getattr(block, "sheet_name", None)
        if not name:
            return self.summary
        title = sanitize_sheet_name(name, self.wb.sheetnames, fallback="Data")
        ws = self.wb.create_sheet(title)
        self.next_row[ws.title] = 1
        return ws

    def _row(self, ws) -> int:
        return self.next_row[ws.title]

    def _advance(self, ws, rows: int = 1):
        self.next_row[ws.title] += rows

    def _track_width(self, ws, column_index: int, text):
        key = (ws.title, column_index)
        length = len(str(text)) if text is not None else 0
        self.widths[key] = max(self.widths.get(key, MIN_COLUMN_WIDTH), length + 2)

    def _write_value(self, ws, row: int, column_index: int, value, kind: FieldKind):
        cell = ws.cell(row=row, column=column_index, value=self.fmt.sheet_value(value, kind))
        if kind == FieldKind.CURRENCY and isinstance(cell.value, (int, float)):
            cell.number_format = self.fmt.sheet_currency_format
            cell.alignment = _ALIGN["right"]
        elif kind == FieldKind.DATE and isinstance(cell.value, datetime):
            cell.number_format = DATE_FORMAT
            cell.alignment = _ALIGN["center"]
        elif kind in (FieldKind.NUMBER, FieldKind.PERCENT):
            cell.alignment = _ALIGN["right"]
        return cell

    # ----------------------------------------------------------------
    # Identity header
    # ----------------------------------------------------------------

    def write_identity_header(self, title: str):
        ws = self.summary
        meta = self.report.metadata
        org_name = meta.organization_name or self.config.default_organization_name
        row = self._row(ws)

        ws.cell(row=row, column=1, value=org_name).font = ORG_FONT
        ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=4)
        row += 1
        ws.cell(row=row, column=1, value=title).font = TITLE_FONT
        row += 1

        lines = []
        period = meta.report_period
        if period and (period.start_date or period.end_date):
            lines.append(("Period", format_period(period.start_date, period.end_date)))
        if meta.vat_number:
            lines.append(("VAT Number", meta.vat_number))
        if meta.address:
            lines.append(("Address", meta.address))
        lines.append(("Currency", self.fmt.currency))
        lines.append(("Generated", format_datetime(meta.generated_at or datetime.now(timezone.utc))))
        generated_by = meta.generated_by_name or meta.generated_by
        if generated_by:
            lines.append(("Generated By", generated_by))
        for label, value in lines:
            ws.cell(row=row, column=1, value=f"{label}:").font = LABEL_FONT
            ws.cell(row=row, column=2, value=value)
            row += 1
        self.next_row[ws.title] = row + 1  # blank spacer row

    # ----------------------------------------------------------------
    # Blocks
    # ----------------------------------------------------------------

    def write_section_title(self, ws, title: Optional[str]):
        if not title:
            return
        ws.cell(row=self._row(ws), column=1, value=title).font = SECTION_FONT
        self._advance(ws)

    def write_notice(self, ws, message: str):
        ws.cell(row=self._row(ws), column=1, value=message).font = NOTICE_FONT
        self._advance(ws, 2)

    def write_cards(self, ws, cards):
        for card in cards:
            row = self._row(ws)
            ws.cell(row=row, column=1, value=card.label).font = LABEL_FONT
            self._track_width(ws, 1, card.label)
            if card.text is not None:
                cell = ws.cell(row=row, column=2, value=card.text)
            else:
                cell = self._write_value(ws, row, 2, card.value, card.kind)
            if card.emphasis:
                cell.font = LABEL_FONT
            self._advance(ws)
        self._advance(ws)

    def write_table(self, block: TableBlock):
        ws = self.sheet_for(block)
        self.write_section_title(ws, block.title)
        if block.is_empty:
            self.write_notice(ws, block.empty_message)
            return

        columns = block.columns_for(TARGET)
        header_row = self._row(ws)
        for j, column in enumerate(columns, start=1):
            label = block.label(column)
            cell = ws.cell(row=header_row, column=j, value=label)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.border = HEADER_BORDER
            cell.alignment = _ALIGN["center"]
            self._track_width(ws, j, label)

        first_data_row = header_row + 1
        for i, data in enumerate(block.rows):
            row = first_data_row + i
            for j, column in enumerate(columns, start=1):
                cell = self._write_value(ws, row, j, data.get(column), block.kind(column))
                cell.border = CELL_BORDER
                if cell.alignment.horizontal is None:
                    cell.alignment = _ALIGN[block.align(column)]
                if i % 2 == 1:
                    cell.fill = ZEBRA_FILL
                self._track_width(ws, j, self.fmt.display(data.get(column), block.kind(column)))
        last_data_row = first_data_row + len(block.rows) - 1

        last_column = get_column_letter(len(columns))
        # one frozen header and one filter per sheet: the first table wins
        if ws.title not in self.frozen:
            self.frozen.add(ws.title)
            ws.freeze_panes = ws.cell(row=first_data_row, column=1)
            ws.auto_filter.ref = f"A{header_row}:{last_column}{last_data_row}"

        for j, column in enumerate(columns, start=1):
            if is_vat_column(column):
                letter = get_column_letter(j)
                ws.conditional_formatting.add(
                    f"{letter}{first_data_row}:{letter}{last_data_row}",
                    CellIsRule(operator="greaterThan", formula=["0"], fill=VAT_HIGHLIGHT_FILL),
                )

        row = last_data_row + 1
        if block.totals:
            for j, column in enumerate(columns, start=1):
                value = block.totals.get(column)
                if isinstance(value, str) or value is None:
                    cell = ws.cell(row=row, column=j, value=value or None)
                else:
                    cell = self._write_value(ws, row, j, value, block.kind(column))
                cell.font = LABEL_FONT
                cell.fill = TOTAL_FILL
                cell.border = CELL_BORDER
            row += 1
        self.next_row[ws.title] = row + 1

    def write_block(self, block):
        if TARGET not in block.targets:
            return
        if isinstance(block, TableBlock):
            self.write_table(block)
            return
        ws = self.sheet_for(block)
        self.write_section_title(ws, block.title)
        if isinstance(block, (SummaryBand, KeyValueBlock)):
            items = block.cards if isinstance(block, SummaryBand) else block.items
            if items:
                self.write_cards(ws, items)
            else:
                self.write_notice(ws, NO_DATA_MESSAGE)
        elif isinstance(block, TextBlock):
            ws.cell(row=self._row(ws), column=1, value=block.text).alignment = Alignment(wrap_text=True)
            self._advance(ws, 2)

    def apply_column_widths(self):
        for (title, column_index), width in self.widths.items():
            self.wb[title].column_dimensions[get_column_letter(column_index)].width = width

    def to_bytes(self) -> bytes:
        self.apply_column_widths()
        buffer = BytesIO()
        self.wb.save(buffer)
        return buffer.getvalue()


def generate_xlsx(report, config: Settings = None) -> bytes:
    """
    Generate the spreadsheet for a report

    Args:
        report: ReportData or plain mapping
        config: Settings override

    Returns:
        XLSX bytes
    """
    config = config or default_settings
    report = ReportData.coerce(report)
    strategy = get_renderer(report)
    fmt = ValueFormatter.for_report(report, config.default_currency)

    builder = WorkbookBuilder(report, fmt, config)
    builder.write_identity_header(report_title(report.type))
    for block in build_blocks(report, fmt, strategy):
        builder.write_block(block)
    data = builder.to_bytes()
    logger.info(f"XLSX generated for {report.type}: {len(builder.wb.sheetnames)} sheet(s), {len(data)} bytes")
    return data
