"""
Print backend for document blocks - walks blocks into a PaginationController.

Part of the report_generator_service package.
"""

from typing import Any, Optional

from selfaccounting.services.brand_service import hex_to_rgb
from selfaccounting.services.report_generator_service.blocks import (
    KeyValueBlock,
    SummaryBand,
    TableBlock,
    TextBlock,
)
from selfaccounting.services.report_generator_service.column_planner import plan_columns
from selfaccounting.services.report_generator_service.formatting import NO_DATA_MESSAGE, ValueFormatter
from selfaccounting.services.report_generator_service.pdf_layout import PaginationController

TARGET = "print"


def card_text(card, fmt: ValueFormatter) -> str:
    return card.text if card.text is not None else fmt.display(card.value, card.kind)


def total_text(value: Any, column: str, block: TableBlock, fmt: ValueFormatter) -> str:
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        return value
    return fmt.display(value, block.kind(column))


def write_table_block(ctl: PaginationController, block: TableBlock, fmt: ValueFormatter,
                      report_type: str, accent: Optional[tuple] = None):
    """Section title, then the table (or the no-data notice when it has no rows)."""
    if block.title:
        ctl.write_section_title(block.title, accent)
    if block.is_empty:
        ctl.write_notice(block.empty_message)
        ctl.skip(6)
        return

    columns = block.columns_for(TARGET)
    plan = plan_columns(report_type, None, ctl.content_width, columns=columns, weights=block.weights)
    align = [block.align(c) for c in columns]
    ctl.write_table_header([block.label(c) for c in columns], plan.widths, align)
    for index, row in enumerate(block.rows):
        ctl.write_row([fmt.cell(row.get(c), c, block.kinds.get(c)) for c in columns], index)
    if block.totals:
        ctl.write_totals_row([total_text(block.totals.get(c), c, block, fmt) for c in columns])
    ctl.end_table()


def write_block(ctl: PaginationController, block, fmt: ValueFormatter, report_type: str):
    if TARGET not in block.targets:
        return
    if isinstance(block, TableBlock):
        write_table_block(ctl, block, fmt, report_type)
        return

    accent = hex_to_rgb(block.accent) if getattr(block, "accent", None) else None
    if block.title:
        ctl.write_section_title(block.title, accent)

    if isinstance(block, SummaryBand):
        per_row = 4 if ctl.content_width > 600 else 3
        ctl.write_cards([(c.label, card_text(c, fmt), c.emphasis) for c in block.cards], per_row, accent)
        ctl.skip(4)
    elif isinstance(block, KeyValueBlock):
        if block.items:
            ctl.write_key_values([(c.label, card_text(c, fmt), c.emphasis) for c in block.items])
        else:
            ctl.write_notice(NO_DATA_MESSAGE)
        ctl.skip(8)
    elif isinstance(block, TextBlock):
        ctl.write_text(block.text)
        ctl.skip(8)
