"""
Format-neutral document blocks.

Renderer strategies describe a report as a list of blocks; the print,
spreadsheet and delimited-text backends each walk the same list, so a
section exists in every format or in none (unless a block restricts its
targets, e.g. pivot tables that only make sense as spreadsheet tabs).

Part of the report_generator_service package.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Sequence

from selfaccounting.currency_utils import format_header_label
from selfaccounting.services.report_generator_service.field_semantics import (
    FieldKind,
    classify_field,
)
from selfaccounting.services.report_generator_service.formatting import NO_DATA_MESSAGE

ALL_TARGETS: FrozenSet[str] = frozenset({"print", "sheet", "csv"})
SHEET_ONLY: FrozenSet[str] = frozenset({"sheet"})


@dataclass
class Card:
    label: str
    value: Any
    kind: FieldKind = FieldKind.CURRENCY
    emphasis: bool = False
    text: Optional[str] = None  # preformatted display (e.g. "Travel (AED 10.00)")


@dataclass
class SummaryBand:
    title: str
    cards: List[Card]
    key: str = ""
    accent: Optional[str] = None
    targets: FrozenSet[str] = ALL_TARGETS


@dataclass
class KeyValueBlock:
    title: str
    items: List[Card]
    key: str = ""
    targets: FrozenSet[str] = ALL_TARGETS


@dataclass
class TableBlock:
    title: Optional[str]
    columns: List[str]
    rows: List[Mapping[str, Any]]
    key: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    kinds: Dict[str, FieldKind] = field(default_factory=dict)
    totals: Optional[Dict[str, Any]] = None
    sheet_name: Optional[str] = None
    weights: Optional[Dict[str, float]] = None
    print_columns: Optional[List[str]] = None
    empty_message: str = NO_DATA_MESSAGE
    targets: FrozenSet[str] = ALL_TARGETS

    def label(self, column: str) -> str:
        return self.labels.get(column) or format_header_label(column)

    def kind(self, column: str) -> FieldKind:
        return self.kinds.get(column) or classify_field(column).kind

    def align(self, column: str) -> str:
        kind = self.kinds.get(column)
        if kind in (FieldKind.CURRENCY, FieldKind.NUMBER, FieldKind.PERCENT):
            return "right"
        if kind == FieldKind.DATE:
            return "center"
        if kind == FieldKind.TEXT:
            return "left"
        return classify_field(column).align

    def columns_for(self, target: str) -> List[str]:
        if target == "print" and self.print_columns is not None:
            return list(self.print_columns)
        return list(self.columns)

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclass
class TextBlock:
    title: Optional[str]
    text: str
    key: str = ""
    targets: FrozenSet[str] = ALL_TARGETS


def columns_from_rows(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """Column order: keys of the first row, then any new keys in later rows."""
    columns: List[str] = []
    seen = set()
    for row in rows:
        for key in row:
            if key not in seen:
                seen.add(key)
                columns.append(key)
    return columns
