"""
Column Layout Planner - choose, size and align table columns.

Part of the report_generator_service package.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from selfaccounting.services.report_generator_service.descriptors import (
    EXPENSE_LIST_TYPES,
    get_descriptor,
)
from selfaccounting.services.report_generator_service.field_semantics import classify_field

PRINT = "print"
SHEET = "sheet"
CSV = "csv"

# Ordered preference slots for expense lists on paper; first alias present wins
EXPENSE_PRINT_SLOTS = (
    ("date", "expenseDate"),
    ("category",),
    ("type", "expenseType"),
    ("vendor", "vendorName"),
    ("amount", "baseAmount"),
    ("vat", "vatAmount"),
    ("total", "totalAmount"),
    ("currency",),
    ("status",),
)
EXPENSE_PRINT_DENY = frozenset({"notes"})
EXPENSE_PRINT_MIN = 4
EXPENSE_PRINT_MAX = 6
# Slot indexes dropped first when more than EXPENSE_PRINT_MAX slots match
# (status, currency, type, category, vat); date, vendor, amount and total stay
EXPENSE_PRINT_DROP_ORDER = (8, 7, 2, 1, 5)


@dataclass
class ColumnPlan:
    columns: List[str]
    widths: List[float]
    align: List[str]

    def __len__(self) -> int:
        return len(self.columns)


def select_expense_print_columns(available: Sequence[str]) -> List[str]:
    """
    Pick the curated expense columns for the print document

    Args:
        available: Column names present in the data, in original order

    Returns:
        One alias per matched slot (slot order, at most EXPENSE_PRINT_MAX);
        topped up from the remaining columns up to EXPENSE_PRINT_MAX when fewer
        than EXPENSE_PRINT_MIN match
    """
    present = [c for c in available if c not in EXPENSE_PRINT_DENY]
    matched = {}
    for slot, aliases in enumerate(EXPENSE_PRINT_SLOTS):
        for alias in aliases:
            if alias in present:
                matched[slot] = alias
                break
    for slot in EXPENSE_PRINT_DROP_ORDER:
        if len(matched) <= EXPENSE_PRINT_MAX:
            break
        matched.pop(slot, None)
    chosen = [matched[slot] for slot in sorted(matched)]

    if len(chosen) < EXPENSE_PRINT_MIN:
        for column in present:
            if len(chosen) >= EXPENSE_PRINT_MAX:
                break
            if column not in chosen:
                chosen.append(column)
    return chosen


def select_columns(report_type: str, available: Sequence[str], target: str = PRINT) -> List[str]:
    """All columns, except the curated subset for expense lists on paper."""
    if target == PRINT and report_type in EXPENSE_LIST_TYPES:
        return select_expense_print_columns(available)
    return list(available)


def column_widths(
    columns: Sequence[str],
    available_width: float,
    weights: Optional[Mapping[str, float]] = None,
) -> List[float]:
    """Split the available width equally, or by weight when weights are defined."""
    if not columns:
        return []
    if not weights:
        return [available_width / len(columns)] * len(columns)
    raw = [float(weights.get(c, 1.0)) for c in columns]
    scale = available_width / sum(raw)
    return [w * scale for w in raw]


def plan_columns(
    report_type: str,
    sample_row: Mapping[str, object],
    available_width: float,
    target: str = PRINT,
    columns: Optional[Sequence[str]] = None,
    weights: Optional[Dict[str, float]] = None,
) -> ColumnPlan:
    """
    Plan the table layout for a report

    Args:
        report_type: Type tag (selects curation and descriptor weights)
        sample_row: First data row; its keys give the original column order
        available_width: Content width in points
        target: "print", "sheet" or "csv"
        columns: Explicit column list (skips selection when given)
        weights: Explicit width weights (defaults to the descriptor's)

    Returns:
        ColumnPlan with parallel columns, widths and alignments
    """
    if columns is None:
        columns = select_columns(report_type, list(sample_row or {}), target)
    else:
        columns = list(columns)
    if weights is None:
        weights = get_descriptor(report_type).column_weights
    widths = column_widths(columns, available_width, weights)
    align = [classify_field(c).align for c in columns]
    return ColumnPlan(columns=columns, widths=widths, align=align)
