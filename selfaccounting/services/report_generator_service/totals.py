"""
Totals, sign conventions and pivot aggregation.

Figures are summed as Decimal and rounded once, at display time, so the
printed, spreadsheet and delimited totals agree to the last digit.

Part of the report_generator_service package.
"""

from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from selfaccounting.currency_utils import parse_date, to_decimal
from selfaccounting.services.report_generator_service.field_semantics import (
    FieldKind,
    classify_field,
)

TOTAL_LABEL = "Total"

# Account types whose natural balance is a credit; shown sign-inverted
CREDIT_NORMAL_TYPES = frozenset({"liability", "liabilities", "revenue", "income", "equity"})


def sum_column(rows: Iterable[Mapping[str, Any]], column: str) -> Decimal:
    """Sum a column; non-numeric and missing values count as zero."""
    total = Decimal("0")
    for row in rows:
        amount = to_decimal(row.get(column))
        if amount is not None:
            total += amount
    return total


def calculate_totals(
    rows: Sequence[Mapping[str, Any]],
    columns: Sequence[str],
    kinds: Optional[Mapping[str, FieldKind]] = None,
) -> Dict[str, Any]:
    """
    Build the totals row for a table

    Summable columns get their Decimal sum, date/identifier columns stay blank,
    and the first remaining text column carries the "Total" label.

    Returns:
        Mapping column -> Decimal | "Total" | ""
    """
    kinds = kinds or {}
    totals: Dict[str, Any] = {}
    label_placed = False
    for column in columns:
        semantics = classify_field(column)
        kind = kinds.get(column, semantics.kind)
        summable = semantics.summable or (column in kinds and kind == FieldKind.CURRENCY)
        if kind in (FieldKind.CURRENCY, FieldKind.NUMBER) and summable:
            totals[column] = sum_column(rows, column)
        elif kind == FieldKind.TEXT and semantics.align == "left" and not label_placed:
            totals[column] = TOTAL_LABEL
            label_placed = True
        else:
            totals[column] = ""
    if not label_placed:
        for column in columns:
            if totals[column] == "":
                totals[column] = TOTAL_LABEL
                break
    return totals


def is_credit_normal(account_type: Optional[str]) -> bool:
    return (account_type or "").strip().lower() in CREDIT_NORMAL_TYPES


def display_balance(account_type: Optional[str], value: Any) -> Optional[Decimal]:
    """
    Balance as displayed for an account

    Stored balances are debit-positive; credit-normal accounts (Liability,
    Revenue, Equity) display the sign-inverted value so a healthy credit
    balance reads positive. Asset and Expense accounts display as stored.
    """
    amount = to_decimal(value)
    if amount is None:
        return None
    return -amount if is_credit_normal(account_type) else amount


def _first_value(row: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if row.get(key) is not None:
            return row.get(key)
    return None


AMOUNT_KEYS = ("amount", "baseAmount")
VAT_KEYS = ("vat", "vatAmount")
TOTAL_KEYS = ("total", "totalAmount")
DATE_KEYS = ("date", "expenseDate")


def _pivot_bucket() -> Dict[str, Any]:
    return {"count": 0, "amount": Decimal("0"), "vat": Decimal("0"), "total": Decimal("0")}


def aggregate_by(
    rows: Iterable[Mapping[str, Any]],
    keys: Sequence[str],
    fallback: str,
) -> "OrderedDict[str, Dict[str, Any]]":
    """
    Group rows by the first present key in ``keys`` in one linear pass

    Returns:
        Insertion-ordered mapping label -> {count, amount, vat, total}
    """
    groups: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    for row in rows:
        label = _first_value(row, keys)
        label = str(label) if label not in (None, "") else fallback
        bucket = groups.get(label)
        if bucket is None:
            bucket = groups[label] = _pivot_bucket()
        bucket["count"] += 1
        bucket["amount"] += to_decimal(_first_value(row, AMOUNT_KEYS)) or Decimal("0")
        bucket["vat"] += to_decimal(_first_value(row, VAT_KEYS)) or Decimal("0")
        bucket["total"] += to_decimal(_first_value(row, TOTAL_KEYS)) or Decimal("0")
    return groups


def monthly_breakdown(rows: Iterable[Mapping[str, Any]]) -> List[Tuple[str, Decimal, Decimal]]:
    """
    Spend and VAT per calendar month, chronologically

    Rows without a parseable date are skipped.

    Returns:
        List of ("Jan 2024", total_spend, vat)
    """
    months: Dict[Tuple[int, int], List[Decimal]] = {}
    for row in rows:
        parsed = parse_date(_first_value(row, DATE_KEYS))
        if parsed is None:
            continue
        bucket = months.setdefault((parsed.year, parsed.month), [Decimal("0"), Decimal("0")])
        spend = _first_value(row, TOTAL_KEYS)
        if spend is None:
            spend = _first_value(row, AMOUNT_KEYS)
        bucket[0] += to_decimal(spend) or Decimal("0")
        bucket[1] += to_decimal(_first_value(row, VAT_KEYS)) or Decimal("0")

    result = []
    for (year, month) in sorted(months):
        label = parse_date(f"{year:04d}-{month:02d}-01").strftime("%b %Y")
        spend, vat = months[(year, month)]
        result.append((label, spend, vat))
    return result
