"""
Field Semantics - map a row field name to its display semantics.

Report rows carry no type information; the field name is the only signal.
Every backend (print, spreadsheet, delimited text) asks this module how a
column should be formatted, aligned and totalled, so a field never reads as
currency in one format and as plain text in another.

Part of the report_generator_service package.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache


class FieldKind(str, Enum):
    CURRENCY = "currency"
    DATE = "date"
    NUMBER = "number"
    PERCENT = "percent"
    TEXT = "text"


@dataclass(frozen=True)
class FieldSemantics:
    kind: FieldKind
    align: str  # left | center | right
    summable: bool = False

    @property
    def pdf_align(self) -> str:
        return {"left": "L", "center": "C", "right": "R"}[self.align]


# Substrings that mark a monetary column (matched case-insensitively)
CURRENCY_TERMS = ("amount", "vat", "total", "debit", "credit", "balance")
# Monetary but per-unit: right-aligned, never summed
UNIT_PRICE_TERMS = ("price", "cost")

_CURRENCY = FieldSemantics(FieldKind.CURRENCY, "right", True)
_UNIT_PRICE = FieldSemantics(FieldKind.CURRENCY, "right", False)
_DATE = FieldSemantics(FieldKind.DATE, "center")
_COUNT = FieldSemantics(FieldKind.NUMBER, "right", True)
_NUMBER = FieldSemantics(FieldKind.NUMBER, "right")
_PERCENT = FieldSemantics(FieldKind.PERCENT, "right")
_IDENTIFIER = FieldSemantics(FieldKind.TEXT, "center")
_TEXT = FieldSemantics(FieldKind.TEXT, "left")

# Exact-name overrides, checked before the substring vocabulary
OVERRIDES = {
    "vatrate": _PERCENT,
    "taxrate": _PERCENT,
    "vatnumber": _TEXT,
    "vatstatus": _TEXT,
    "trn": _TEXT,
    "currency": _TEXT,
    "status": _TEXT,
    "accounttype": _TEXT,
    "account": _TEXT,
    "discount": _CURRENCY,
    "stockvalue": _CURRENCY,
    "variance": _CURRENCY,
    "unitcost": _UNIT_PRICE,
    "unitprice": _UNIT_PRICE,
    "dayspastdue": _NUMBER,
    "daysoverdue": _NUMBER,
    "totaltransactions": _COUNT,
    "totalexpenses": _COUNT,
    "matched": _COUNT,
    "unmatched": _COUNT,
    "uploads": _COUNT,
}

_QUANTITY_RE = re.compile(r"(qty|quantity|count)$", re.IGNORECASE)
_TIMESTAMP_RE = re.compile(r"[a-z](At|On)$")


@lru_cache(maxsize=512)
def classify_field(name: str) -> FieldSemantics:
    """
    Resolve the semantics of a field name

    Args:
        name: Row key such as "vatAmount", "expenseDate" or "linkedExpenseId"

    Returns:
        FieldSemantics with kind, alignment and whether totals sum it
    """
    if not name:
        return _TEXT
    lowered = name.lower()

    override = OVERRIDES.get(lowered.replace("_", ""))
    if override is not None:
        return override
    if _QUANTITY_RE.search(name):
        return _COUNT
    if any(term in lowered for term in CURRENCY_TERMS):
        return _CURRENCY
    if "date" in lowered or _TIMESTAMP_RE.search(name):
        return _DATE
    if any(term in lowered for term in UNIT_PRICE_TERMS):
        return _UNIT_PRICE
    if "id" in lowered:
        return _IDENTIFIER
    return _TEXT


def is_currency_field(name: str) -> bool:
    return classify_field(name).kind == FieldKind.CURRENCY


def is_date_field(name: str) -> bool:
    return classify_field(name).kind == FieldKind.DATE
