"""
Currency and date formatting utilities for report output

Every renderer (print, spreadsheet, delimited text) formats figures through
these functions so the same amount reads identically in all three formats.
All functions are pure.
"""

import re
from datetime import date, datetime
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Tuple, Union

# Rounding method name -> decimal rounding constant
ROUNDING_METHODS = {
    "standard": ROUND_HALF_UP,
    "up": ROUND_CEILING,
    "down": ROUND_FLOOR,
}

DISPLAY_FORMATS = ("symbol", "code", "both")

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
    "CNY": "¥",
    "AUD": "A$",
    "CAD": "C$",
    "SGD": "S$",
}

# ISO code -> (major unit, minor unit) for amounts in words
CURRENCY_UNITS = {
    "AED": ("Dirham", "Fils"),
    "SAR": ("Riyal", "Halala"),
    "QAR": ("Riyal", "Dirham"),
    "OMR": ("Rial", "Baisa"),
    "BHD": ("Dinar", "Fils"),
    "KWD": ("Dinar", "Fils"),
    "USD": ("Dollar", "Cent"),
    "EUR": ("Euro", "Cent"),
    "GBP": ("Pound", "Penny"),
    "INR": ("Rupee", "Paisa"),
}

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]
_TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]
_SCALES = [(10 ** 12, "Trillion"), (10 ** 9, "Billion"), (10 ** 6, "Million"), (1000, "Thousand")]

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Coerce a raw figure (number, numeric string, Decimal) into a Decimal

    Args:
        value: Raw value from a report payload

    Returns:
        Decimal, or None when the value is empty or not numeric
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def _setting(options: Any, snake: str, camel: str, default: Any) -> Any:
    """Read an option from a CurrencySettings model or a camelCase mapping."""
    if options is None:
        return default
    if isinstance(options, Mapping):
        value = options.get(camel, options.get(snake))
    else:
        value = getattr(options, snake, None)
    return default if value is None else value


def resolve_currency_options(options: Any = None) -> Tuple[str, int, str]:
    """
    Normalize currency display options

    Args:
        options: CurrencySettings, a mapping with displayFormat / rounding /
            roundingMethod keys, or None

    Returns:
        Tuple of (display_format, places, rounding_method)
    """
    display_format = str(_setting(options, "display_format", "displayFormat", "code")).lower()
    if display_format not in DISPLAY_FORMATS:
        display_format = "code"
    try:
        places = int(_setting(options, "rounding", "rounding", 2))
    except (TypeError, ValueError):
        places = 2
    places = max(0, min(places, 6))
    method = str(_setting(options, "rounding_method", "roundingMethod", "standard")).lower()
    if method not in ROUNDING_METHODS:
        method = "standard"
    return display_format, places, method


def round_amount(value: Any, places: int = 2, method: str = "standard") -> Decimal:
    """
    Round a figure once, at display time

    Args:
        value: Raw amount (anything to_decimal accepts)
        places: Decimal places to keep
        method: "standard" (half up), "up" (ceiling) or "down" (floor)

    Returns:
        Rounded Decimal; non-numeric input rounds to zero
    """
    amount = to_decimal(value)
    if amount is None:
        amount = Decimal("0")
    quantum = Decimal(1).scaleb(-places)
    rounded = amount.quantize(quantum, rounding=ROUNDING_METHODS.get(method, ROUND_HALF_UP))
    if rounded == 0:
        # Avoid "-0.00"
        rounded = abs(rounded)
    return rounded


def format_number(value: Any, places: int = 2, method: str = "standard") -> str:
    """Format a figure with thousands separators, e.g. 1234.5 -> '1,234.50'."""
    rounded = round_amount(value, places, method)
    return f"{rounded:,.{places}f}"


def currency_symbol(currency: str) -> Optional[str]:
    """Get the display symbol for an ISO code (None when only the code exists)."""
    return CURRENCY_SYMBOLS.get((currency or "").upper())


def format_currency(value: Any, currency: str = "AED", options: Any = None) -> str:
    """
    Format a monetary amount for display

    Args:
        value: Raw amount
        currency: ISO 4217 code
        options: Currency display settings (see resolve_currency_options)

    Returns:
        Formatted string like "AED 1,234.50", "$1,234.50" or "USD $1,234.50"
        Non-numeric values format as zero.
    """
    currency = (currency or "AED").upper()
    display_format, places, method = resolve_currency_options(options)
    number = format_number(value, places, method)
    negative = number.startswith("-")
    symbol = currency_symbol(currency)

    if display_format == "symbol" and symbol:
        body = number[1:] if negative else number
        return f"-{symbol}{body}" if negative else f"{symbol}{body}"
    if display_format == "both" and symbol:
        body = number[1:] if negative else number
        return f"{currency} -{symbol}{body}" if negative else f"{currency} {symbol}{body}"
    return f"{currency} {number}"


def sheet_number_format(currency: str = "AED", options: Any = None) -> str:
    """
    Build a spreadsheet number format string for a currency column

    Returns:
        Format like '"AED" #,##0.00' (decimal places follow the rounding setting)
    """
    _, places, _ = resolve_currency_options(options)
    decimals = "." + "0" * places if places else ""
    return f'"{(currency or "AED").upper()}" #,##0{decimals}'


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parse a payload date (datetime, date, ISO string, epoch ms) into a datetime

    Returns:
        datetime, or None when the value cannot be interpreted as a date
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.utcfromtimestamp(value / 1000.0)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not _ISO_DATE_RE.match(text):
            return None
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            pass
        try:
            return datetime.strptime(text[:10], "%Y-%m-%d")
        except ValueError:
            return None
    return None


def format_date(value: Any) -> str:
    """
    Format a date the way every report prints it

    Args:
        value: datetime, date or ISO string

    Returns:
        "05 Jan 2024"; an unparseable string is returned unchanged, None -> ""
    """
    parsed = parse_date(value)
    if parsed is None:
        return "" if value is None else str(value)
    return parsed.strftime("%d %b %Y")


def format_datetime(value: Any) -> str:
    """Format a timestamp as "05 Jan 2024, 14:30"."""
    parsed = parse_date(value)
    if parsed is None:
        return "" if value is None else str(value)
    return parsed.strftime("%d %b %Y, %H:%M")


def format_period(start: Any, end: Any) -> str:
    """Format a reporting period as "01 Jan 2024 - 31 Jan 2024"."""
    if not start and not end:
        return ""
    if start and end:
        return f"{format_date(start)} - {format_date(end)}"
    return f"From {format_date(start)}" if start else f"Until {format_date(end)}"


def format_header_label(header: str) -> str:
    """
    Turn a field name into a column label

    Examples:
        "vatAmount" -> "Vat Amount"
        "linked_expense_id" -> "Linked Expense Id"
    """
    if not header:
        return ""
    spaced = re.sub(r"(?<=[a-z0-9])([A-Z])", r" \1", header.replace("_", " "))
    words = [w for w in spaced.split(" ") if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def format_percent(value: Any, places: int = 2) -> str:
    """Format a rate, e.g. 5 -> '5%', 12.5 -> '12.5%'."""
    amount = to_decimal(value)
    if amount is None:
        return ""
    rounded = amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP).normalize()
    text = format(rounded, "f")
    return f"{text}%"


def describe_filters(filters: Optional[Mapping[str, Any]]) -> str:
    """
    Describe the filters applied to a report

    Args:
        filters: Mapping of filter name to value or list of values

    Returns:
        String like "status: approved, pending; category: Travel"
        Empty filters (None, "", []) are skipped.
    """
    if not filters:
        return ""
    parts = []
    for key, value in filters.items():
        if value is None or value == "" or value == []:
            continue
        if isinstance(value, (list, tuple, set)):
            rendered = ", ".join(str(v) for v in value)
        else:
            rendered = str(value)
        parts.append(f"{key}: {rendered}")
    return "; ".join(parts)


def number_to_words(number: int) -> str:
    """
    Spell out a non-negative integer in English

    Examples:
        0 -> "Zero"
        1250 -> "One Thousand Two Hundred Fifty"
    """
    number = int(number)
    if number < 0:
        return "Minus " + number_to_words(-number)
    if number == 0:
        return "Zero"

    def _below_thousand(n: int) -> str:
        words = []
        if n >= 100:
            words.append(f"{_ONES[n // 100]} Hundred")
            n %= 100
        if n >= 20:
            words.append(_TENS[n // 10] if n % 10 == 0 else f"{_TENS[n // 10]}-{_ONES[n % 10]}")
        elif n:
            words.append(_ONES[n])
        return " ".join(words)

    parts = []
    for scale, name in _SCALES:
        if number >= scale:
            parts.append(f"{number_to_words(number // scale)} {name}")
            number %= scale
    if number:
        parts.append(_below_thousand(number))
    return " ".join(parts)


def amount_in_words(value: Any, currency: str = "AED") -> str:
    """
    Spell out a monetary amount with its currency units

    Args:
        value: Amount (rounded half-up to 2 places)
        currency: ISO code selecting the unit names

    Returns:
        e.g. 100.5 AED -> "One Hundred Dirhams and Fifty Fils Only"
        Unknown currencies fall back to "XYZ One Hundred and 50/100 Only"
    """
    currency = (currency or "AED").upper()
    amount = abs(round_amount(value, 2, "standard"))
    major = int(amount)
    minor = int((amount - major) * 100)
    major_unit, minor_unit = CURRENCY_UNITS.get(currency, (currency, ""))

    if major_unit == currency:
        text = f"{currency} {number_to_words(major)}"
    else:
        text = f"{number_to_words(major)} {major_unit}{'' if major == 1 else 's'}"
    if minor:
        if minor_unit:
            text += f" and {number_to_words(minor)} {minor_unit}"
        else:
            text += f" and {minor}/100"
    return f"{text} Only"
