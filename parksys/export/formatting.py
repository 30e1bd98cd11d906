"""Type-aware value handling shared by every renderer.

Values pass through two stages:

1. ``coerce_value`` runs once while rows are projected. Numbers become
   numeric, dates become ``datetime`` and booleans stay booleans, so each
   renderer receives the same typed row regardless of format.
2. ``format_text`` and ``to_cell_value`` do the final, format-specific
   encoding: text renderers (CSV, PDF) get locale-formatted strings while the
   spreadsheet renderer keeps native numbers and dates.
"""

import math
import re
from collections.abc import Iterable
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any

from parksys.export.branding import Locale
from parksys.export.config import FieldType
from parksys.export.messages import boolean_label

CSV_ARRAY_SEPARATOR = "; "
PDF_ARRAY_SEPARATOR = "; "
XLSX_ARRAY_SEPARATOR = ", "

_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_TRUE_WORDS = {"true", "1", "yes", "y", "si", "sí", "sim"}
_FALSE_WORDS = {"false", "0", "no", "n", "não", ""}


def to_number(value: Any) -> int | float:
    """Coerce to a number, falling back to 0 when nothing numeric can be read.

    Strings are read up to the first non-numeric character, so ``"12.5 m2"``
    gives ``12.5``.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return 0 if math.isnan(value) else value
    if isinstance(value, Decimal):
        return float(value)

    match = _LEADING_FLOAT.match(str(value))
    if not match:
        return 0
    number = float(match.group(1))
    if math.isinf(number):
        return number
    return int(number) if number.is_integer() else number


def to_datetime(value: Any) -> datetime | None:
    """Coerce to ``datetime``; unparseable input gives None.

    Accepts datetimes, dates, ISO-8601 strings and epoch milliseconds.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def to_boolean(value: Any) -> bool:
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return bool(value)


def coerce_value(value: Any, field_type: FieldType) -> Any:
    """Normalize a raw value for its field type during projection."""
    if value is None:
        return None

    if field_type == FieldType.DATE:
        return to_datetime(value)
    if field_type == FieldType.BOOLEAN:
        return to_boolean(value)
    if field_type in (FieldType.NUMBER, FieldType.CURRENCY):
        return to_number(value)
    if field_type == FieldType.ARRAY:
        if isinstance(value, (list, tuple, set, frozenset)):
            return list(value)
        return str(value)
    return str(value)


def format_number(value: Any) -> str:
    """Thousands separators and at most three fraction digits: ``1,234.5``."""
    number = to_number(value)
    if isinstance(number, int):
        return f"{number:,}"
    if math.isinf(number):
        return "∞" if number > 0 else "-∞"
    text = f"{number:,.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_currency(value: Any, symbol: str = "$") -> str:
    """Two decimals with the currency symbol: ``$1,234.50``, ``-$3.00``."""
    number = to_number(value)
    sign = "-" if number < 0 else ""
    return f"{sign}{symbol}{abs(number):,.2f}"


def join_array(value: Any, separator: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, Iterable):
        return separator.join("" if item is None else str(item) for item in value)
    return str(value)


def format_text(value: Any, field_type: FieldType, locale: Locale, array_separator: str) -> str:
    """Render a projected value as display text for text-based formats."""
    if value is None:
        return ""

    if field_type == FieldType.DATE:
        moment = to_datetime(value)
        return moment.strftime(locale.date_format) if moment else ""
    if field_type == FieldType.CURRENCY:
        return format_currency(value, locale.currency_symbol)
    if field_type == FieldType.NUMBER:
        return format_number(value)
    if field_type == FieldType.BOOLEAN:
        return boolean_label(to_boolean(value), locale.language)
    if field_type == FieldType.ARRAY:
        return join_array(value, array_separator)
    return str(value)


def to_cell_value(value: Any, field_type: FieldType, locale: Locale) -> Any:
    """Render a projected value as a native spreadsheet cell value.

    Numbers and dates stay typed so the spreadsheet can sort and compute
    with them; booleans become the localized Yes/No word.
    """
    if value is None:
        return None

    if field_type == FieldType.DATE:
        moment = to_datetime(value)
        if moment is None:
            return None
        # Spreadsheet cells cannot hold timezone-aware datetimes.
        return moment.replace(tzinfo=None)
    if field_type in (FieldType.NUMBER, FieldType.CURRENCY):
        return to_number(value)
    if field_type == FieldType.BOOLEAN:
        return boolean_label(to_boolean(value), locale.language)
    if field_type == FieldType.ARRAY:
        return join_array(value, XLSX_ARRAY_SEPARATOR)
    return str(value)


def to_json_value(value: Any) -> Any:
    """Make a projected value JSON-serializable (dates as ISO-8601)."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return value
