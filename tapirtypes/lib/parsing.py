"""
Scalar parsing helpers used by coercion.

Each parser returns the parsed value or None when the text is not in the
expected shape. None is never a legitimate parse result here.
"""

import math
import re
from datetime import date, datetime

INTEGER_PATTERN = re.compile(r"^[+-]?\d+$", re.ASCII)
FLOAT_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$", re.ASCII)
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
ISO_DATETIME_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}"
    r"([T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}(:?\d{2})?)?)?$",
    re.ASCII,
)

TRUE_STRINGS = frozenset({"true", "1"})
FALSE_STRINGS = frozenset({"false", "0"})


def parse_int(text: str) -> int | None:
    text = text.strip()
    if not INTEGER_PATTERN.match(text):
        return None
    try:
        return int(text)
    except ValueError:
        # exceeds the interpreter's digit limit for str -> int
        return None


def parse_float(text: str) -> float | None:
    text = text.strip()
    if not FLOAT_PATTERN.match(text):
        return None
    parsed = float(text)
    return parsed if math.isfinite(parsed) else None


def parse_bool(text: str) -> bool | None:
    lowered = text.strip().lower()
    if lowered in TRUE_STRINGS:
        return True
    if lowered in FALSE_STRINGS:
        return False
    return None


def parse_iso_date(text: str) -> date | None:
    """Parse a strict YYYY-MM-DD date, rejecting impossible calendar days."""
    if not ISO_DATE_PATTERN.match(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def parse_iso_datetime(text: str) -> datetime | None:
    """
    Parse an ISO-8601 date or date-time.

    A bare date becomes midnight. A trailing Z is read as UTC.
    """
    if not ISO_DATETIME_PATTERN.match(text):
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None
