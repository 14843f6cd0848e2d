"""
Classification of runtime values into a closed set of shapes.

The engine never asks about a value's class directly. It calls kind_of()
once per visit and matches on the resulting ValueKind.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any


class ValueKind(Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    DATE = "date"
    DATETIME = "datetime"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OTHER = "other"


def kind_of(value: Any) -> ValueKind:
    """Classify a value. bool is checked before int, datetime before date."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, datetime):
        return ValueKind.DATETIME
    if isinstance(value, date):
        return ValueKind.DATE
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    return ValueKind.OTHER


def type_name(value: Any) -> str:
    """Name used in "expected X, got Y" messages."""
    kind = kind_of(value)
    return type(value).__name__ if kind is ValueKind.OTHER else kind.value


def exceeds_depth(value: Any, budget: int) -> bool:
    """
    Check whether a value nests more than budget levels of containers.

    Stops descending as soon as the budget is spent, so self-referencing
    values terminate.
    """
    match kind_of(value):
        case ValueKind.SEQUENCE:
            children = value
        case ValueKind.MAPPING:
            children = value.values()
        case _:
            return False
    if budget <= 0:
        return True
    return any(exceeds_depth(child, budget - 1) for child in children)


def preview(value: Any, limit: int = 50) -> str:
    """Truncated repr for messages. Never raises."""
    try:
        text = repr(value)
    except (ValueError, RecursionError):
        # ints past the str conversion digit limit, or very deep containers
        text = f"<{type_name(value)}>"
    return text[:limit]
