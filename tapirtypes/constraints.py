"""
Constraint sets and format checks attached to primitive nodes.

Constraints are evaluated on values that already have the right runtime
type. Each check is independent and every breach is reported.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, fields
from fractions import Fraction
from typing import Any

from .errors import ErrorKind, Violation
from .lib.parsing import parse_iso_date, parse_iso_datetime
from .types import Path
from .values import preview

EMAIL_PATTERN = re.compile(r"^[\w+\-.]+@[a-z\d\-]+(\.[a-z\d\-]+)*\.[a-z]+$", re.IGNORECASE)
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)

STRING_CONSTRAINTS = frozenset({"min_length", "max_length", "pattern"})
NUMBER_CONSTRAINTS = frozenset(
    {"minimum", "maximum", "exclusive_minimum", "exclusive_maximum", "multiple_of"}
)


@dataclass(frozen=True, slots=True)
class Constraints:
    """Immutable set of bounds for strings and numbers."""

    min_length: int | None = None
    max_length: int | None = None
    pattern: re.Pattern[str] | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: int | float | None = None
    exclusive_maximum: int | float | None = None
    multiple_of: int | float | None = None

    @classmethod
    def build(cls, allowed: frozenset[str], **given: Any) -> Constraints:
        """
        Build a constraint set, dropping unset values.

        Raises:
            TypeError: If a constraint outside `allowed` is set
            ValueError: If bounds are contradictory or non-positive
        """
        given = {k: v for k, v in given.items() if v is not None}
        unknown = set(given) - allowed
        if unknown:
            raise TypeError(f"Unsupported constraints: {', '.join(sorted(unknown))}")

        if "pattern" in given and isinstance(given["pattern"], str):
            given["pattern"] = re.compile(given["pattern"])

        for key in ("min_length", "max_length"):
            if key in given and given[key] < 0:
                raise ValueError(f"{key} must be >= 0, got {given[key]}")
        if given.get("multiple_of") is not None and given["multiple_of"] <= 0:
            raise ValueError(f"multiple_of must be > 0, got {given['multiple_of']}")
        _check_order(given, "min_length", "max_length")
        _check_order(given, "minimum", "maximum")

        return cls(**given)

    def as_dict(self) -> dict[str, Any]:
        """Set constraints only, with the pattern as its source text."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            out[f.name] = value.pattern if f.name == "pattern" else value
        return out

    def check_string(self, value: str, path: Path) -> list[Violation]:
        errors: list[Violation] = []
        if self.min_length is not None and len(value) < self.min_length:
            errors.append(
                _breach(path, f"String length {len(value)} is below minimum {self.min_length}")
            )
        if self.max_length is not None and len(value) > self.max_length:
            errors.append(
                _breach(path, f"String length {len(value)} exceeds maximum {self.max_length}")
            )
        if self.pattern is not None and self.pattern.search(value) is None:
            errors.append(
                _breach(path, f"String {value[:50]!r} does not match pattern {self.pattern.pattern!r}")
            )
        return errors

    def check_number(self, value: int | float, path: Path) -> list[Violation]:
        bounded = any(
            v is not None
            for v in (
                self.minimum,
                self.maximum,
                self.exclusive_minimum,
                self.exclusive_maximum,
                self.multiple_of,
            )
        )
        if not bounded:
            return []
        # nan compares false against every bound, inf has no remainder
        if isinstance(value, float) and not math.isfinite(value):
            return [_breach(path, f"Value {value} is not a finite number")]

        shown = preview(value)
        errors: list[Violation] = []
        if self.minimum is not None and value < self.minimum:
            errors.append(_breach(path, f"Value {shown} is below minimum {self.minimum}"))
        if self.maximum is not None and value > self.maximum:
            errors.append(_breach(path, f"Value {shown} exceeds maximum {self.maximum}"))
        if self.exclusive_minimum is not None and value <= self.exclusive_minimum:
            errors.append(
                _breach(path, f"Value {shown} must be greater than {self.exclusive_minimum}")
            )
        if self.exclusive_maximum is not None and value >= self.exclusive_maximum:
            errors.append(
                _breach(path, f"Value {shown} must be less than {self.exclusive_maximum}")
            )
        if self.multiple_of is not None and not _is_multiple(value, self.multiple_of):
            errors.append(_breach(path, f"Value {shown} is not a multiple of {self.multiple_of}"))
        return errors


def _check_order(given: dict[str, Any], low: str, high: str) -> None:
    if low in given and high in given and given[low] > given[high]:
        raise ValueError(f"{low} ({given[low]}) is greater than {high} ({given[high]})")


def _is_multiple(value: int | float, step: int | float) -> bool:
    """Exact for ints; floats get a 1e-9 tolerance on the quotient."""
    if isinstance(value, int) and isinstance(step, int):
        return value % step == 0
    try:
        quotient = value / step
    except OverflowError:
        quotient = math.inf
    if not math.isfinite(quotient):
        # beyond float range; both sides are finite so Fraction is exact
        return Fraction(value) % Fraction(step) == 0
    return abs(quotient - round(quotient)) < 1e-9


def _breach(path: Path, message: str) -> Violation:
    return Violation(path, message, ErrorKind.CONSTRAINT_VIOLATION)


def _bad_format(path: Path, message: str) -> Violation:
    return Violation(path, message, ErrorKind.INVALID_FORMAT)


# Format checks


def check_email(value: str, path: Path) -> list[Violation]:
    if EMAIL_PATTERN.match(value):
        return []
    return [_bad_format(path, "Invalid email format")]


def check_uuid(value: str, path: Path) -> list[Violation]:
    if UUID_PATTERN.match(value):
        return []
    return [_bad_format(path, "Invalid UUID format")]


def check_date_string(value: str, path: Path) -> list[Violation]:
    if parse_iso_date(value) is not None:
        return []
    return [_bad_format(path, f"Invalid date {value[:50]!r}, expected YYYY-MM-DD")]


def check_datetime_string(value: str, path: Path) -> list[Violation]:
    if parse_iso_datetime(value) is not None:
        return []
    return [_bad_format(path, f"Invalid datetime {value[:50]!r}, expected ISO-8601")]
