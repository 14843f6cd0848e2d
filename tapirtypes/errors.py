"""
Error model for tapirtypes.

Every defect found while validating or coercing is a Violation: a path into
the checked value, a human-readable message and a machine-readable code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from .types import Path
from .values import preview


class ErrorKind(str, Enum):
    """Machine-readable violation codes."""

    MISSING_FIELD = "missing_field"
    UNEXPECTED_TYPE = "unexpected_type"
    NOT_AN_ARRAY = "not_an_array"
    NOT_AN_OBJECT = "not_an_object"
    UNEXPECTED_FIELD = "unexpected_field"
    CONSTRAINT_VIOLATION = "constraint_violation"
    INVALID_FORMAT = "invalid_format"
    NOT_IN_ENUM = "not_in_enum"
    SCHEMA_TOO_DEEP = "schema_too_deep"
    VALUE_TOO_DEEP = "value_too_deep"


def format_path(path: Path) -> str:
    """
    Render a path the way it would be written in a lookup expression.

    Examples:
        ()                     -> ""
        ("user", "email")      -> "user.email"
        ("tags", 2)            -> "tags[2]"
        (0, "id")              -> "[0].id"
    """
    out = ""
    for segment in path:
        if isinstance(segment, int):
            out += f"[{segment}]"
        elif out:
            out += f".{segment}"
        else:
            out = segment
    return out


@dataclass(frozen=True, slots=True)
class Violation:
    """A single path-annotated defect."""

    path: Path
    message: str
    code: ErrorKind

    @property
    def location(self) -> str:
        return format_path(self.path)

    def prefixed(self, *segments: str | int) -> Violation:
        """Return a copy with segments prepended to the path."""
        return Violation((*segments, *self.path), self.message, self.code)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": list(self.path),
            "message": self.message,
            "code": self.code.value,
        }

    def __str__(self) -> str:
        where = self.location or "<root>"
        return f"{where}: {self.message} ({self.code.value})"


def _bullets(violations: Iterable[Violation]) -> str:
    return "\n".join(f"  - {v}" for v in violations)


class CoercionError(Exception):
    """
    Raised when a value cannot be coerced to its schema.

    Carries every per-path failure found during the walk, so callers can
    still render a multi-error response.
    """

    def __init__(self, value: Any, violations: Iterable[Violation]):
        self.value = value
        self.violations: tuple[Violation, ...] = tuple(violations)
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        base = f"Cannot coerce {preview(self.value)}"
        if not self.violations:
            return base
        return f"{base}:\n{_bullets(self.violations)}"

    def to_dicts(self) -> list[dict[str, Any]]:
        return [v.to_dict() for v in self.violations]


class ValidationError(Exception):
    """Raised by ensure_valid() when a value does not match its schema."""

    def __init__(self, violations: Iterable[Violation]):
        self.violations: tuple[Violation, ...] = tuple(violations)
        super().__init__(f"Schema validation failed:\n{_bullets(self.violations)}")

    def to_dicts(self) -> list[dict[str, Any]]:
        return [v.to_dict() for v in self.violations]
