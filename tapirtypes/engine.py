"""
Validation and coercion over type node trees.

Two independent passes walk a (node, value) pair:

    validate(value, schema)  -> ValidationResult, never raises
    coerce(value, schema)    -> canonical value, or raises CoercionError

Validation reports every defect and never converts anything. Coercion
builds a fresh canonical value bottom-up and is atomic: if any sub-value
fails, nothing is returned and the error lists every failing path.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, time
from typing import Any

from .builder import to_node
from .constraints import (
    check_date_string,
    check_datetime_string,
    check_email,
    check_uuid,
)
from .context import get_max_depth, is_closed
from .core import (
    ArrayNode,
    EnumNode,
    ObjectNode,
    OptionalNode,
    PrimitiveKind,
    PrimitiveNode,
    TypeNode,
    is_node,
)
from .errors import CoercionError, ErrorKind, ValidationError, Violation
from .lib.parsing import (
    parse_bool,
    parse_float,
    parse_int,
    parse_iso_date,
    parse_iso_datetime,
)
from .types import Err, Ok, Path
from .values import ValueKind, exceeds_depth, kind_of, preview, type_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validate(): valid when there are no violations."""

    violations: tuple[Violation, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.violations

    def __bool__(self) -> bool:
        return self.valid

    def to_dicts(self) -> list[dict[str, Any]]:
        return [v.to_dict() for v in self.violations]


def _resolve(schema: Any) -> TypeNode:
    return schema if is_node(schema) else to_node(schema)


def validate(value: Any, schema: Any) -> ValidationResult:
    """
    Validate a value against a schema.

    Args:
        value: The value to check
        schema: A type node, or any shorthand accepted by to_node()

    Returns:
        ValidationResult whose violations are ordered by field declaration
        and element index

    Usage:
        result = validate({"name": "Sam"}, {"name": "string"})
        result.valid        # True
    """
    node = _resolve(schema)
    walker = _Walker(max_depth=get_max_depth(), closed=is_closed())
    return ValidationResult(tuple(walker.validate(node, value, (), 0)))


def coerce(value: Any, schema: Any) -> Any:
    """
    Coerce a loosely-typed value into its canonical form.

    Raises:
        CoercionError: With every per-path failure, if any sub-value fails

    Usage:
        coerce({"id": "42", "active": "true"}, {"id": "integer", "active": "boolean"})
        # {"id": 42, "active": True}
    """
    return try_coerce(value, schema).unwrap()


def try_coerce(value: Any, schema: Any) -> Ok[Any] | Err[CoercionError]:
    """
    Result-returning form of coerce().

    Usage:
        try_coerce("42", "integer")                 # Ok(value=42)
        try_coerce("x", "integer").unwrap_or(0)     # 0
    """
    node = _resolve(schema)
    walker = _Walker(max_depth=get_max_depth(), closed=is_closed())
    result, errors = walker.coerce(node, value, (), 0)
    if errors:
        logger.debug("Coercion against %s failed with %d violation(s)", node, len(errors))
        return Err(CoercionError(value, errors))
    return Ok(result)


def ensure_valid(value: Any, schema: Any) -> Any:
    """
    Return the value unchanged if it validates.

    Raises:
        ValidationError: With every violation, if it does not
    """
    result = validate(value, schema)
    if not result.valid:
        raise ValidationError(result.violations)
    return value


def _unexpected(path: Path, expected: str, value: Any) -> Violation:
    return Violation(
        path, f"Expected {expected}, got {type_name(value)}", ErrorKind.UNEXPECTED_TYPE
    )


def _missing(path: Path) -> Violation:
    return Violation(path, "Required field is missing", ErrorKind.MISSING_FIELD)


def _has_duplicates(items: list[Any] | tuple[Any, ...]) -> bool:
    try:
        keys = [(type(item), item) for item in items]
        return len(set(keys)) != len(keys)
    except TypeError:
        # unhashable members; fall back to pairwise comparison
        seen: list[Any] = []
        for item in items:
            if any(type(item) is type(other) and item == other for other in seen):
                return True
            seen.append(item)
        return False


class _Walker:
    """Per-call walk state. Settings are read once so a call is consistent."""

    __slots__ = ("max_depth", "closed")

    def __init__(self, max_depth: int, closed: bool):
        self.max_depth = max_depth
        self.closed = closed

    def _too_deep(self, path: Path) -> Violation:
        logger.debug("Schema depth limit %d reached at %r", self.max_depth, path)
        return Violation(
            path,
            f"Schema nesting exceeds maximum depth {self.max_depth}",
            ErrorKind.SCHEMA_TOO_DEEP,
        )

    def _check_any(self, value: Any, path: Path, depth: int) -> list[Violation]:
        if exceeds_depth(value, self.max_depth - depth):
            logger.debug("Value depth limit %d reached at %r", self.max_depth, path)
            return [
                Violation(
                    path,
                    f"Value nesting exceeds maximum depth {self.max_depth}",
                    ErrorKind.VALUE_TOO_DEEP,
                )
            ]
        return []

    def _closed_for(self, node: ObjectNode) -> bool:
        return node.closed or self.closed

    # Validation

    def validate(self, node: TypeNode, value: Any, path: Path, depth: int) -> list[Violation]:
        if depth > self.max_depth:
            return [self._too_deep(path)]

        match node:
            case OptionalNode(inner=inner):
                if value is None:
                    return []
                return self.validate(inner, value, path, depth)
            case PrimitiveNode():
                return self.validate_primitive(node, value, path, depth)
            case EnumNode(allowed=allowed):
                if any(type(value) is type(a) and value == a for a in allowed):
                    return []
                choices = ", ".join(repr(a) for a in allowed)
                return [
                    Violation(
                        path,
                        f"Value {preview(value)} is not one of: {choices}",
                        ErrorKind.NOT_IN_ENUM,
                    )
                ]
            case ArrayNode():
                return self.validate_array(node, value, path, depth)
            case ObjectNode():
                return self.validate_object(node, value, path, depth)

        raise TypeError(f"Not a type node: {type(node).__name__}")

    def validate_primitive(
        self, node: PrimitiveNode, value: Any, path: Path, depth: int
    ) -> list[Violation]:
        value_kind = kind_of(value)

        match node.kind:
            case PrimitiveKind.ANY:
                return self._check_any(value, path, depth)
            case PrimitiveKind.STRING | PrimitiveKind.EMAIL | PrimitiveKind.UUID:
                if value_kind is not ValueKind.STRING:
                    return [_unexpected(path, "string", value)]
                errors: list[Violation] = []
                if node.kind is PrimitiveKind.EMAIL:
                    errors.extend(check_email(value, path))
                elif node.kind is PrimitiveKind.UUID:
                    errors.extend(check_uuid(value, path))
                errors.extend(node.constraints.check_string(value, path))
                return errors
            case PrimitiveKind.INTEGER:
                if value_kind is not ValueKind.INTEGER:
                    return [_unexpected(path, "integer", value)]
                return node.constraints.check_number(value, path)
            case PrimitiveKind.FLOAT:
                if value_kind not in (ValueKind.INTEGER, ValueKind.FLOAT):
                    return [_unexpected(path, "number", value)]
                return node.constraints.check_number(value, path)
            case PrimitiveKind.BOOLEAN:
                if value_kind is not ValueKind.BOOLEAN:
                    return [_unexpected(path, "boolean", value)]
                return []
            case PrimitiveKind.DATE:
                if value_kind is ValueKind.DATE:
                    return []
                if value_kind is ValueKind.STRING:
                    return check_date_string(value, path)
                return [_unexpected(path, "date", value)]
            case PrimitiveKind.DATETIME:
                if value_kind is ValueKind.DATETIME:
                    return []
                if value_kind is ValueKind.STRING:
                    return check_datetime_string(value, path)
                return [_unexpected(path, "datetime", value)]

        raise TypeError(f"Unknown primitive kind: {node.kind!r}")

    def _array_bounds(self, node: ArrayNode, items: Any, path: Path) -> list[Violation]:
        errors: list[Violation] = []
        if node.min_items is not None and len(items) < node.min_items:
            errors.append(
                Violation(
                    path,
                    f"Array length {len(items)} is below minimum {node.min_items}",
                    ErrorKind.CONSTRAINT_VIOLATION,
                )
            )
        if node.max_items is not None and len(items) > node.max_items:
            errors.append(
                Violation(
                    path,
                    f"Array length {len(items)} exceeds maximum {node.max_items}",
                    ErrorKind.CONSTRAINT_VIOLATION,
                )
            )
        if node.unique_items and _has_duplicates(items):
            errors.append(
                Violation(
                    path,
                    "Array contains duplicate items but must be unique",
                    ErrorKind.CONSTRAINT_VIOLATION,
                )
            )
        return errors

    def validate_array(
        self, node: ArrayNode, value: Any, path: Path, depth: int
    ) -> list[Violation]:
        if kind_of(value) is not ValueKind.SEQUENCE:
            return [
                Violation(
                    path, f"Expected array, got {type_name(value)}", ErrorKind.NOT_AN_ARRAY
                )
            ]

        errors = self._array_bounds(node, value, path)
        for i, item in enumerate(value):
            errors.extend(self.validate(node.item, item, (*path, i), depth + 1))
        return errors

    def validate_object(
        self, node: ObjectNode, value: Any, path: Path, depth: int
    ) -> list[Violation]:
        if kind_of(value) is not ValueKind.MAPPING:
            return [
                Violation(
                    path, f"Expected object, got {type_name(value)}", ErrorKind.NOT_AN_OBJECT
                )
            ]

        errors: list[Violation] = []
        for f in node.fields:
            field_path = (*path, f.name)
            field_value = value.get(f.name)
            if field_value is None and not (f.nullable and f.name in value):
                if f.required:
                    errors.append(_missing(field_path))
                continue
            errors.extend(self.validate(f.node, field_value, field_path, depth + 1))

        if self._closed_for(node):
            errors.extend(self._unexpected_keys(node, value, path))
        return errors

    def _unexpected_keys(self, node: ObjectNode, value: Any, path: Path) -> list[Violation]:
        declared = set(node.field_names)
        return [
            Violation(
                (*path, key if isinstance(key, (str, int)) else str(key)),
                "Unexpected field",
                ErrorKind.UNEXPECTED_FIELD,
            )
            for key in value
            if key not in declared
        ]

    # Coercion

    def coerce(
        self, node: TypeNode, value: Any, path: Path, depth: int
    ) -> tuple[Any, list[Violation]]:
        """Return (canonical value, errors). The value is meaningless if errors."""
        if depth > self.max_depth:
            return None, [self._too_deep(path)]

        match node:
            case OptionalNode(inner=inner):
                if value is None:
                    return None, []
                return self.coerce(inner, value, path, depth)
            case PrimitiveNode():
                return self.coerce_primitive(node, value, path, depth)
            case EnumNode():
                return value, self.validate(node, value, path, depth)
            case ArrayNode():
                return self.coerce_array(node, value, path, depth)
            case ObjectNode():
                return self.coerce_object(node, value, path, depth)

        raise TypeError(f"Not a type node: {type(node).__name__}")

    def coerce_primitive(
        self, node: PrimitiveNode, value: Any, path: Path, depth: int
    ) -> tuple[Any, list[Violation]]:
        converted = self._convert(node.kind, value, path)
        if isinstance(converted, Violation):
            return None, [converted]
        return converted, self.validate_primitive(node, converted, path, depth)

    def _convert(self, kind: PrimitiveKind, value: Any, path: Path) -> Any:
        """Convert a scalar to the kind's canonical type, or return a Violation."""
        value_kind = kind_of(value)

        match kind:
            case PrimitiveKind.ANY:
                return value
            case PrimitiveKind.STRING:
                if value_kind is ValueKind.STRING:
                    return value
                if value_kind in (ValueKind.INTEGER, ValueKind.FLOAT):
                    try:
                        return str(value)
                    except ValueError:
                        return Violation(
                            path,
                            "Integer has too many digits to convert to a string",
                            ErrorKind.UNEXPECTED_TYPE,
                        )
                return _unexpected(path, "string", value)
            case PrimitiveKind.EMAIL:
                if value_kind is ValueKind.STRING:
                    return value
                return _unexpected(path, "string", value)
            case PrimitiveKind.UUID:
                if value_kind is ValueKind.STRING:
                    return value
                if isinstance(value, uuid.UUID):
                    return str(value)
                return _unexpected(path, "string", value)
            case PrimitiveKind.INTEGER:
                if value_kind is ValueKind.INTEGER:
                    return value
                if value_kind is ValueKind.FLOAT and value.is_integer():
                    return int(value)
                if value_kind is ValueKind.STRING:
                    parsed = parse_int(value)
                    if parsed is not None:
                        return parsed
                    return Violation(
                        path, f"Cannot coerce {value[:50]!r} to integer", ErrorKind.UNEXPECTED_TYPE
                    )
                return _unexpected(path, "integer", value)
            case PrimitiveKind.FLOAT:
                if value_kind is ValueKind.FLOAT:
                    return value
                if value_kind is ValueKind.INTEGER:
                    try:
                        return float(value)
                    except OverflowError:
                        return Violation(
                            path,
                            f"Integer {preview(value)} is too large for a float",
                            ErrorKind.UNEXPECTED_TYPE,
                        )
                if value_kind is ValueKind.STRING:
                    parsed = parse_float(value)
                    if parsed is not None:
                        return parsed
                    return Violation(
                        path, f"Cannot coerce {value[:50]!r} to number", ErrorKind.UNEXPECTED_TYPE
                    )
                return _unexpected(path, "number", value)
            case PrimitiveKind.BOOLEAN:
                if value_kind is ValueKind.BOOLEAN:
                    return value
                if value_kind is ValueKind.STRING:
                    parsed = parse_bool(value)
                    if parsed is not None:
                        return parsed
                    return Violation(
                        path, f"Cannot coerce {value[:50]!r} to boolean", ErrorKind.UNEXPECTED_TYPE
                    )
                return _unexpected(path, "boolean", value)
            case PrimitiveKind.DATE:
                if value_kind is ValueKind.DATE:
                    return value
                if value_kind is ValueKind.STRING:
                    parsed = parse_iso_date(value)
                    if parsed is not None:
                        return parsed
                    return check_date_string(value, path)[0]
                return _unexpected(path, "date", value)
            case PrimitiveKind.DATETIME:
                if value_kind is ValueKind.DATETIME:
                    return value
                if value_kind is ValueKind.DATE:
                    return datetime.combine(value, time())
                if value_kind is ValueKind.STRING:
                    parsed = parse_iso_datetime(value)
                    if parsed is not None:
                        return parsed
                    return check_datetime_string(value, path)[0]
                return _unexpected(path, "datetime", value)

        raise TypeError(f"Unknown primitive kind: {kind!r}")

    def coerce_array(
        self, node: ArrayNode, value: Any, path: Path, depth: int
    ) -> tuple[Any, list[Violation]]:
        if kind_of(value) is ValueKind.STRING:
            value = _parse_json(value, list)
        if kind_of(value) is not ValueKind.SEQUENCE:
            return None, [
                Violation(
                    path, f"Expected array, got {type_name(value)}", ErrorKind.NOT_AN_ARRAY
                )
            ]

        items: list[Any] = []
        errors: list[Violation] = []
        for i, item in enumerate(value):
            coerced, item_errors = self.coerce(node.item, item, (*path, i), depth + 1)
            errors.extend(item_errors)
            items.append(coerced)

        if errors:
            errors = self._array_bounds(node, value, path) + errors
            return None, errors
        return items, self._array_bounds(node, items, path)

    def coerce_object(
        self, node: ObjectNode, value: Any, path: Path, depth: int
    ) -> tuple[Any, list[Violation]]:
        if kind_of(value) is ValueKind.STRING:
            value = _parse_json(value, dict)
        if kind_of(value) is not ValueKind.MAPPING:
            return None, [
                Violation(
                    path, f"Expected object, got {type_name(value)}", ErrorKind.NOT_AN_OBJECT
                )
            ]

        result: dict[str, Any] = {}
        errors: list[Violation] = []
        for f in node.fields:
            field_path = (*path, f.name)
            present = f.name in value
            field_value = value[f.name] if present else None
            if field_value is None:
                if present and (f.nullable or not f.required):
                    result[f.name] = None
                elif f.required:
                    errors.append(_missing(field_path))
                continue
            coerced, field_errors = self.coerce(f.node, field_value, field_path, depth + 1)
            errors.extend(field_errors)
            result[f.name] = coerced

        if self._closed_for(node):
            errors.extend(self._unexpected_keys(node, value, path))
        return (None, errors) if errors else (result, [])


def _parse_json(text: str, expected: type) -> Any:
    """Decode a JSON container from text; on failure hand back the original."""
    try:
        parsed = json.loads(text)
    except ValueError:
        return text
    except RecursionError:
        logger.debug("JSON text nested too deeply to decode, left as a string")
        return text
    return parsed if isinstance(parsed, expected) else text
