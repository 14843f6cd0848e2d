"""
Derive Object schemas from other descriptions of data.

    from_sample(sample)         - infer from example values
    from_json_schema(document)  - read a JSON Schema object document

Both accept `only` / `exclude` to filter top-level fields.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .core import Field, ObjectNode, TypeNode
from .validators import (
    Anything,
    Array,
    Boolean,
    Date,
    DateTime,
    Email,
    Enum,
    Float,
    Integer,
    Object,
    Optional,
    String,
    UUID,
)
from .values import ValueKind, kind_of

logger = logging.getLogger(__name__)


def _keep(name: str, only: Iterable[str] | None, exclude: Iterable[str] | None) -> bool:
    if only is not None and name not in set(only):
        return False
    if exclude is not None and name in set(exclude):
        return False
    return True


def from_sample(
    sample: dict[str, Any],
    only: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
) -> ObjectNode:
    """
    Infer an Object schema from a sample dict.

    Every present field becomes required, except those whose sample value
    is None, which become Optional(any). Lists are typed from their first
    element; nested dicts become nested Objects.

    Usage:
        from_sample({"id": 1, "name": "Sam", "tags": ["a"]})
        # Object{id: integer, name: string, tags: Array[string]}
    """
    if kind_of(sample) is not ValueKind.MAPPING:
        raise TypeError(f"Expected dict sample, got {type(sample).__name__}")

    fields = {
        str(name): infer_node(value)
        for name, value in sample.items()
        if _keep(str(name), only, exclude)
    }
    return Object(fields)


def infer_node(value: Any) -> TypeNode:
    """Infer a node for a single sample value."""
    match kind_of(value):
        case ValueKind.NULL:
            return Optional(Anything())
        case ValueKind.BOOLEAN:
            return Boolean()
        case ValueKind.INTEGER:
            return Integer()
        case ValueKind.FLOAT:
            return Float()
        case ValueKind.DATE:
            return Date()
        case ValueKind.DATETIME:
            return DateTime()
        case ValueKind.SEQUENCE:
            if not value:
                logger.debug("Empty sample list inferred as Array of any")
                return Array(Anything())
            return Array(infer_node(value[0]))
        case ValueKind.MAPPING:
            return from_sample(value)
        case _:
            return String()


_STRING_FORMATS = {
    "email": Email,
    "uuid": UUID,
}


def from_json_schema(
    document: dict[str, Any],
    only: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
) -> ObjectNode:
    """
    Build an Object schema from a JSON Schema object document.

    Honours `properties`, `required`, `additionalProperties: false`,
    `format`, `enum`, `items`, `nullable` and string/number/array bounds.

    Raises:
        ValueError: If the document is not of type "object"
    """
    if not isinstance(document, dict) or document.get("type") != "object":
        raise ValueError("JSON Schema must be an object type")

    required = set(document.get("required", ()))
    declared = []
    for name, prop in document.get("properties", {}).items():
        if not _keep(name, only, exclude):
            continue
        node = _from_property(prop)
        if name not in required:
            node = Optional(node)
        declared.append(
            Field(
                name,
                node,
                required=name in required,
                description=prop.get("description"),
                example=prop.get("example"),
            )
        )
    closed = document.get("additionalProperties") is False
    return ObjectNode(tuple(declared), closed=closed)


def _from_property(prop: dict[str, Any]) -> TypeNode:
    node = _from_property_type(prop)
    return Optional(node) if prop.get("nullable") else node


def _from_property_type(prop: dict[str, Any]) -> TypeNode:
    if "enum" in prop:
        return Enum(prop["enum"])

    match prop.get("type"):
        case "string":
            fmt = prop.get("format")
            if fmt == "date":
                return Date()
            if fmt == "date-time":
                return DateTime()
            factory = _STRING_FORMATS.get(fmt, String)
            return factory(
                min_length=prop.get("minLength"),
                max_length=prop.get("maxLength"),
                pattern=prop.get("pattern"),
            )
        case "integer":
            return Integer(**_number_bounds(prop))
        case "number":
            return Float(**_number_bounds(prop))
        case "boolean":
            return Boolean()
        case "array":
            item = _from_property(prop["items"]) if "items" in prop else Anything()
            return Array(
                item,
                min_items=prop.get("minItems"),
                max_items=prop.get("maxItems"),
                unique_items=bool(prop.get("uniqueItems", False)),
            )
        case "object":
            if "properties" in prop:
                return from_json_schema(prop)
            return Object()
        case None:
            return Anything()
        case other:
            raise ValueError(f"Unsupported JSON Schema type: {other!r}")


def _number_bounds(prop: dict[str, Any]) -> dict[str, Any]:
    bounds = {
        "minimum": prop.get("minimum"),
        "maximum": prop.get("maximum"),
        "exclusive_minimum": prop.get("exclusiveMinimum"),
        "exclusive_maximum": prop.get("exclusiveMaximum"),
        "multiple_of": prop.get("multipleOf"),
    }
    # OpenAPI 3.0 spells exclusivity as a boolean flag on minimum/maximum
    for side in ("minimum", "maximum"):
        flag = bounds[f"exclusive_{side}"]
        if isinstance(flag, bool):
            bounds[f"exclusive_{side}"] = bounds[side] if flag else None
            if flag:
                bounds[side] = None
    return bounds
