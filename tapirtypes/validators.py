"""
Built-in type node factories for tapirtypes.

Provides factory functions that return node instances.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from .constraints import NUMBER_CONSTRAINTS, STRING_CONSTRAINTS, Constraints
from .core import (
    ArrayNode,
    EnumNode,
    Field,
    ObjectNode,
    OptionalNode,
    PrimitiveKind,
    PrimitiveNode,
    TypeNode,
)


def String(
    min_length: int | None = None,
    max_length: int | None = None,
    pattern: str | re.Pattern[str] | None = None,
) -> PrimitiveNode:
    """
    Text value with optional length and pattern bounds.

    Usage:
        String()
        String(min_length=1, max_length=255)
        String(pattern=r"^[a-z]+$")
    """
    constraints = Constraints.build(
        STRING_CONSTRAINTS, min_length=min_length, max_length=max_length, pattern=pattern
    )
    return PrimitiveNode(PrimitiveKind.STRING, constraints)


def Email(
    min_length: int | None = None,
    max_length: int | None = None,
    pattern: str | re.Pattern[str] | None = None,
) -> PrimitiveNode:
    """String checked against a fixed email format, plus any string bounds."""
    constraints = Constraints.build(
        STRING_CONSTRAINTS, min_length=min_length, max_length=max_length, pattern=pattern
    )
    return PrimitiveNode(PrimitiveKind.EMAIL, constraints)


def UUID(
    min_length: int | None = None,
    max_length: int | None = None,
    pattern: str | re.Pattern[str] | None = None,
) -> PrimitiveNode:
    """String in canonical 8-4-4-4-12 hex form."""
    constraints = Constraints.build(
        STRING_CONSTRAINTS, min_length=min_length, max_length=max_length, pattern=pattern
    )
    return PrimitiveNode(PrimitiveKind.UUID, constraints)


def Integer(
    minimum: int | None = None,
    maximum: int | None = None,
    exclusive_minimum: int | None = None,
    exclusive_maximum: int | None = None,
    multiple_of: int | None = None,
) -> PrimitiveNode:
    """
    Whole number with optional range bounds.

    Usage:
        Integer(minimum=0, maximum=100)
        Integer(exclusive_minimum=0)
    """
    constraints = Constraints.build(
        NUMBER_CONSTRAINTS,
        minimum=minimum,
        maximum=maximum,
        exclusive_minimum=exclusive_minimum,
        exclusive_maximum=exclusive_maximum,
        multiple_of=multiple_of,
    )
    return PrimitiveNode(PrimitiveKind.INTEGER, constraints)


def Float(
    minimum: float | None = None,
    maximum: float | None = None,
    exclusive_minimum: float | None = None,
    exclusive_maximum: float | None = None,
    multiple_of: float | None = None,
) -> PrimitiveNode:
    """Any number; canonical form is float."""
    constraints = Constraints.build(
        NUMBER_CONSTRAINTS,
        minimum=minimum,
        maximum=maximum,
        exclusive_minimum=exclusive_minimum,
        exclusive_maximum=exclusive_maximum,
        multiple_of=multiple_of,
    )
    return PrimitiveNode(PrimitiveKind.FLOAT, constraints)


def Boolean() -> PrimitiveNode:
    return PrimitiveNode(PrimitiveKind.BOOLEAN)


def Date() -> PrimitiveNode:
    """Calendar date; canonical form is datetime.date."""
    return PrimitiveNode(PrimitiveKind.DATE)


def DateTime() -> PrimitiveNode:
    """Point in time; canonical form is datetime.datetime."""
    return PrimitiveNode(PrimitiveKind.DATETIME)


def Anything() -> PrimitiveNode:
    """Untyped value. Everything validates."""
    return PrimitiveNode(PrimitiveKind.ANY)


def Optional(node: TypeNode) -> OptionalNode:
    """
    Allow None, validate if present.

    Wrapping is idempotent: Optional(Optional(x)) == Optional(x).
    """
    if isinstance(node, OptionalNode):
        return node
    return OptionalNode(node)


def Array(
    item: TypeNode,
    min_items: int | None = None,
    max_items: int | None = None,
    unique_items: bool = False,
) -> ArrayNode:
    """
    Sequence of items of one type.

    Usage:
        Array(String())
        Array(Integer(), min_items=1, unique_items=True)
    """
    return ArrayNode(item, min_items=min_items, max_items=max_items, unique_items=unique_items)


def Object(
    fields: Mapping[str, TypeNode] | Iterable[Field] = (),
    closed: bool = False,
) -> ObjectNode:
    """
    Ordered record of named fields.

    A mapping of name -> node declares every field required, except those
    whose node is Optional. Pass Field instances for full control over
    required flags, wire kinds and descriptions.

    Usage:
        Object({"name": String(), "age": Optional(Integer())})
        Object([Field("id", Integer(), kind="path")], closed=True)
    """
    if isinstance(fields, Mapping):
        declared = tuple(
            Field(name, node, required=not isinstance(node, OptionalNode))
            for name, node in fields.items()
        )
    else:
        declared = tuple(fields)
    return ObjectNode(declared, closed=closed)


def Enum(values: Iterable[Any]) -> EnumNode:
    """
    Closed set of allowed values.

    Usage:
        Enum(["active", "inactive"])
        Enum([1, 2, 3])
    """
    unique: list[Any] = []
    for value in values:
        if not any(type(value) is type(seen) and value == seen for seen in unique):
            unique.append(value)
    return EnumNode(tuple(unique))
