"""
Schema builder: the field-declaration DSL and shorthand lowering.

Everything here runs at definition time. The engine only ever sees the
finished node tree.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Any, Callable

from .core import Field, ObjectNode, OptionalNode, PrimitiveKind, PrimitiveNode, TypeNode, is_node
from .validators import Array, Enum, Object

logger = logging.getLogger(__name__)

_PYTHON_TYPES: dict[type, PrimitiveKind] = {
    str: PrimitiveKind.STRING,
    int: PrimitiveKind.INTEGER,
    float: PrimitiveKind.FLOAT,
    bool: PrimitiveKind.BOOLEAN,
    date: PrimitiveKind.DATE,
    datetime: PrimitiveKind.DATETIME,
    uuid.UUID: PrimitiveKind.UUID,
}


def _primitive_from_name(name: str) -> PrimitiveNode:
    try:
        return PrimitiveNode(PrimitiveKind(name))
    except ValueError:
        known = ", ".join(k.value for k in PrimitiveKind)
        raise ValueError(f"Unknown primitive type {name!r} (expected one of: {known})") from None


def to_node(spec: Any) -> TypeNode:
    """
    Lower a schema shorthand to a type node.

    Conversion rules:
        node                 -> pass through
        "string", "integer"  -> primitive of that kind
        str, int, date, ...  -> primitive for the Python type
        {"type": "integer"}  -> primitive of that kind
        dict                 -> Object; fields required unless Optional
        [spec]               -> Array of spec
        {"a", "b"} (set)     -> Enum of the members
        {} / []              -> untyped Object / Array of any
    """
    if is_node(spec):
        return spec

    if isinstance(spec, str):
        return _primitive_from_name(spec)

    if isinstance(spec, type):
        kind = _PYTHON_TYPES.get(spec)
        if kind is None:
            raise TypeError(f"Cannot convert type {spec.__name__} to a schema")
        return PrimitiveNode(kind)

    if isinstance(spec, dict):
        if not spec:
            logger.debug("Empty mapping shorthand lowered to an untyped Object")
            return Object()
        if list(spec) == ["type"] and isinstance(spec["type"], str):
            return _primitive_from_name(spec["type"])
        return Object({name: to_node(value) for name, value in spec.items()})

    if isinstance(spec, list):
        if len(spec) == 0:
            logger.debug("Empty sequence shorthand lowered to an Array of any")
            return Array(PrimitiveNode(PrimitiveKind.ANY))
        if len(spec) > 1:
            raise ValueError("Array shorthand must have exactly one element type")
        return Array(to_node(spec[0]))

    if isinstance(spec, (set, frozenset)):
        return Enum(sorted(spec))

    raise TypeError(f"Cannot convert {type(spec).__name__} to a schema")


class ObjectBuilder:
    """
    Imperative field declarations recorded in call order.

    Usage:
        user = (
            ObjectBuilder()
            .field("id", "integer", kind="path")
            .field("name", String(min_length=1))
            .optional_field("nickname", str)
            .build()
        )
    """

    def __init__(self, closed: bool = False):
        self.closed = closed
        self._fields: list[Field] = []

    def field(
        self,
        name: str,
        spec: Any,
        required: bool = True,
        *,
        kind: str | None = None,
        description: str | None = None,
        example: Any = None,
    ) -> ObjectBuilder:
        if any(f.name == name for f in self._fields):
            raise ValueError(f"Field {name!r} is already declared")
        node = to_node(spec)
        if not required and not isinstance(node, OptionalNode):
            node = OptionalNode(node)
        self._fields.append(
            Field(
                name,
                node,
                required=required,
                kind=kind,
                description=description,
                example=example,
            )
        )
        return self

    def required_field(self, name: str, spec: Any, **options: Any) -> ObjectBuilder:
        return self.field(name, spec, required=True, **options)

    def optional_field(self, name: str, spec: Any, **options: Any) -> ObjectBuilder:
        return self.field(name, spec, required=False, **options)

    def build(self) -> ObjectNode:
        return ObjectNode(tuple(self._fields), closed=self.closed)


def define(
    _block: Callable[[ObjectBuilder], Any] | None = None, *, closed: bool = False
) -> Any:
    """
    Build an Object schema from a declaration block.

    The block receives an ObjectBuilder and declares fields on it. Can be
    called directly or used as a decorator, with or without arguments:

        user = define(lambda s: s.field("name", "string"))

        @define
        def user(s):
            s.field("name", "string")
            s.optional_field("age", "integer")

        @define(closed=True)
        def strict_user(s): ...

    In decorator form the decorated name is bound to the built ObjectNode.
    """

    def decorator(block: Callable[[ObjectBuilder], Any]) -> ObjectNode:
        builder = ObjectBuilder(closed=closed)
        block(builder)
        return builder.build()

    # Handle both @define and @define(...) syntax
    if _block is not None:
        return decorator(_block)
    return decorator

