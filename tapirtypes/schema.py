"""
Schema operations for tapirtypes.

Provides to_pydantic(): compile an Object schema into a pydantic model.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal
from typing import Optional as TypingOptional

from pydantic import Field as PydanticField
from pydantic import create_model

from .builder import to_node
from .core import (
    ArrayNode,
    EnumNode,
    Field,
    ObjectNode,
    OptionalNode,
    PrimitiveKind,
    PrimitiveNode,
    TypeNode,
    unwrap_optional,
)

_PYTHON_TYPES: dict[PrimitiveKind, Any] = {
    PrimitiveKind.STRING: str,
    PrimitiveKind.EMAIL: str,
    PrimitiveKind.UUID: str,
    PrimitiveKind.INTEGER: int,
    PrimitiveKind.FLOAT: float,
    PrimitiveKind.BOOLEAN: bool,
    PrimitiveKind.DATE: date,
    PrimitiveKind.DATETIME: datetime,
    PrimitiveKind.ANY: Any,
}

_FIELD_ARGS = {
    "min_length": "min_length",
    "max_length": "max_length",
    "pattern": "pattern",
    "minimum": "ge",
    "maximum": "le",
    "exclusive_minimum": "gt",
    "exclusive_maximum": "lt",
    "multiple_of": "multiple_of",
}


def to_pydantic(name: str, schema: Any) -> type:
    """
    Compile an Object schema to a Pydantic model.

    Args:
        name: Name of the generated model class
        schema: An ObjectNode, or dict shorthand lowering to one

    Returns:
        A Pydantic BaseModel subclass. Nested objects become nested models
        named after their parent and field ("User" + "address" ->
        "UserAddress").

    Usage:
        User = to_pydantic("User", {
            "name": String(min_length=1),
            "email": Optional(Email()),
        })
        user = User(name="Alice")
    """
    node = to_node(schema)
    if not isinstance(node, ObjectNode):
        raise TypeError("Schema must be an Object")
    return _build_model(name, node)


def _build_model(name: str, node: ObjectNode) -> type:
    fields: dict[str, Any] = {}
    for f in node.fields:
        fields[f.name] = _extract_pydantic_field(name, f)
    extra = "forbid" if node.closed else "ignore"
    return create_model(name, __config__={"extra": extra}, **fields)


def _extract_pydantic_field(model_name: str, f: Field) -> tuple[Any, Any]:
    """Extract Pydantic field type and FieldInfo from a declared field."""
    inner, nullable = unwrap_optional(f.node)
    annotation = _annotation(f"{model_name}{_pascal(f.name)}", inner)
    kwargs = _constraint_kwargs(inner)
    if f.description is not None:
        kwargs["description"] = f.description
    if f.example is not None:
        kwargs["examples"] = [f.example]

    if not f.required:
        return (TypingOptional[annotation], PydanticField(None, **kwargs))
    if nullable:
        # must be passed, may be None
        return (TypingOptional[annotation], PydanticField(..., **kwargs))
    return (annotation, PydanticField(..., **kwargs))


def _annotation(model_name: str, node: TypeNode) -> Any:
    match node:
        case OptionalNode(inner=inner):
            return TypingOptional[_annotation(model_name, inner)]
        case PrimitiveNode(kind=kind):
            return _PYTHON_TYPES[kind]
        case ArrayNode(item=item):
            return list[_annotation(f"{model_name}Item", item)]  # type: ignore[misc]
        case ObjectNode():
            if not node.fields:
                return dict[str, Any]
            return _build_model(model_name, node)
        case EnumNode(allowed=allowed):
            return Literal[allowed]  # type: ignore[valid-type]

    return Any


def _constraint_kwargs(node: TypeNode) -> dict[str, Any]:
    match node:
        case PrimitiveNode(constraints=constraints):
            return {_FIELD_ARGS[k]: v for k, v in constraints.as_dict().items()}
        case ArrayNode(min_items=min_items, max_items=max_items):
            kwargs: dict[str, Any] = {}
            if min_items is not None:
                kwargs["min_length"] = min_items
            if max_items is not None:
                kwargs["max_length"] = max_items
            return kwargs
    return {}


def _pascal(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in name.replace("-", "_").split("_"))
