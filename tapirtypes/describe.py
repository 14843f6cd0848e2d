"""
Language-neutral projection of type nodes.

TypeDescriptor is what schema and code generators consume. It is rebuilt on
every call, so repeated calls on the same tree compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .core import ArrayNode, EnumNode, ObjectNode, OptionalNode, PrimitiveNode, TypeNode


@dataclass(frozen=True)
class FieldDescriptor:
    descriptor: TypeDescriptor
    required: bool
    kind: str | None = None
    description: str | None = None
    example: Any = None


@dataclass(frozen=True)
class TypeDescriptor:
    """
    Describes a node for external consumers.

    `kind` is a primitive kind name ("string", "integer", ...) or one of
    "array", "object", "enum". `item` is set for arrays, `fields` for
    objects and `allowed_values` for enums.
    """

    kind: str
    constraints: dict[str, Any] = field(default_factory=dict)
    nullable: bool = False
    item: TypeDescriptor | None = None
    fields: dict[str, FieldDescriptor] = field(default_factory=dict)
    allowed_values: tuple[Any, ...] | None = None
    closed: bool = False

    @property
    def required_fields(self) -> list[str]:
        return [name for name, f in self.fields.items() if f.required]

    def to_dict(self) -> dict[str, Any]:
        """Plain nested dicts, e.g. for docs rendering or JSON output."""
        out: dict[str, Any] = {"kind": self.kind, "nullable": self.nullable}
        if self.constraints:
            out["constraints"] = dict(self.constraints)
        if self.item is not None:
            out["item"] = self.item.to_dict()
        if self.kind == "object":
            out["fields"] = {
                name: {
                    "type": f.descriptor.to_dict(),
                    "required": f.required,
                    "kind": f.kind,
                    "description": f.description,
                }
                for name, f in self.fields.items()
            }
            out["closed"] = self.closed
        if self.allowed_values is not None:
            out["allowed_values"] = list(self.allowed_values)
        return out


def describe(node: TypeNode) -> TypeDescriptor:
    match node:
        case OptionalNode(inner=inner):
            d = describe(inner)
            return TypeDescriptor(
                kind=d.kind,
                constraints=d.constraints,
                nullable=True,
                item=d.item,
                fields=d.fields,
                allowed_values=d.allowed_values,
                closed=d.closed,
            )
        case PrimitiveNode(kind=kind, constraints=constraints):
            return TypeDescriptor(kind=kind.value, constraints=constraints.as_dict())
        case ArrayNode(item=item):
            constraints: dict[str, Any] = {}
            if node.min_items is not None:
                constraints["min_items"] = node.min_items
            if node.max_items is not None:
                constraints["max_items"] = node.max_items
            if node.unique_items:
                constraints["unique_items"] = True
            return TypeDescriptor(kind="array", constraints=constraints, item=describe(item))
        case ObjectNode(fields=declared, closed=closed):
            return TypeDescriptor(
                kind="object",
                fields={
                    f.name: FieldDescriptor(
                        descriptor=describe(f.node),
                        required=f.required,
                        kind=f.kind,
                        description=f.description,
                        example=f.example,
                    )
                    for f in declared
                },
                closed=closed,
            )
        case EnumNode(allowed=allowed):
            return TypeDescriptor(
                kind="enum",
                constraints={"value_kind": node.value_kind.value},
                allowed_values=allowed,
            )

    raise TypeError(f"Not a type node: {type(node).__name__}")
