"""
Core type node classes for tapirtypes.

Provides the closed set of immutable node dataclasses: PrimitiveNode,
OptionalNode, ArrayNode, ObjectNode and EnumNode. Validation, coercion and
description live in their own modules and dispatch over these variants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

from .constraints import Constraints

if TYPE_CHECKING:
    from .describe import TypeDescriptor
    from .engine import ValidationResult


class PrimitiveKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    UUID = "uuid"
    EMAIL = "email"
    ANY = "any"


# Kinds whose canonical value is a str
STRING_KINDS = frozenset({PrimitiveKind.STRING, PrimitiveKind.EMAIL, PrimitiveKind.UUID})
NUMBER_KINDS = frozenset({PrimitiveKind.INTEGER, PrimitiveKind.FLOAT})

# Opaque tags telling transport collaborators where a field lives on the wire
FIELD_KINDS = frozenset({"path", "query", "header", "body"})


class _NodeOps:
    """Entry points shared by every node variant."""

    __slots__ = ()

    def validate(self, value: Any) -> ValidationResult:
        from .engine import validate

        return validate(value, self)

    def coerce(self, value: Any) -> Any:
        from .engine import coerce

        return coerce(value, self)

    def describe(self) -> TypeDescriptor:
        from .describe import describe

        return describe(self)


@dataclass(frozen=True, slots=True)
class PrimitiveNode(_NodeOps):
    """Leaf node: a scalar kind plus its constraint set."""

    kind: PrimitiveKind
    constraints: Constraints = field(default_factory=Constraints)

    def __str__(self) -> str:
        parts = [f"{k}={v!r}" for k, v in self.constraints.as_dict().items()]
        return f"{self.kind.value}({', '.join(parts)})" if parts else self.kind.value


@dataclass(frozen=True, slots=True)
class OptionalNode(_NodeOps):
    """Accepts None, otherwise delegates to the inner node."""

    inner: TypeNode

    def __post_init__(self) -> None:
        _check_node(self.inner, "Optional inner")

    def __str__(self) -> str:
        return f"Optional[{self.inner}]"


@dataclass(frozen=True, slots=True)
class ArrayNode(_NodeOps):
    """Homogeneous sequence of items of a single node type."""

    item: TypeNode
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False

    def __post_init__(self) -> None:
        _check_node(self.item, "Array item")
        for name in ("min_items", "max_items"):
            bound = getattr(self, name)
            if bound is not None and bound < 0:
                raise ValueError(f"{name} must be >= 0, got {bound}")
        if (
            self.min_items is not None
            and self.max_items is not None
            and self.min_items > self.max_items
        ):
            raise ValueError(
                f"min_items ({self.min_items}) is greater than max_items ({self.max_items})"
            )

    def __str__(self) -> str:
        return f"Array[{self.item}]"


@dataclass(frozen=True, slots=True)
class Field:
    """
    A declared member of an ObjectNode.

    `required` means the key must be present. Whether it may hold None is
    decided by the node: an Optional node is nullable. A required field
    holding None with a non-nullable node counts as missing.
    """

    name: str
    node: TypeNode
    required: bool = True
    kind: str | None = None
    description: str | None = None
    example: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise TypeError(f"Field name must be a non-empty str, got {self.name!r}")
        _check_node(self.node, f"Field {self.name!r}")
        if self.kind is not None and self.kind not in FIELD_KINDS:
            raise ValueError(
                f"Field kind must be one of {sorted(FIELD_KINDS)}, got {self.kind!r}"
            )

    @property
    def nullable(self) -> bool:
        """May hold None. Independent of `required`, which is about presence."""
        return isinstance(self.node, OptionalNode)


@dataclass(frozen=True, slots=True)
class ObjectNode(_NodeOps):
    """
    Ordered mapping of field name to node.

    Undeclared keys are ignored unless `closed` is set (or a closed
    validation_context is active).
    """

    fields: tuple[Field, ...] = ()
    closed: bool = False

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for f in self.fields:
            if not isinstance(f, Field):
                raise TypeError(f"Object fields must be Field, got {type(f).__name__}")
            if f.name in seen:
                raise ValueError(f"Duplicate field name: {f.name!r}")
            seen.add(f.name)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def get_field(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def __str__(self) -> str:
        if not self.fields:
            return "Object"
        inner = ", ".join(f"{f.name}: {f.node}" for f in self.fields)
        return f"Object{{{inner}}}"


@dataclass(frozen=True, slots=True)
class EnumNode(_NodeOps):
    """Closed set of allowed scalar values of a single kind."""

    allowed: tuple[Any, ...]

    def __post_init__(self) -> None:
        if not self.allowed:
            raise ValueError("Enum requires at least one allowed value")
        types = {type(v) for v in self.allowed}
        if len(types) != 1:
            names = ", ".join(sorted(t.__name__ for t in types))
            raise TypeError(f"Enum values must share a single type, got {names}")
        value_type = types.pop()
        if value_type not in ENUM_VALUE_KINDS:
            raise TypeError(f"Enum values must be str, int, float or bool, got {value_type.__name__}")

    @property
    def value_kind(self) -> PrimitiveKind:
        return ENUM_VALUE_KINDS[type(self.allowed[0])]

    def __str__(self) -> str:
        return f"Enum[{', '.join(repr(v) for v in self.allowed)}]"


ENUM_VALUE_KINDS: dict[type, PrimitiveKind] = {
    str: PrimitiveKind.STRING,
    int: PrimitiveKind.INTEGER,
    float: PrimitiveKind.FLOAT,
    bool: PrimitiveKind.BOOLEAN,
}

TypeNode = Union[PrimitiveNode, OptionalNode, ArrayNode, ObjectNode, EnumNode]
NODE_TYPES = (PrimitiveNode, OptionalNode, ArrayNode, ObjectNode, EnumNode)


def is_node(value: Any) -> bool:
    return isinstance(value, NODE_TYPES)


def _check_node(value: Any, what: str) -> None:
    if not is_node(value):
        raise TypeError(f"{what} must be a type node, got {type(value).__name__}")


def unwrap_optional(node: TypeNode) -> tuple[TypeNode, bool]:
    """Strip any number of Optional layers, reporting whether there were any."""
    nullable = False
    while isinstance(node, OptionalNode):
        node = node.inner
        nullable = True
    return node, nullable
