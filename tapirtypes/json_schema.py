"""
JSON Schema projection (OpenAPI 3.0 flavour) of type nodes.
"""

from __future__ import annotations

from typing import Any

from .core import TypeNode
from .describe import TypeDescriptor, describe

# kind -> (JSON type, format)
_PRIMITIVES: dict[str, tuple[str | None, str | None]] = {
    "string": ("string", None),
    "email": ("string", "email"),
    "uuid": ("string", "uuid"),
    "date": ("string", "date"),
    "datetime": ("string", "date-time"),
    "integer": ("integer", None),
    "float": ("number", None),
    "boolean": ("boolean", None),
    "any": (None, None),
}

_CONSTRAINT_KEYS = {
    "min_length": "minLength",
    "max_length": "maxLength",
    "pattern": "pattern",
    "minimum": "minimum",
    "maximum": "maximum",
    "exclusive_minimum": "exclusiveMinimum",
    "exclusive_maximum": "exclusiveMaximum",
    "multiple_of": "multipleOf",
    "min_items": "minItems",
    "max_items": "maxItems",
    "unique_items": "uniqueItems",
}


def to_json_schema(schema: TypeNode | TypeDescriptor) -> dict[str, Any]:
    """
    Render a node (or its descriptor) as a JSON Schema dict.

    Usage:
        to_json_schema(Object({"name": String(min_length=1)}))
        # {"type": "object",
        #  "properties": {"name": {"type": "string", "minLength": 1}},
        #  "required": ["name"],
        #  "additionalProperties": True}
    """
    d = schema if isinstance(schema, TypeDescriptor) else describe(schema)
    return _render(d)


def _render(d: TypeDescriptor) -> dict[str, Any]:
    out: dict[str, Any] = {}

    match d.kind:
        case "array":
            out["type"] = "array"
            out["items"] = _render(d.item) if d.item is not None else {}
        case "object":
            out["type"] = "object"
            if d.fields:
                out["properties"] = {
                    name: _render_field(f.descriptor, f.description, f.example)
                    for name, f in d.fields.items()
                }
                required = d.required_fields
                if required:
                    out["required"] = required
            out["additionalProperties"] = not d.closed
        case "enum":
            json_type, _ = _PRIMITIVES[d.constraints["value_kind"]]
            out["type"] = json_type
            out["enum"] = list(d.allowed_values or ())
        case kind:
            json_type, fmt = _PRIMITIVES[kind]
            if json_type is not None:
                out["type"] = json_type
            if fmt is not None:
                out["format"] = fmt

    for name, value in d.constraints.items():
        key = _CONSTRAINT_KEYS.get(name)
        if key is not None:
            out[key] = value

    if d.nullable:
        out["nullable"] = True
    return out


def _render_field(d: TypeDescriptor, description: str | None, example: Any) -> dict[str, Any]:
    out = _render(d)
    if description is not None:
        out["description"] = description
    if example is not None:
        out["example"] = example
    return out
