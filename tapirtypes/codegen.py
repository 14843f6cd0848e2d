"""
Target-language type tokens for client generators.
"""

from __future__ import annotations

import json
import re

from .core import TypeNode
from .describe import TypeDescriptor, describe

_TYPESCRIPT = {
    "string": "string",
    "email": "string",
    "uuid": "string",
    "date": "Date",
    "datetime": "Date",
    "integer": "number",
    "float": "number",
    "boolean": "boolean",
    "any": "any",
}

_PYTHON = {
    "string": "str",
    "email": "str",
    "uuid": "str",
    "date": "date",
    "datetime": "datetime",
    "integer": "int",
    "float": "float",
    "boolean": "bool",
    "any": "Any",
}

_TS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def _descriptor(schema: TypeNode | TypeDescriptor) -> TypeDescriptor:
    return schema if isinstance(schema, TypeDescriptor) else describe(schema)


def typescript_type(schema: TypeNode | TypeDescriptor) -> str:
    """
    TypeScript type expression for a node.

    Usage:
        typescript_type(Array(Integer()))                  # "number[]"
        typescript_type(Object({"id": Integer()}))         # "{ id: number }"
        typescript_type(Optional(Enum(["a", "b"])))       # '"a" | "b" | null'
    """
    d = _descriptor(schema)
    token = _typescript(d)
    return f"{token} | null" if d.nullable else token


def _typescript(d: TypeDescriptor) -> str:
    match d.kind:
        case "array":
            item = typescript_type(d.item) if d.item is not None else "any"
            if " " in item:
                item = f"({item})"
            return f"{item}[]"
        case "object":
            if not d.fields:
                return "Record<string, any>"
            members = []
            for name, f in d.fields.items():
                key = name if _TS_IDENTIFIER.match(name) else json.dumps(name)
                mark = "" if f.required else "?"
                members.append(f"{key}{mark}: {typescript_type(f.descriptor)}")
            return "{ " + "; ".join(members) + " }"
        case "enum":
            return " | ".join(json.dumps(v) for v in d.allowed_values or ())
        case kind:
            return _TYPESCRIPT[kind]


def python_type(schema: TypeNode | TypeDescriptor) -> str:
    """
    Python annotation (typing module spelling) for a node.

    Usage:
        python_type(Array(String()))                       # "List[str]"
        python_type(Optional(Integer()))                   # "Optional[int]"
        python_type(Enum(["a", "b"]))                      # "Literal['a', 'b']"
    """
    d = _descriptor(schema)
    token = _python(d)
    return f"Optional[{token}]" if d.nullable else token


def _python(d: TypeDescriptor) -> str:
    match d.kind:
        case "array":
            item = python_type(d.item) if d.item is not None else "Any"
            return f"List[{item}]"
        case "object":
            return "Dict[str, Any]"
        case "enum":
            return f"Literal[{', '.join(repr(v) for v in d.allowed_values or ())}]"
        case kind:
            return _PYTHON[kind]
