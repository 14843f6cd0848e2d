"""
tapirtypes - composable API types with validation, coercion and schema export.

Usage:
    from tapirtypes import Email, Integer, Optional, String, coerce, validate

    user = {
        "name": String(min_length=1),
        "age": Optional(Integer(minimum=0)),
        "email": Email(),
        "tags": ["string"],
    }

    validate({"name": "Sam", "email": "sam@example.com", "tags": []}, user).valid
    coerce({"name": "Sam", "age": "30", "email": "sam@example.com", "tags": []}, user)
"""

from .builder import ObjectBuilder, define, to_node
from .codegen import python_type, typescript_type
from .context import get_max_depth, is_closed, validation_context
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
from .derivation import from_json_schema, from_sample
from .describe import FieldDescriptor, TypeDescriptor, describe
from .engine import ValidationResult, coerce, ensure_valid, try_coerce, validate
from .errors import CoercionError, ErrorKind, ValidationError, Violation
from .json_schema import to_json_schema
from .schema import to_pydantic
from .types import Err, Ok
from .validators import (
    UUID,
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
)

__all__ = [
    # Result types
    "Ok",
    "Err",
    # Nodes
    "TypeNode",
    "PrimitiveKind",
    "PrimitiveNode",
    "OptionalNode",
    "ArrayNode",
    "ObjectNode",
    "EnumNode",
    "Field",
    # Factories
    "String",
    "Email",
    "UUID",
    "Integer",
    "Float",
    "Boolean",
    "Date",
    "DateTime",
    "Anything",
    "Optional",
    "Array",
    "Object",
    "Enum",
    # Builder
    "ObjectBuilder",
    "define",
    "to_node",
    "from_sample",
    "from_json_schema",
    # Engine
    "validate",
    "coerce",
    "try_coerce",
    "ensure_valid",
    "ValidationResult",
    "validation_context",
    "get_max_depth",
    "is_closed",
    # Errors
    "ErrorKind",
    "Violation",
    "CoercionError",
    "ValidationError",
    # Export
    "describe",
    "TypeDescriptor",
    "FieldDescriptor",
    "to_json_schema",
    "typescript_type",
    "python_type",
    "to_pydantic",
]
