"""
Shared test schemas for all test files.

Consolidates the schemas used across the test suite so test files don't
each define their own variant of "a user" or "an order".
"""

from tapirtypes import (
    UUID,
    Array,
    Boolean,
    DateTime,
    Email,
    Enum,
    Float,
    Integer,
    Object,
    ObjectBuilder,
    Optional,
    String,
)

# =============================================================================
# People
# =============================================================================

# name required, age optional
PERSON = Object({"name": String(), "age": Optional(Integer())})

ACCOUNT = Object({"user": Object({"id": Integer(), "email": Email()})})


# =============================================================================
# Orders (built with the field-declaration builder)
# =============================================================================

LINE_ITEM = Object(
    {
        "sku": String(pattern=r"^[A-Z]{3}-\d{4}$"),
        "quantity": Integer(minimum=1, maximum=100),
        "unit_price": Float(minimum=0),
    }
)

ORDER = (
    ObjectBuilder()
    .field("id", UUID(), kind="path", description="Order identifier")
    .field("status", Enum(["pending", "paid", "shipped"]), kind="body")
    .field("items", Array(LINE_ITEM, min_items=1), kind="body")
    .field("placed_at", DateTime(), kind="body")
    .optional_field("gift", Boolean(), kind="query")
    .optional_field("note", String(max_length=140), kind="body")
    .build()
)

VALID_ORDER = {
    "id": "123e4567-e89b-12d3-a456-426614174000",
    "status": "paid",
    "items": [
        {"sku": "ABC-0001", "quantity": 2, "unit_price": 9.5},
        {"sku": "XYZ-0042", "quantity": 1, "unit_price": 20},
    ],
    "placed_at": "2024-03-01T12:30:00Z",
}
