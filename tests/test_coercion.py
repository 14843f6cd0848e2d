"""
Tests for coerce() and try_coerce().
"""

import uuid
from datetime import date, datetime, timezone

import pytest

from tapirtypes import (
    UUID,
    Array,
    Boolean,
    CoercionError,
    Date,
    DateTime,
    Email,
    Enum,
    Err,
    ErrorKind,
    Float,
    Integer,
    Object,
    Ok,
    Optional,
    String,
    coerce,
    try_coerce,
    validation_context,
)
from tests.structstest import ORDER, PERSON, VALID_ORDER


def failure(value, schema):
    with pytest.raises(CoercionError) as excinfo:
        coerce(value, schema)
    return excinfo.value


class TestPrimitiveCoercion:
    @pytest.mark.parametrize(
        "raw, expected",
        [(42, 42), ("42", 42), (" 7 ", 7), ("-3", -3), ("+5", 5), (3.0, 3)],
    )
    def test_integer(self, raw, expected):
        result = coerce(raw, Integer())
        assert result == expected
        assert type(result) is int

    @pytest.mark.parametrize("raw", ["3.5", "x", "", "1_000", 3.5, True, None, [1]])
    def test_integer_failures(self, raw):
        err = failure(raw, Integer())
        assert [v.code for v in err.violations] == [ErrorKind.UNEXPECTED_TYPE]

    def test_integer_constraints_checked_after_conversion(self):
        err = failure("150", Integer(maximum=100))
        assert [v.code for v in err.violations] == [ErrorKind.CONSTRAINT_VIOLATION]

    def test_numeric_constraints_after_conversion(self):
        assert coerce("8", Integer(exclusive_minimum=7)) == 8
        assert failure("7", Integer(exclusive_minimum=7)).violations[0].code == (
            ErrorKind.CONSTRAINT_VIOLATION
        )
        assert failure("1.0", Float(exclusive_maximum=1)).violations[0].code == (
            ErrorKind.CONSTRAINT_VIOLATION
        )
        assert coerce("0.3", Float(multiple_of=0.1)) == 0.3
        assert failure("10", Integer(multiple_of=4)).violations[0].code == (
            ErrorKind.CONSTRAINT_VIOLATION
        )

    def test_huge_int_to_float(self):
        err = failure(10**400, Float())
        assert err.violations[0].code == ErrorKind.UNEXPECTED_TYPE
        assert "too large for a float" in err.violations[0].message

    @pytest.mark.parametrize(
        "raw, expected",
        [(2.5, 2.5), (3, 3.0), ("2.5", 2.5), ("1e3", 1000.0), (".5", 0.5), ("-4", -4.0)],
    )
    def test_float(self, raw, expected):
        result = coerce(raw, Float())
        assert result == expected
        assert type(result) is float

    @pytest.mark.parametrize("raw", ["nan", "inf", "1e400", "abc", False])
    def test_float_failures(self, raw):
        failure(raw, Float())

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (True, True),
            (False, False),
            ("true", True),
            ("TRUE", True),
            ("False", False),
            ("1", True),
            ("0", False),
        ],
    )
    def test_boolean(self, raw, expected):
        assert coerce(raw, Boolean()) is expected

    @pytest.mark.parametrize("raw", ["yes", "on", 1, 0, None])
    def test_boolean_failures(self, raw):
        failure(raw, Boolean())

    def test_string(self):
        assert coerce("abc", String()) == "abc"
        assert coerce(42, String()) == "42"
        assert coerce(1.5, String()) == "1.5"
        failure(True, String())
        failure({"a": 1}, String())

    def test_string_from_int_past_digit_limit(self):
        err = failure(10**5000, String())
        assert err.violations[0].code == ErrorKind.UNEXPECTED_TYPE

    def test_string_constraints_after_conversion(self):
        err = failure(12345, String(max_length=2))
        assert err.violations[0].code == ErrorKind.CONSTRAINT_VIOLATION

    def test_email(self):
        assert coerce("sam@example.com", Email()) == "sam@example.com"
        err = failure("nope", Email())
        assert err.violations[0].code == ErrorKind.INVALID_FORMAT

    def test_uuid(self):
        value = uuid.UUID("123e4567-e89b-12d3-a456-426614174000")
        assert coerce(value, UUID()) == "123e4567-e89b-12d3-a456-426614174000"
        assert failure("zzz", UUID()).violations[0].code == ErrorKind.INVALID_FORMAT

    def test_date(self):
        assert coerce("2024-01-31", Date()) == date(2024, 1, 31)
        assert coerce(date(2024, 1, 31), Date()) == date(2024, 1, 31)
        err = failure("31/01/2024", Date())
        assert err.violations[0].code == ErrorKind.INVALID_FORMAT
        assert failure(datetime(2024, 1, 31), Date()).violations[0].code == (
            ErrorKind.UNEXPECTED_TYPE
        )

    def test_datetime(self):
        assert coerce("2024-01-31T10:15:00Z", DateTime()) == datetime(
            2024, 1, 31, 10, 15, tzinfo=timezone.utc
        )
        assert coerce("2024-01-31", DateTime()) == datetime(2024, 1, 31)
        assert coerce(date(2024, 1, 31), DateTime()) == datetime(2024, 1, 31)
        err = failure("soon", DateTime())
        assert err.violations[0].code == ErrorKind.INVALID_FORMAT


class TestCompositeCoercion:
    def test_optional(self):
        assert coerce(None, Optional(Integer())) is None
        assert coerce("5", Optional(Integer())) == 5

    def test_array_of_integers(self):
        assert coerce(["1", "2", 3], Array(Integer())) == [1, 2, 3]

    def test_array_failure_is_atomic(self):
        err = failure(["1", "2", "x"], Array(Integer()))
        assert len(err.violations) == 1
        assert err.violations[0].path == (2,)
        assert err.violations[0].code == ErrorKind.UNEXPECTED_TYPE

    def test_array_collects_every_index(self):
        err = failure(["a", "1", "b"], Array(Integer()))
        assert [v.path for v in err.violations] == [(0,), (2,)]

    def test_array_from_tuple_and_json(self):
        assert coerce(("1", "2"), Array(Integer())) == [1, 2]
        assert coerce("[1, 2]", Array(Integer())) == [1, 2]
        assert failure("not json", Array(Integer())).violations[0].code == (
            ErrorKind.NOT_AN_ARRAY
        )
        assert failure('{"a": 1}', Array(Integer())).violations[0].code == (
            ErrorKind.NOT_AN_ARRAY
        )

    def test_deeply_nested_json_text(self):
        text = "[" * 100_000 + "]" * 100_000
        result = try_coerce(text, Array(Integer()))
        assert result.is_err()
        assert [v.code for v in result.error.violations] == [ErrorKind.NOT_AN_ARRAY]

        text = '{"a": ' * 100_000 + "1" + "}" * 100_000
        result = try_coerce(text, PERSON)
        assert result.is_err()
        assert [v.code for v in result.error.violations] == [ErrorKind.NOT_AN_OBJECT]

    def test_array_bounds_after_coercion(self):
        node = Array(Integer(), unique_items=True)
        assert failure(["1", 1], node).violations[0].code == ErrorKind.CONSTRAINT_VIOLATION

    def test_object_keeps_declared_fields_only(self):
        node = Object({"id": Integer(), "active": Boolean()})
        result = coerce({"id": "1", "active": "true", "extra": 5}, node)
        assert result == {"id": 1, "active": True}

    def test_object_optional_fields(self):
        assert coerce({"name": "Sam"}, PERSON) == {"name": "Sam"}
        assert coerce({"name": "Sam", "age": None}, PERSON) == {"name": "Sam", "age": None}
        assert coerce({"name": "Sam", "age": "30"}, PERSON) == {"name": "Sam", "age": 30}

    def test_object_missing_required(self):
        err = failure({"age": "30"}, PERSON)
        assert [(v.path, v.code) for v in err.violations] == [
            (("name",), ErrorKind.MISSING_FIELD)
        ]

    def test_object_failures_aggregate(self):
        node = Object({"a": Integer(), "b": Integer(), "c": Boolean()})
        err = failure({"a": "x", "b": "2", "c": "maybe"}, node)
        assert [v.path for v in err.violations] == [("a",), ("c",)]

    def test_object_from_json(self):
        assert coerce('{"name": "Sam", "age": "4"}', PERSON) == {"name": "Sam", "age": 4}
        assert failure("[1]", PERSON).violations[0].code == ErrorKind.NOT_AN_OBJECT

    def test_result_is_fresh(self):
        source = {"name": "Sam", "age": 30}
        result = coerce(source, PERSON)
        assert result == source
        assert result is not source
        result["name"] = "changed"
        assert source["name"] == "Sam"

    def test_nested_order(self):
        result = coerce({**VALID_ORDER, "gift": "1"}, ORDER)
        assert result["placed_at"] == datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)
        assert result["gift"] is True
        assert result["items"][1]["unit_price"] == 20.0
        assert "note" not in result

    def test_enum_is_identity(self):
        node = Enum(["a", "b"])
        assert coerce("a", node) == "a"
        err = failure("c", node)
        assert err.violations[0].code == ErrorKind.NOT_IN_ENUM

    def test_closed_context(self):
        node = Object({"name": String()})
        with validation_context(closed=True):
            err = failure({"name": "x", "extra": 1}, node)
        assert [(v.path, v.code) for v in err.violations] == [
            (("extra",), ErrorKind.UNEXPECTED_FIELD)
        ]
        assert coerce({"name": "x", "extra": 1}, node) == {"name": "x"}

    def test_shorthand_schema(self):
        assert coerce({"id": "42", "tags": ["a"]}, {"id": "integer", "tags": [str]}) == {
            "id": 42,
            "tags": ["a"],
        }


class TestCoercionError:
    def test_message_lists_locations(self):
        err = failure({"items": ["1", "x"]}, {"items": ["integer"]})
        message = str(err)
        assert "items[1]: Cannot coerce 'x' to integer" in message
        assert err.value == {"items": ["1", "x"]}

    def test_to_dicts(self):
        err = failure(["x"], Array(Integer()))
        assert err.to_dicts() == [
            {"path": [0], "message": "Cannot coerce 'x' to integer", "code": "unexpected_type"}
        ]


class TestTryCoerce:
    def test_ok(self):
        result = try_coerce("5", Integer())
        assert isinstance(result, Ok)
        assert result.is_ok()
        assert result.value == 5

    def test_err(self):
        result = try_coerce("x", Integer())
        assert isinstance(result, Err)
        assert result.is_err()
        assert isinstance(result.error, CoercionError)

    def test_unwrap(self):
        assert try_coerce("5", Integer()).unwrap() == 5
        with pytest.raises(CoercionError):
            try_coerce("x", Integer()).unwrap()

    def test_unwrap_or_and_map(self):
        assert try_coerce("x", Integer()).unwrap_or(0) == 0
        assert try_coerce("5", Integer()).map(lambda n: n * 2) == Ok(10)
        failed = try_coerce("x", Integer())
        assert failed.map(lambda n: n * 2) is failed
