"""
Tests for validation_context() and the depth guard.
"""

import pytest

from tapirtypes import (
    Anything,
    Array,
    CoercionError,
    ErrorKind,
    Integer,
    Object,
    String,
    coerce,
    get_max_depth,
    is_closed,
    validate,
    validation_context,
)
from tapirtypes.context import DEFAULT_MAX_DEPTH


def nested_arrays(levels):
    node = Integer()
    for _ in range(levels):
        node = Array(node)
    return node


class TestValidationContext:
    def test_defaults(self):
        assert get_max_depth() == DEFAULT_MAX_DEPTH == 64
        assert is_closed() is False

    def test_settings_are_scoped(self):
        with validation_context(max_depth=5, closed=True):
            assert get_max_depth() == 5
            assert is_closed() is True
        assert get_max_depth() == 64
        assert is_closed() is False

    def test_nested_contexts_keep_unset_values(self):
        with validation_context(max_depth=5):
            with validation_context(closed=True):
                assert get_max_depth() == 5
                assert is_closed() is True
            assert is_closed() is False

    def test_reset_after_exception(self):
        with pytest.raises(RuntimeError):
            with validation_context(max_depth=2):
                raise RuntimeError("boom")
        assert get_max_depth() == 64

    @pytest.mark.parametrize("bad", [0, -1])
    def test_invalid_depth(self, bad):
        with pytest.raises(ValueError):
            with validation_context(max_depth=bad):
                pass


class TestSchemaDepth:
    def test_too_deep_schema_stops_walk(self):
        with validation_context(max_depth=3):
            result = validate([[[[[1]]]]], nested_arrays(5))
        assert len(result.violations) == 1
        assert result.violations[0].code == ErrorKind.SCHEMA_TOO_DEEP
        assert result.violations[0].path == (0, 0, 0, 0)

    def test_within_limit(self):
        with validation_context(max_depth=3):
            assert validate([[[1]]], nested_arrays(3)).valid

    def test_coerce_reports_too_deep(self):
        with validation_context(max_depth=2):
            with pytest.raises(CoercionError) as excinfo:
                coerce({"a": {"b": {"c": "1"}}}, {"a": {"b": {"c": "integer"}}})
        assert excinfo.value.violations[0].code == ErrorKind.SCHEMA_TOO_DEEP
        assert excinfo.value.violations[0].path == ("a", "b", "c")

    def test_default_limit_allows_ordinary_nesting(self):
        assert validate([[[[[1]]]]], nested_arrays(5)).valid


class TestValueDepth:
    def test_any_rejects_deep_values(self):
        with validation_context(max_depth=3):
            result = validate([[[[1]]]], Anything())
            assert validate([[[1]]], Anything()).valid
        assert [v.code for v in result.violations] == [ErrorKind.VALUE_TOO_DEEP]

    def test_budget_shrinks_with_schema_depth(self):
        node = Object({"meta": Anything()})
        with validation_context(max_depth=3):
            assert validate({"meta": [[1]]}, node).valid
            result = validate({"meta": [[[1]]]}, node)
        assert result.violations[0].path == ("meta",)
        assert result.violations[0].code == ErrorKind.VALUE_TOO_DEEP

    def test_self_referencing_value_terminates(self):
        value = []
        value.append(value)
        result = validate(value, Anything())
        assert [v.code for v in result.violations] == [ErrorKind.VALUE_TOO_DEEP]

    def test_self_referencing_mapping_terminates(self):
        value = {"name": "x"}
        value["self"] = value
        assert validate(value, Object({"name": String()})).valid
        result = validate(value, Object({"name": String(), "self": Anything()}))
        assert [v.code for v in result.violations] == [ErrorKind.VALUE_TOO_DEEP]
