"""
Context manager for validation configuration (depth limit, closed objects).
"""

from contextlib import contextmanager
from contextvars import ContextVar

DEFAULT_MAX_DEPTH = 64

_max_depth: ContextVar[int] = ContextVar("max_depth", default=DEFAULT_MAX_DEPTH)
_closed_objects: ContextVar[bool] = ContextVar("closed_objects", default=False)


def get_max_depth() -> int:
    """Maximum nesting depth the engine walks before giving up."""
    return _max_depth.get()


def is_closed() -> bool:
    """Check if undeclared object keys are currently reported."""
    return _closed_objects.get()


@contextmanager
def validation_context(*, max_depth: int | None = None, closed: bool | None = None):
    """
    Context manager for validation configuration.

    Args:
        max_depth: Nesting depth at which the walk stops and reports
                   schema_too_deep / value_too_deep. Defaults to 64.
        closed: If True, every Object behaves as a closed schema and
                undeclared keys are reported as unexpected_field.

    Settings not passed keep their current value, so contexts nest.

    Example:
        from tapirtypes import Object, String, validate, validation_context

        user = Object({"name": String()})

        validate({"name": "x", "extra": 1}, user).valid          # True

        with validation_context(closed=True):
            validate({"name": "x", "extra": 1}, user).valid      # False
    """
    if max_depth is not None and max_depth < 1:
        raise ValueError(f"max_depth must be >= 1, got {max_depth}")

    depth_token = _max_depth.set(max_depth) if max_depth is not None else None
    closed_token = _closed_objects.set(closed) if closed is not None else None
    try:
        yield
    finally:
        if closed_token is not None:
            _closed_objects.reset(closed_token)
        if depth_token is not None:
            _max_depth.reset(depth_token)
