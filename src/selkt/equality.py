"""Equality checks for selections.

Any of these can be passed as the ``equality_fn`` of select(). They are pure
and never raise on acyclic input. deep_equal has no cycle detection: passing
a structure that contains itself recurses until RecursionError.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_PRIMITIVES = (type(None), bool, int, float, complex, str, bytes)


def strict_equal(a: Any, b: Any) -> bool:
    """Identity, or value equality between primitives of the same type.

    No coercion across types: 0 and False, or 1 and 1.0, are different.
    """
    if a is b:
        return True
    if type(a) is type(b) and isinstance(a, _PRIMITIVES):
        return a == b
    return False


def shallow_equal_array(a: Sequence | None, b: Sequence | None, from_index: int = 0) -> bool:
    """Compare two sequences element by element, starting at from_index.

    Elements before from_index are ignored, which lets callers skip a prefix
    known to be stable. Lengths must still match.
    """
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    if len(a) != len(b):
        return False
    for i in range(from_index, len(a)):
        if not strict_equal(a[i], b[i]):
            return False
    return True


def _is_object(value: Any) -> bool:
    if isinstance(value, (str, bytes)):
        return False
    return isinstance(value, (Mapping, Sequence)) or hasattr(value, "__dict__")


def _fields(value: Any) -> Mapping:
    """The keyed contents of an object-typed value."""
    if isinstance(value, Mapping):
        return value
    if isinstance(value, Sequence):
        return dict(enumerate(value))
    return vars(value)


def _compare_fields(a: Any, b: Any, deep: bool) -> bool:
    if a is b:
        return True
    if (a is None) != (b is None):
        return False
    if a is None or b is None or not (_is_object(a) and _is_object(b)):
        return strict_equal(a, b)

    a_fields = _fields(a)
    b_fields = _fields(b)
    if len(a_fields) != len(b_fields):
        return False

    for key, a_value in a_fields.items():
        if key not in b_fields:
            return False
        b_value = b_fields[key]
        if deep and _is_object(a_value) and _is_object(b_value):
            if not _compare_fields(a_value, b_value, deep):
                return False
        elif not strict_equal(a_value, b_value):
            return False
    return True


def shallow_equal(a: Any, b: Any) -> bool:
    """Same keys, and identical values under each key.

    Keys are mapping keys, sequence indices, or instance attributes.
    """
    return _compare_fields(a, b, deep=False)


def deep_equal(a: Any, b: Any) -> bool:
    """Like shallow_equal, recursing into values that are both object-typed."""
    return _compare_fields(a, b, deep=True)
