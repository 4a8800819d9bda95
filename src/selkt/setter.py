"""Setters — what Store.set() accepts, and how it turns into a new state.

A setter is either a Value (adopt this as the new state) or a Mutator (call
this with the current state). Bare arguments are classified for convenience:
callables become Mutators, anything else becomes a Value. To store a callable
as the state itself, wrap it in Value.

A Mutator that returns None has mutated the state in place. To explicitly
set the state to None from a Mutator, return Value(None).
"""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


class Value(Generic[T]):
    """Setter: replace the state with ``value``."""

    __slots__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Value({self.value!r})"


class Mutator(Generic[T]):
    """Setter: derive the new state from the current one.

    ``fn(state)`` may mutate ``state`` and return None, return the new
    state, or return a Value to set the state explicitly (including None).
    """

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[T], Any]) -> None:
        self.fn = fn

    def __repr__(self) -> str:
        return f"Mutator({getattr(self.fn, '__name__', self.fn)!r})"


def as_setter(setter: Any) -> Value | Mutator:
    """Classify a bare argument of Store.set()."""
    if isinstance(setter, (Value, Mutator)):
        return setter
    if callable(setter):
        return Mutator(setter)
    return Value(setter)


def modify(value: T, setter: Any) -> T:
    """Resolve a setter against the current value and return the new value."""
    setter = as_setter(setter)
    if isinstance(setter, Value):
        return setter.value

    result = setter.fn(value)
    if result is None:
        return value
    if isinstance(result, Value):
        return result.value
    return result
