"""Computations — derived values that settle before subscribers run.

A Computation is a selection registered in the "computations" tier. Its
latest slice lives in a private store, so anything that reads the
computation depends on it like it would on any other store. The mapper is
applied lazily, on the first get() after the slice changes.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from selkt.select import EqualityFn, select
from selkt.setter import Value
from selkt.store import Store

S = TypeVar("S")
R = TypeVar("R")

_UNSET = object()


class Computation(Generic[S, R]):
    """A derived value with a lazily applied mapper."""

    __slots__ = ("_mapper", "_cached", "_slice", "_selection")

    def __init__(
        self,
        selector: Callable[[], S],
        mapper: Callable[[S], R] | None = None,
        equality_fn: EqualityFn | None = None,
    ) -> None:
        self._mapper = mapper
        self._cached = _UNSET
        self._slice: Store[S | None] = Store(None)
        self._selection = select(selector, self._on_slice, equality_fn, tier="computations")

    def _on_slice(self, value: S, previous: S | None) -> None:
        self._cached = _UNSET
        self._slice.set(Value(value))

    def get(self) -> R:
        """Read the mapped value. Registers a dependency when read inside a selector."""
        value = self._slice.state
        if self._cached is _UNSET:
            self._cached = value if self._mapper is None else self._mapper(value)
        return self._cached

    __call__ = get

    @property
    def disposed(self) -> bool:
        return self._selection.disposed

    def stop(self) -> None:
        """Disconnect from all stores. The last value stays readable."""
        self._selection()
        self._slice.destroy()

    dispose = stop

    def __repr__(self) -> str:
        state = "stale" if self._cached is _UNSET else f"cached={self._cached!r}"
        return f"Computation({state})"


def compute(
    selector: Callable[[], S],
    mapper: Callable[[S], R] | None = None,
    equality_fn: EqualityFn | None = None,
) -> Computation[S, R]:
    """Create a Computation.

    Usage:
        count = Store(1)
        doubled = compute(lambda: count.state, lambda n: n * 2)

        doubled.get()  # 2
        count.set(5)
        doubled.get()  # 10
    """
    return Computation(selector, mapper, equality_fn)
