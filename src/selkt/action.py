"""Batched mutations — flushed functions and transactions.

Wrapping store mutations in a @flushed function or `with transaction()`
defers every notification until the outermost scope exits. Selections see
the state before and after the batch, never the steps in between.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Callable, ParamSpec, TypeVar

from selkt._tracking import abort_batch, begin_batch, end_batch, flush

P = ParamSpec("P")
R = TypeVar("R")


def flushed(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator: run every call of fn as a single flush.

    Usage:
        first = Store("Ada")
        last = Store("Lovelace")

        @flushed
        def rename(a, b):
            first.set(a)
            last.set(b)

        rename("Grace", "Hopper")
        # selections reading both stores fire once, with the full new name
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        result: list[R] = []
        flush(lambda: result.append(fn(*args, **kwargs)))
        return result[0]

    return wrapper


@contextmanager
def transaction():
    """Context manager for batching mutations.

    Usage:
        with transaction():
            first.set("Grace")
            last.set("Hopper")
            # notifications fire here, after both are set

    If the body raises, nothing is drained; the queued notifiers fire on
    the next flush.
    """
    owner = object()
    begin_batch(owner)
    try:
        yield
    except BaseException:
        abort_batch(owner)
        raise
    end_batch(owner)
