"""Dependency tracking and flushing — the heart of selkt.

Uses contextvars to record which stores are read while a selector runs,
building each selection's dependency set automatically.

Flushing: every Store.set() queues its listeners and asks flush() to drain
them. Inside flush(callback) the drain waits until the callback returns, so a
burst of mutations reaches each listener once, after the last one.

The flush token and the per-tier notifier queues are plain module state. The engine is
meant to run on a single thread (see selkt.store.set_scheduler).
"""

from __future__ import annotations

import contextvars
import logging
from typing import TYPE_CHECKING, Callable, TypeVar

from selkt.exceptions import FlushLimitError

if TYPE_CHECKING:
    from selkt.store import Store

R = TypeVar("R")
Notifier = Callable[[], object]

logger = logging.getLogger("selkt.tracking")

# The dependency set of the selector currently being collected.
# When set, any Store.state read adds the store to it.
current_dependencies: contextvars.ContextVar[set[Store] | None] = contextvars.ContextVar(
    "current_dependencies", default=None
)

# The flush() callback in charge of the current batch, or _DRAINING while notifiers run.
_flushing: object | None = None
_DRAINING = object()

# Listener tiers, in firing order.
TIERS = ("computations", "subscriptions")

# Notifiers queued since the last drain, one queue per tier.
# Dict keys double as an insertion-ordered set.
_notifiers: dict[str, dict[Notifier, None]] = {name: {} for name in TIERS}

# Maximum number of drain passes before cascading updates are considered runaway.
_flush_limit: int = 100


def track(store: Store) -> None:
    """Record a store read into the active dependency set, if any."""
    stores = current_dependencies.get()
    if stores is not None:
        stores.add(store)


def collect(callback: Callable[[], R], stores: set[Store] | None = None) -> tuple[R, set[Store]]:
    """Run callback and capture every store whose state it read.

    Passing ``stores`` reuses that set: it is cleared before the callback runs.
    The previously active set (if any) is restored afterwards, even on error.
    """
    if stores is None:
        stores = set()
    else:
        stores.clear()
    token = current_dependencies.set(stores)
    try:
        result = callback()
    finally:
        current_dependencies.reset(token)
    return result, stores


def enqueue(notifier: Notifier, tier: str = TIERS[-1]) -> None:
    _notifiers[tier][notifier] = None


def discard(notifier: Notifier) -> None:
    """Drop a queued notifier so it does not fire in the next drain."""
    for queue in _notifiers.values():
        queue.pop(notifier, None)


def _next_queue() -> dict[Notifier, None] | None:
    for queue in _notifiers.values():
        if queue:
            return queue
    return None


def flush(callback: Callable[[], object] | None = None) -> None:
    """Run callback as one batch, then drain queued notifiers.

    Only the outermost flush drains: calls made while another flush is in
    charge (from inside its callback, or from a notifier during the drain)
    just add work to that batch. Called with no callback, drains right away
    unless a batch is in progress.
    """
    if callback is not None:
        begin_batch(callback)
        try:
            callback()
        except BaseException:
            abort_batch(callback)
            raise
    end_batch(callback)


def begin_batch(owner: object) -> None:
    """Put owner in charge of the current batch, unless one is already open."""
    global _flushing
    if _flushing is None:
        _flushing = owner


def end_batch(owner: object | None) -> None:
    """Drain if owner is in charge, or if no batch is open at all."""
    if _flushing is None or _flushing is owner:
        _drain()


def abort_batch(owner: object) -> None:
    """Release the batch without draining. Queued notifiers wait for the next drain."""
    global _flushing
    if _flushing is owner:
        _flushing = None


def _drain() -> None:
    """Fire queued notifiers in passes until every tier queue is empty.

    Each pass fires one tier's queue. A subscriptions pass never runs while
    a computation is pending: if a subscriber queues one, the pass stops and
    the computations go next. Notifiers queued while a pass runs land in a
    later pass. Notifiers discarded while a pass runs are skipped.
    """
    global _flushing
    _flushing = _DRAINING
    computations = _notifiers[TIERS[0]]
    passes = 0
    try:
        while (queue := _next_queue()) is not None:
            passes += 1
            if passes > _flush_limit:
                logger.debug("Flush limit hit with %d notifiers still queued", get_pending_count())
                raise FlushLimitError(
                    f"Notifiers did not settle after {_flush_limit} flush passes"
                )
            batch = list(queue)
            logger.debug("Flush pass %d: %d notifiers", passes, len(batch))
            for notifier in batch:
                if queue is not computations and computations:
                    break
                if notifier in queue:
                    del queue[notifier]
                    notifier()
    finally:
        _flushing = None


def is_flushing() -> bool:
    """True while a batch is open or a drain is running."""
    return _flushing is not None


def set_flush_limit(passes: int) -> int:
    """Set the maximum number of drain passes per flush. Returns the previous limit."""
    global _flush_limit
    if passes < 1:
        raise ValueError(f"Flush limit must be positive, got {passes}")
    previous, _flush_limit = _flush_limit, passes
    return previous


def get_pending_count() -> int:
    """Number of notifiers waiting to run. Useful for testing."""
    return sum(len(queue) for queue in _notifiers.values())
