"""Stores — state containers that track their readers.

When a store's state is read while a selector is being collected, the store
joins that selector's dependency set. When the store is set, all of its
listeners are queued and a flush is requested.

Listeners live in tiers. Every queued "computations" listener runs before
any "subscriptions" listener, so derived values settle before subscribers
look at them. Listeners are called with no arguments; they read store.state.

Thread safety: the engine runs on one thread. Call set_scheduler() once from
that thread; after that, any .set() from a background thread is handed to
the scheduler instead of running inline. Engine-thread .set() stays
synchronous.
"""

from __future__ import annotations

import threading
import weakref
from contextlib import contextmanager
from typing import Any, Callable, Generic, Iterator, TypeVar

from selkt._tracking import TIERS, discard, enqueue, flush, track
from selkt.exceptions import UnknownTierError
from selkt.produce import produce
from selkt.setter import Value, modify

T = TypeVar("T")
Listener = Callable[[], object]

# Tiers are drained in TIERS order: computations first, then subscriptions.
DEFAULT_TIER = "subscriptions"

# ─── Auto-marshal ────────────────────────────────────────────────────────────
_scheduler = None
_scheduler_thread = None


def set_scheduler(scheduler: Callable[[Callable[[], object]], object] | None) -> None:
    """Set the scheduler used for Store.set() calls made off the engine thread.

    Call once from the engine (main/UI) thread:
        selkt.set_scheduler(app.call_from_thread)

    Pass None to go back to running every set() inline.
    """
    global _scheduler, _scheduler_thread
    _scheduler = scheduler
    _scheduler_thread = threading.current_thread() if scheduler is not None else None


class Subscription:
    """Cancellation handle for a store listener. Call it to unsubscribe.

    Holds the store weakly: the store owns its listeners, not the other way
    round. Unsubscribing also drops the listener from the notifier queue, so
    it never fires afterwards. Calling it again does nothing.
    """

    __slots__ = ("_store_ref", "_callback", "_tier", "_disposed")

    def __init__(self, store: Store, callback: Listener, tier: str) -> None:
        self._store_ref = weakref.ref(store)
        self._callback = callback
        self._tier = tier
        self._disposed = False

    @property
    def tier(self) -> str:
        return self._tier

    @property
    def disposed(self) -> bool:
        return self._disposed

    def update(self) -> None:
        """Invoke the listener right now, outside any flush."""
        self._callback()

    def __call__(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        store = self._store_ref()
        if store is not None:
            store._tiers[self._tier].pop(self._callback, None)
        discard(self._callback)

    dispose = __call__

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"Subscription({self._tier}, {state})"


class Store(Generic[T]):
    """A single mutable state value with automatic dependency tracking.

    set() accepts a Value, a Mutator, a bare callable (treated as a mutator)
    or a bare value. Mutators may change the state in place; the store never
    copies it.
    """

    def __init__(self, initial_state: T) -> None:
        self._state = initial_state
        self.initial_state = initial_state
        self.version = 0
        self._tiers: dict[str, dict[Listener, None]] = {name: {} for name in TIERS}
        self._current_tier = DEFAULT_TIER

    @property
    def state(self) -> T:
        """Read the state. If a selector is being collected, registers the dependency."""
        track(self)
        return self._state

    def set(self, setter: Any) -> T | None:
        """Write a new state and flush. Auto-marshals from background threads.

        Returns the state this call produced, or None when the call was
        handed to the scheduler.
        """
        if _scheduler is not None and threading.current_thread() != _scheduler_thread:
            _scheduler(lambda s=setter: self._set_direct(s))
            return None
        return self._set_direct(setter)

    def _set_direct(self, setter: Any) -> T:
        self._state = state = modify(self._state, setter)
        self._changed()
        return state

    def _changed(self) -> None:
        self.version += 1
        self.notify()
        flush()

    def reset(self) -> T | None:
        """Set the state back to initial_state.

        Mutators that changed the state in place also changed initial_state,
        since both name the same object.
        """
        return self.set(Value(self.initial_state))

    def notify(self) -> None:
        """Queue every listener on its tier. Computations drain first."""
        for name in TIERS:
            for listener in self._tiers[name]:
                enqueue(listener, name)

    def subscribe(self, callback: Listener, tier: str | None = None) -> Subscription:
        """Register a listener. Defaults to the tier selected with tier()."""
        name = self._current_tier if tier is None else tier
        self._listeners(name)[callback] = None
        return Subscription(self, callback, name)

    @contextmanager
    def tier(self, name: str) -> Iterator[None]:
        """Make ``name`` the default tier for subscribe() inside the block."""
        self._listeners(name)
        previous, self._current_tier = self._current_tier, name
        try:
            yield
        finally:
            self._current_tier = previous

    def _listeners(self, name: str) -> dict[Listener, None]:
        try:
            return self._tiers[name]
        except KeyError:
            raise UnknownTierError(name) from None

    def listener_count(self, tier: str | None = None) -> int:
        if tier is None:
            return sum(len(listeners) for listeners in self._tiers.values())
        return len(self._listeners(tier))

    def destroy(self) -> None:
        """Drop every listener. The store must not be used afterwards."""
        for listeners in self._tiers.values():
            listeners.clear()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._state!r})"


class ImmutableStore(Store[T]):
    """A store whose mutators work on a draft and never touch the current state.

    Updates go through selkt.produce, which keeps unchanged parts of the
    state identical. A mutator that changes nothing leaves the store as it
    was: no version bump and no notification.
    """

    def _set_direct(self, setter: Any) -> T:
        state = produce(self._state, setter)
        if state is self._state:
            return state
        self._state = state
        self._changed()
        return state
