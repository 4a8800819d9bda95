"""Selections — derived slices that follow whichever stores they read.

select(selector, on_change) runs the selector right away while collecting
the stores it reads, subscribes to exactly those stores, and calls
on_change(value, None). Whenever one of them changes, the selector runs
again, its subscriptions are rebuilt from the stores read *this* time, and
on_change(value, previous) fires if the equality check says the slice
changed.

Because dependencies are rebuilt on every run, a branch that is not taken
is not subscribed to:

    flag = Store(False)
    count = Store(0)
    select(lambda: count.state if flag.state else 0, print)
    count.set(1)   # nothing: the selector did not read count last time
    flag.set(True) # prints 1 0
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, Iterable, TypeVar

from selkt._tracking import collect, discard, flush
from selkt.equality import strict_equal

if TYPE_CHECKING:
    from selkt.store import Store

S = TypeVar("S")
OnChange = Callable[[S, "S | None"], object]
EqualityFn = Callable[[S, "S | None"], bool]


def _noop() -> None:
    pass


def subscribe_all(stores: Iterable[Store], subscriber: Callable[[], object], tier: str | None = None):
    """Subscribe one listener to several stores. Returns a single disposer for all of them."""
    subscriptions = [store.subscribe(subscriber, tier) for store in stores]

    def _dispose() -> None:
        for subscription in subscriptions:
            subscription()
        discard(subscriber)

    return _dispose


class Selection(Generic[S]):
    """A live selector over a dynamic set of stores.

    Call it (or .dispose()) to stop. The last accepted slice is available
    as .state, without tracking.
    """

    __slots__ = (
        "_selector",
        "_equality_fn",
        "_tier",
        "_stores",
        "_changers",
        "_prev",
        "_initialized",
        "_disposed",
        "_subscriber",
        "_clear_subscription",
    )

    def __init__(
        self,
        selector: Callable[[], S],
        equality_fn: EqualityFn = strict_equal,
        tier: str | None = None,
    ) -> None:
        self._selector = selector
        self._equality_fn = equality_fn
        self._tier = tier
        self._stores: set[Store] = set()
        self._changers: dict[OnChange, None] = {}
        self._prev: S | None = None
        self._initialized = False
        self._disposed = False
        self._subscriber = self._run
        self._clear_subscription = _noop

    @property
    def state(self) -> S | None:
        return self._prev

    @property
    def stores(self) -> frozenset[Store]:
        """The stores read by the most recent run of the selector."""
        return frozenset(self._stores)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def subscribe(self, callback: OnChange) -> Callable[[], None]:
        """Add a change callback. Returns a function that removes it."""
        self._changers[callback] = None

        def _unsubscribe() -> None:
            self._changers.pop(callback, None)

        return _unsubscribe

    def _run(self) -> None:
        """Re-evaluate the selector, re-subscribing to the stores it read."""
        if self._disposed:
            return

        previous = self._prev
        self._clear_subscription()
        self._clear_subscription = _noop
        try:
            value, _ = collect(self._selector, self._stores)
        finally:
            # A selector that raised stays subscribed to what it read before failing.
            # select() disposes the selection instead when this is the first run.
            self._clear_subscription = subscribe_all(self._stores, self._subscriber, self._tier)

        if not self._initialized or not self._equality_fn(value, previous):
            self._prev = value
            self._initialized = True
            for changer in list(self._changers):
                changer(value, previous)

    def __call__(self) -> None:
        """Stop this selection. Disconnects from all stores and drops every callback."""
        if self._disposed:
            return
        self._disposed = True
        self._clear_subscription()
        self._clear_subscription = _noop
        self._changers.clear()
        discard(self._subscriber)

    dispose = __call__

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else f"state={self._prev!r}"
        name = getattr(self._selector, "__name__", repr(self._selector))
        return f"Selection({name}, {state})"


def select(
    selector: Callable[[], S],
    on_change: OnChange | None = None,
    equality_fn: EqualityFn | None = None,
    *,
    tier: str | None = None,
) -> Selection[S]:
    """Track selector's stores; call on_change(value, previous) when its result changes.

    on_change is called once before select() returns, with previous=None.
    After that it fires only when ``equality_fn(new, previous)`` is false
    (default: strict_equal). ``tier`` picks the listener tier used on each
    store; None uses the store's current default.

    Returns the Selection (call it to stop).

    Usage:
        first = Store("Ada")
        last = Store("Lovelace")

        names = []
        stop = select(
            lambda: f"{first.state} {last.state}",
            lambda name, _: names.append(name),
        )
        # names == ["Ada Lovelace"]

        first.set("Augusta")
        # names == ["Ada Lovelace", "Augusta Lovelace"]

        stop()
    """
    selection = Selection(selector, strict_equal if equality_fn is None else equality_fn, tier)
    if on_change is not None:
        selection.subscribe(on_change)

    def _first_run() -> None:
        try:
            selection._run()
        except BaseException:
            # The caller never gets a handle to dispose.
            selection()
            raise

    # Sets made by on_change wait until the first call has returned.
    flush(_first_run)
    return selection
