"""Textual integration for selkt. Opt-in: requires textual.

bind(app, selector, effect) selects a slice of store state and hands it to
effect(value), a function that updates widgets. effect gets the first slice
before bind() returns, then every slice the equality check accepts as a
change. A slice is dropped, not queued, when the app is not running or is
inside pause(app). The effect always runs on the thread that called bind():
slices produced elsewhere travel through app.call_from_thread. An effect
whose widget query finds nothing (NoMatches) is treated as a no-op.

Pause depth is kept here per id(app), never on the app object, and pause()
blocks nest.
"""

import threading
from contextlib import contextmanager, suppress

from textual.css.query import NoMatches

from selkt.select import select

_pause_depth: dict[int, int] = {}


@contextmanager
def pause(app):
    """Drop slices for app while widgets are being replaced."""
    key = id(app)
    _pause_depth[key] = _pause_depth.get(key, 0) + 1
    try:
        yield
    finally:
        if _pause_depth[key] == 1:
            del _pause_depth[key]
        else:
            _pause_depth[key] -= 1


def is_safe(app) -> bool:
    """True when app is running and not paused."""
    return app.is_running and id(app) not in _pause_depth


def bind(app, selector, effect, equality_fn=None):
    """Forward slice changes from selector to effect(value). Returns the Selection."""
    owner = threading.get_ident()

    def _apply(value):
        with suppress(NoMatches):
            effect(value)

    def _on_slice(value, previous):
        if not is_safe(app):
            return
        if threading.get_ident() == owner:
            _apply(value)
        else:
            app.call_from_thread(_apply, value)

    return select(selector, _on_slice, equality_fn)
