import pytest

from selkt import _tracking, set_scheduler


@pytest.fixture(autouse=True)
def _reset_engine():
    """Tests that raise mid-flush must not leak queued notifiers or a stuck token."""
    yield
    for queue in _tracking._notifiers.values():
        queue.clear()
    _tracking._flushing = None
    _tracking._flush_limit = 100
    set_scheduler(None)
