"""Tests for Computation and compute."""

from selkt import Computation, Store, compute, select, transaction


class TestComputation:
    def test_mapper_is_lazy(self):
        call_count = 0
        s = Store(5)

        def double(n):
            nonlocal call_count
            call_count += 1
            return n * 2

        c = compute(lambda: s.state, double)
        assert call_count == 0  # not yet mapped
        assert c.get() == 10
        assert call_count == 1

    def test_caches_until_slice_changes(self):
        call_count = 0
        s = Store(5)

        def double(n):
            nonlocal call_count
            call_count += 1
            return n * 2

        c = compute(lambda: s.state, double)
        c.get()
        c()
        assert call_count == 1  # cached, no re-map
        s.set(6)
        assert c.get() == 12
        assert call_count == 2

    def test_without_mapper(self):
        s = Store(3)
        c = Computation(lambda: s.state + 1)
        assert c.get() == 4

    def test_dependency_tracking(self):
        """Computations track dependencies dynamically."""
        flag = Store(True)
        a = Store(1)
        b = Store(2)

        c = compute(lambda: a.state if flag.state else b.state)
        assert c.get() == 1

        flag.set(False)
        assert c.get() == 2  # now depends on b, not a
        assert a.listener_count() == 0

    def test_chained(self):
        s = Store(0)
        plus_one = compute(lambda: s.state, lambda n: n + 1)
        plus_two = compute(lambda: plus_one.get(), lambda n: n + 1)

        calls = []
        select(lambda: plus_one.get(), lambda v, p: calls.append(v))
        select(lambda: plus_two.get(), lambda v, p: calls.append(v))
        assert calls == [1, 2]

        s.set(1)
        assert plus_two.get() == 3
        assert calls == [1, 2, 2, 3]

    def test_runs_before_subscriptions(self):
        s = Store(0)
        messages = []

        def select_a():
            messages.append("a")
            return s.state

        def select_b():
            messages.append("b")
            return s.state

        select(select_a)
        compute(select_b)
        s.set(lambda n: n + 1)

        # Each runs once on creation, then the computation runs first
        assert messages == ["a", "b", "b", "a"]

    def test_subscribers_see_settled_value(self):
        s = Store(1)
        doubled = compute(lambda: s.state, lambda n: n * 2)
        seen = []
        select(lambda: (s.state, doubled.get()), lambda v, p: seen.append(v))
        s.set(2)
        s.set(3)
        assert seen[-1] == (3, 6)
        assert all(value * 2 == twice for value, twice in seen)

    def test_subscriber_queued_earlier_waits_for_computation(self):
        a = Store(0)
        b = Store(0)
        tenfold = compute(lambda: b.state * 10)
        log = []
        select(lambda: (a.state, b.state, tenfold.get()), lambda v, p: log.append(v))

        with transaction():
            a.set(1)
            b.set(1)

        assert log == [(0, 0, 0), (1, 1, 10)]

    def test_chained_computations_settle_before_subscribers(self):
        a = Store(0)
        b = Store(0)
        plus_one = compute(lambda: b.state, lambda n: n + 1)
        plus_two = compute(lambda: plus_one.get(), lambda n: n + 1)
        log = []
        select(lambda: (a.state, plus_two.get()), lambda v, p: log.append(v))

        with transaction():
            a.set(1)
            b.set(1)

        assert log == [(0, 2), (1, 3)]

    def test_stop(self):
        s = Store(5)
        c = compute(lambda: s.state, lambda n: n * 2)
        assert c.get() == 10
        c.stop()
        c.dispose()  # idempotent
        s.set(10)
        assert c.get() == 10  # last value stays readable
        assert c.disposed
        assert s.listener_count() == 0
