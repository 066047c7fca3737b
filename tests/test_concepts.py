"""Tests for the counter, sequence, deferred and event loop building blocks."""

import pytest

from snippetrunner.concepts import (
    Counter,
    Deferred,
    DeferredAlreadySettledError,
    DeferredState,
    EventLoop,
    FiniteSequence,
    StepResult,
    make_counter,
)


class TestCounter:
    """Test captured-state counters."""

    def test_increments_start_at_one(self):
        """Three increments produce 1, 2, 3."""
        counter = Counter()
        assert [counter.increment() for _ in range(3)] == [1, 2, 3]
        assert counter.read() == 3

    def test_read_does_not_increment(self):
        """Reading leaves the count alone."""
        counter = Counter()
        counter.read()
        assert counter.read() == 0

    def test_closure_form(self):
        """make_counter returns an increment closure."""
        increment = make_counter()
        assert [increment(), increment(), increment()] == [1, 2, 3]

    def test_closures_are_independent(self):
        """Each closure keeps its own count."""
        a = make_counter()
        b = make_counter()
        a()
        a()
        assert b() == 1
        assert a() == 3


class TestFiniteSequence:
    """Test finite, non-restartable sequences."""

    def test_exhausts_after_n_values(self):
        """Exactly N steps carry values, then done."""
        seq = FiniteSequence([1, 2, 3])
        steps = [seq.next_step() for _ in range(4)]

        assert steps[:3] == [StepResult(1, False), StepResult(2, False), StepResult(3, False)]
        assert steps[3] == StepResult(None, True)
        assert seq.produced == 3

    def test_stays_done(self):
        """Once exhausted, every further request reports completion."""
        seq = FiniteSequence(["a"])
        seq.next_step()
        for _ in range(3):
            assert seq.next_step().done is True
        assert seq.exhausted is True
        assert seq.produced == 1

    def test_iteration_not_restartable(self):
        """Iterating a second time yields nothing."""
        seq = FiniteSequence(range(3))
        assert list(seq) == [0, 1, 2]
        assert list(seq) == []

    def test_from_generator(self):
        """Generators work as the value source."""

        def gen():
            yield "x"
            yield "y"

        assert list(FiniteSequence(gen())) == ["x", "y"]

    def test_next_raises_stop_iteration(self):
        """next() raises StopIteration after the last value."""
        seq = FiniteSequence([1])
        assert next(seq) == 1
        with pytest.raises(StopIteration):
            next(seq)


class TestEventLoop:
    """Test the task/microtask loop."""

    def test_microtasks_before_tasks(self):
        """All microtasks drain before the first timer task."""
        loop = EventLoop()
        order = []
        loop.set_timeout(lambda: order.append("task"))
        loop.queue_microtask(lambda: order.append("micro 1"))
        loop.queue_microtask(lambda: order.append("micro 2"))

        loop.run()

        assert order == ["micro 1", "micro 2", "task"]

    def test_timers_by_due_time_then_fifo(self):
        """Earlier timers run first; ties run in scheduling order."""
        loop = EventLoop()
        order = []
        loop.set_timeout(lambda: order.append("late"), 100)
        loop.set_timeout(lambda: order.append("first zero"), 0)
        loop.set_timeout(lambda: order.append("second zero"), 0)

        assert loop.run() == 3
        assert order == ["first zero", "second zero", "late"]
        assert loop.now == 100

    def test_microtask_inside_task_runs_before_next_task(self):
        """Microtasks queued by a task run before the next task."""
        loop = EventLoop()
        order = []

        def task_one():
            order.append("task 1")
            loop.queue_microtask(lambda: order.append("micro in 1"))

        loop.set_timeout(task_one)
        loop.set_timeout(lambda: order.append("task 2"))
        loop.run()

        assert order == ["task 1", "micro in 1", "task 2"]

    def test_block_delays_timers(self):
        """Blocking past a timer's due time runs it late, not early."""
        loop = EventLoop()
        fired_at = []
        loop.set_timeout(lambda: fired_at.append(loop.now), 1000)
        loop.block(5000)
        loop.run()
        assert fired_at == [5000]

    def test_pending_counts_both_queues(self):
        """pending() reports queued microtasks and timers."""
        loop = EventLoop()
        loop.set_timeout(lambda: None)
        loop.queue_microtask(lambda: None)
        assert loop.pending() == 2
        loop.run()
        assert loop.pending() == 0


class TestDeferred:
    """Test single-resume deferreds."""

    def test_then_runs_after_sync_code(self):
        """Callbacks never run synchronously."""
        loop = EventLoop()
        order = []
        Deferred.resolved(loop, 1).then(lambda v: order.append(f"then {v}"))
        order.append("sync")
        loop.run()
        assert order == ["sync", "then 1"]

    def test_chaining_passes_values(self):
        """Return values flow down the chain."""
        loop = EventLoop()
        seen = []
        Deferred.resolved(loop, 2).then(lambda v: v * 10).then(seen.append)
        loop.run()
        assert seen == [20]

    def test_second_resolve_raises(self):
        """A deferred resumes exactly once."""
        loop = EventLoop()
        deferred = Deferred(loop)
        deferred.resolve("first")
        with pytest.raises(DeferredAlreadySettledError):
            deferred.resolve("second")
        with pytest.raises(DeferredAlreadySettledError):
            deferred.reject(ValueError("late"))
        assert deferred.value == "first"

    def test_callbacks_registered_before_settle(self):
        """Pending callbacks run once the deferred settles."""
        loop = EventLoop()
        seen = []
        deferred = Deferred(loop)
        deferred.then(seen.append)
        loop.run()
        assert seen == []

        deferred.resolve("ready")
        loop.run()
        assert seen == ["ready"]

    def test_rejection_reaches_catch(self):
        """Exceptions raised in a handler reject the chained deferred."""
        loop = EventLoop()
        caught = []

        def explode(_):
            raise ValueError("bad")

        Deferred.resolved(loop).then(explode).then(lambda _: caught.append("skipped")).catch(
            lambda e: caught.append(str(e))
        )
        loop.run()

        assert caught == ["bad"]

    def test_resolve_with_deferred_adopts_state(self):
        """Resolving with another deferred follows it."""
        loop = EventLoop()
        inner = Deferred(loop)
        outer = Deferred(loop)
        outer.resolve(inner)
        assert outer.state == DeferredState.PENDING

        inner.resolve("inner value")
        loop.run()
        assert outer.state == DeferredState.FULFILLED
        assert outer.value == "inner value"

    def test_promise_ordering(self):
        """Sync lines first, then chained callbacks in microtask order."""
        loop = EventLoop()
        out = []
        out.append("1")
        Deferred.resolved(loop).then(lambda _: out.append("2"))
        out.append("3")
        Deferred.resolved(loop).then(lambda _: out.append("4")).then(lambda _: out.append("5"))
        out.append("6")
        loop.run()
        assert out == ["1", "3", "6", "2", "4", "5"]

    def test_resolve_with_deferred_locks(self):
        """Once following another deferred, a second resolve or reject raises."""
        loop = EventLoop()
        inner = Deferred(loop)
        outer = Deferred(loop)
        outer.resolve(inner)

        with pytest.raises(DeferredAlreadySettledError):
            outer.resolve("direct")
        with pytest.raises(DeferredAlreadySettledError):
            outer.reject(ValueError("late"))

        inner.resolve("inner value")
        loop.run()
        assert outer.state == DeferredState.FULFILLED
        assert outer.value == "inner value"

    def test_adopted_rejection(self):
        """A rejected inner deferred rejects the one following it."""
        loop = EventLoop()
        caught = []
        inner = Deferred(loop)
        outer = Deferred(loop)
        outer.resolve(inner)
        outer.catch(lambda e: caught.append(str(e)))

        inner.reject(ValueError("inner failed"))
        loop.run()

        assert outer.state == DeferredState.REJECTED
        assert caught == ["inner failed"]

    def test_resolve_with_itself_rejects(self):
        """Resolving a deferred with itself rejects it with a TypeError."""
        loop = EventLoop()
        deferred = Deferred(loop)
        deferred.resolve(deferred)

        assert deferred.state == DeferredState.REJECTED
        assert isinstance(deferred.value, TypeError)
        with pytest.raises(DeferredAlreadySettledError):
            deferred.resolve("again")

    def test_then_returning_own_child_rejects(self):
        """A handler returning its own chained deferred does not hang the chain."""
        loop = EventLoop()
        caught = []
        chained = []

        def return_child(_):
            return chained[0]

        chained.append(Deferred.resolved(loop).then(return_child))
        chained[0].catch(lambda e: caught.append(type(e).__name__))
        loop.run()

        assert caught == ["TypeError"]
