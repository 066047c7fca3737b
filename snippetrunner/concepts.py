"""Explicit building blocks behind the function and event-loop lessons.

Closures, generators, promises and the task/microtask loop are language
features in the lessons' original setting. Here each one is a small object
with an explicit shape so snippets and tests can poke at it directly.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)


# --- Captured state ---


class Counter:
    """Encapsulated counter: the object form of a closure over ``count``."""

    def __init__(self, start: int = 0):
        self._count = start

    def increment(self) -> int:
        self._count += 1
        return self._count

    def read(self) -> int:
        return self._count


def make_counter(start: int = 0) -> Callable[[], int]:
    """Return an ``increment`` function that remembers its own count."""
    count = start

    def increment() -> int:
        nonlocal count
        count += 1
        return count

    return increment


# --- Finite sequences ---


@dataclass(frozen=True)
class StepResult:
    """One step of a sequence: ``{value, done}``."""

    value: Any = None
    done: bool = False


class FiniteSequence:
    """Finite, non-restartable sequence of values.

    ``next_step()`` mirrors ``gen.next()``: exactly N steps carry a value,
    every later step reports ``done=True``. Iterating with ``for`` works too
    and stops at the same point.
    """

    def __init__(self, values: Iterable[Any]):
        self._values = iter(tuple(values))
        self._exhausted = False
        self.produced = 0

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def next_step(self) -> StepResult:
        if self._exhausted:
            return StepResult(done=True)
        try:
            value = next(self._values)
        except StopIteration:
            self._exhausted = True
            return StepResult(done=True)
        self.produced += 1
        return StepResult(value=value, done=False)

    def __iter__(self) -> FiniteSequence:
        return self

    def __next__(self) -> Any:
        step = self.next_step()
        if step.done:
            raise StopIteration
        return step.value


# --- Event loop ---


class EventLoop:
    """Deterministic virtual-time loop with task and microtask queues.

    Synchronous code runs first, then every queued microtask, then one timer
    task, then every microtask that task queued, and so on. Time is virtual:
    ``block()`` advances the clock the way a busy loop would, and timers
    never fire before their due time.
    """

    def __init__(self):
        self.now = 0
        self._microtasks: deque[Callable[[], Any]] = deque()
        self._timers: list[tuple[int, int, Callable[[], Any]]] = []
        self._seq = itertools.count()
        self.tasks_run = 0

    def queue_microtask(self, callback: Callable[[], Any]) -> None:
        self._microtasks.append(callback)

    def set_timeout(self, callback: Callable[[], Any], delay_ms: int = 0) -> None:
        due = self.now + max(delay_ms, 0)
        heapq.heappush(self._timers, (due, next(self._seq), callback))

    def block(self, ms: int) -> None:
        """Advance the clock without giving queued work a chance to run."""
        self.now += max(ms, 0)

    def pending(self) -> int:
        return len(self._microtasks) + len(self._timers)

    def _drain_microtasks(self) -> None:
        while self._microtasks:
            callback = self._microtasks.popleft()
            callback()

    def run(self) -> int:
        """Run until both queues are empty. Returns the number of timer tasks run."""
        self._drain_microtasks()
        while self._timers:
            due, _, callback = heapq.heappop(self._timers)
            self.now = max(self.now, due)
            callback()
            self.tasks_run += 1
            self._drain_microtasks()
        logger.debug(f"Event loop idle at t={self.now}ms after {self.tasks_run} tasks")
        return self.tasks_run


# --- Deferred ---


class DeferredAlreadySettledError(Exception):
    """Raised when a deferred is resolved or rejected a second time."""

    pass


class DeferredState(str, Enum):
    """Settlement state of a deferred."""

    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


class Deferred:
    """Promise-equivalent with single-resume semantics.

    Callbacks registered with ``then`` always run as microtasks on the owning
    loop, even when the deferred is already settled.
    """

    def __init__(self, loop: EventLoop):
        self.loop = loop
        self.state = DeferredState.PENDING
        self.value: Any = None
        self._callbacks: list[Callable[[], None]] = []
        self._adopting = False

    @classmethod
    def resolved(cls, loop: EventLoop, value: Any = None) -> Deferred:
        deferred = cls(loop)
        deferred.resolve(value)
        return deferred

    @property
    def settled(self) -> bool:
        return self.state != DeferredState.PENDING

    def _settle(self, state: DeferredState, value: Any) -> None:
        if self.settled:
            raise DeferredAlreadySettledError(f"Deferred already {self.state.value}")
        self.state = state
        self.value = value
        for callback in self._callbacks:
            self.loop.queue_microtask(callback)
        self._callbacks.clear()

    def _check_open(self) -> None:
        if self.settled:
            raise DeferredAlreadySettledError(f"Deferred already {self.state.value}")
        if self._adopting:
            raise DeferredAlreadySettledError("Deferred already resolved with another Deferred")

    def resolve(self, value: Any = None) -> None:
        self._check_open()
        if value is self:
            self._settle(DeferredState.REJECTED, TypeError("Deferred cannot be resolved with itself"))
            return
        if isinstance(value, Deferred):
            # Locked until the adopted deferred settles
            self._adopting = True
            value.then(self._adopt_fulfilled, self._adopt_rejected)
            return
        self._settle(DeferredState.FULFILLED, value)

    def _adopt_fulfilled(self, value: Any) -> None:
        self._adopting = False
        self._settle(DeferredState.FULFILLED, value)

    def _adopt_rejected(self, error: BaseException) -> None:
        self._adopting = False
        self._settle(DeferredState.REJECTED, error)

    def reject(self, error: BaseException) -> None:
        self._check_open()
        self._settle(DeferredState.REJECTED, error)

    def then(
        self,
        on_fulfilled: Callable[[Any], Any] | None = None,
        on_rejected: Callable[[BaseException], Any] | None = None,
    ) -> Deferred:
        child = Deferred(self.loop)

        def callback() -> None:
            handler = on_fulfilled if self.state == DeferredState.FULFILLED else on_rejected
            if handler is None:
                if self.state == DeferredState.FULFILLED:
                    child.resolve(self.value)
                else:
                    child.reject(self.value)
                return
            try:
                result = handler(self.value)
            except Exception as e:
                child.reject(e)
                return
            child.resolve(result)

        if self.settled:
            self.loop.queue_microtask(callback)
        else:
            self._callbacks.append(callback)
        return child

    def catch(self, on_rejected: Callable[[BaseException], Any]) -> Deferred:
        return self.then(None, on_rejected)
