"""Event loop: call stack, timers, microtasks and why blocking hurts.

The ordering lessons run on ``concepts.EventLoop`` so the printed order is
exact and independent of wall-clock time. The coroutine lessons use asyncio.
"""

from __future__ import annotations

import asyncio
import math

from snippetrunner.concepts import Deferred, EventLoop
from snippetrunner.registry import snippet

CHUNK_ITEMS = 200_000
CHUNK_SIZE = 40_000


@snippet("event-loop/call-stack", "The call stack")
def call_stack(ctx):
    """Last in, first out: ``first`` finishes before ``second`` continues."""

    def first():
        print("First function")

    def second():
        first()
        print("Second function")

    print("Before calling second()")
    second()
    print("After calling second()")


@snippet("event-loop/set-timeout", "A zero-delay timer still waits")
def set_timeout(ctx):
    loop = EventLoop()

    print("A")
    loop.set_timeout(lambda: print("B (set_timeout 0)"), 0)
    print("C")

    loop.run()


@snippet("event-loop/promises", "Deferred callbacks are microtasks")
def promises(ctx):
    loop = EventLoop()

    print("1")
    Deferred.resolved(loop).then(lambda _: print("2 (from Deferred)"))
    print("3")
    (
        Deferred.resolved(loop)
        .then(lambda _: print("4 (first then)"))
        .then(lambda _: print("5 (second then)"))
    )
    print("6")

    loop.run()


@snippet("event-loop/tasks-vs-microtasks", "Microtasks run before tasks")
def tasks_vs_microtasks(ctx):
    loop = EventLoop()

    print("Start")
    loop.set_timeout(lambda: print("Task (set_timeout)"), 0)
    Deferred.resolved(loop).then(lambda _: print("Microtask 1"))
    Deferred.resolved(loop).then(lambda _: print("Microtask 2"))
    print("End")

    loop.run()


@snippet("event-loop/nested-async", "Microtasks queued inside a task")
def nested_async(ctx):
    loop = EventLoop()

    def timeout_one():
        print("Timeout 1")
        Deferred.resolved(loop).then(lambda _: print("Microtask inside Timeout 1"))

    loop.set_timeout(timeout_one, 0)
    loop.set_timeout(lambda: print("Timeout 2"), 0)
    Deferred.resolved(loop).then(lambda _: print("Microtask 1"))

    loop.run()


@snippet("event-loop/async-await", "Awaiting splits a coroutine")
async def async_await(ctx):
    """Creating a task only schedules it; the body runs once the caller yields."""

    async def demo():
        print("demo: 1")
        await asyncio.sleep(0)
        print("demo: 2")

    print("Start")
    task = asyncio.create_task(demo())
    print("End")
    await task


@snippet("event-loop/sync-vs-async", "Blocking versus waiting")
async def sync_vs_async(ctx):
    print("SYNC: Start")
    # time.sleep blocks everything, the event loop included
    ctx.sleep(3.0)
    print("SYNC: End")

    print("ASYNC: Start")
    done = asyncio.Event()

    def after_two_seconds():
        print("ASYNC: After 2 seconds")
        done.set()

    asyncio.get_running_loop().call_later(ctx.scaled(2.0), after_two_seconds)
    print("ASYNC: End")
    await done.wait()


@snippet("event-loop/heavy-blocking", "Heavy synchronous work delays timers")
def heavy_blocking(ctx):
    loop = EventLoop()

    print("Start")
    loop.set_timeout(lambda: print(f"Should run after 1 sec (ran at {loop.now}ms)"), 1000)

    # Five seconds of busy work
    loop.block(5000)
    print("End")

    loop.run()


@snippet("event-loop/chunking-works", "Chunked work keeps the loop responsive")
def chunking_works(ctx):
    loop = EventLoop()
    items = range(CHUNK_ITEMS)

    def process_chunk(start_index, chunk_size):
        end_index = min(start_index + chunk_size, len(items))
        for i in items[start_index:end_index]:
            math.sqrt(i)

        print(f"Processed {start_index} to {end_index - 1}")

        if end_index < len(items):
            loop.set_timeout(lambda: process_chunk(end_index, chunk_size), 0)
        else:
            print("Done!")

    print("Starting...")
    loop.set_timeout(lambda: print("Still responsive between chunks!"), 0)
    process_chunk(0, CHUNK_SIZE)
    print("Still responsive while chunks run!")

    loop.run()
