from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import structlog


# Strong references; the event loop only keeps weak ones to running tasks.
_tasks: set[asyncio.Task[None]] = set()


async def _supervise(fn: Callable[..., Awaitable[Any]], args: tuple[Any, ...]) -> None:
    try:
        await fn(*args)
    except Exception as exc:  # noqa: BLE001 - a detached task must never take the process down
        structlog.get_logger("background").error("recovered goroutine panic", panic=str(exc))


def spawn_supervised(fn: Callable[..., Awaitable[Any]], *args: Any) -> asyncio.Task[None]:
    """Run ``fn(*args)`` as a detached task whose faults are logged, not raised.

    The caller does not wait for the task. Any exception raised inside it is
    turned into a single ``recovered goroutine panic`` error line.
    """

    task = asyncio.get_running_loop().create_task(_supervise(fn, args))
    _tasks.add(task)
    task.add_done_callback(_tasks.discard)
    return task


def pending_count() -> int:
    return len(_tasks)


async def drain_background() -> None:
    """Wait for every in-flight supervised task to finish."""

    while _tasks:
        await asyncio.gather(*list(_tasks), return_exceptions=True)


PANIC_MESSAGE = "intentional panic inside goroutine for demo purposes"


async def panic_task() -> None:
    raise RuntimeError(PANIC_MESSAGE)
