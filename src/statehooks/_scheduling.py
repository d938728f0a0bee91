"""Deferred work — the idle point where late callbacks run.

Two things in statehooks happen "later" rather than inside the caller's
stack: the one-shot re-assertion a ValueCell schedules at construction, and
the per-field write-back of a PartitionedStore. Both go through a Scheduler.

The process default is a TaskQueue, drained explicitly with flush(). Install
a LoopScheduler to hand the work to a running asyncio loop instead.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Callable, Protocol

logger = logging.getLogger("statehooks.scheduling")

Task = Callable[[], None]


class Scheduler(Protocol):
    def schedule(self, callback: Task) -> None: ...


class TaskQueue:
    """FIFO of deferred callbacks. Nothing runs until run_pending()."""

    __slots__ = ("_tasks",)

    def __init__(self) -> None:
        self._tasks: deque[Task] = deque()

    def schedule(self, callback: Task) -> None:
        self._tasks.append(callback)

    def run_pending(self) -> int:
        """Run queued callbacks, including ones queued while draining.

        Returns the number of callbacks run. If a callback raises, the
        exception propagates and the rest stay queued.
        """
        ran = 0
        while self._tasks:
            task = self._tasks.popleft()
            task()
            ran += 1
        if ran:
            logger.debug("Ran %d deferred task(s)", ran)
        return ran

    def __len__(self) -> int:
        return len(self._tasks)

    def __repr__(self) -> str:
        return f"TaskQueue(pending={len(self._tasks)})"


class LoopScheduler:
    """Schedules callbacks onto an asyncio event loop with call_soon."""

    __slots__ = ("_loop",)

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """The loop given at construction, else the currently running one."""
        if self._loop is None:
            return asyncio.get_running_loop()
        return self._loop

    def schedule(self, callback: Task) -> None:
        self.loop.call_soon(callback)


# ─── Process default ────────────────────────────────────────────────────────
_scheduler: Scheduler = TaskQueue()


def set_scheduler(scheduler: Scheduler) -> None:
    """Replace the default scheduler used when none is passed explicitly.

    Usage:
        statehooks.set_scheduler(LoopScheduler())
    """
    global _scheduler
    _scheduler = scheduler


def get_scheduler() -> Scheduler:
    return _scheduler


def resolve(scheduler: Scheduler | None) -> Scheduler:
    return scheduler if scheduler is not None else _scheduler


def flush() -> int:
    """Drain the default scheduler if it is a TaskQueue. Useful for testing."""
    if isinstance(_scheduler, TaskQueue):
        return _scheduler.run_pending()
    return 0


def get_pending_count() -> int:
    """Number of deferred callbacks waiting on the default TaskQueue."""
    if isinstance(_scheduler, TaskQueue):
        return len(_scheduler)
    return 0
