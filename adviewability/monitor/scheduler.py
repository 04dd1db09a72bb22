"""
Periodic scheduling for monitoring sessions.

A scheduler runs one callback per interval and never runs a callback while
the previous one for the same task is still executing. Cancelling is the
only way to stop a task, and it can be done from inside the callback.
"""

import asyncio
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from adviewability.utils.logger import get_logger

logger = get_logger(__name__)

TickCallback = Callable[[], None]


class Scheduler(Protocol):
    """Cancellable periodic task facility."""

    def schedule_periodic(self, interval_ms: int, callback: TickCallback) -> Any: ...

    def cancel(self, handle: Any) -> None: ...


@dataclass(order=True)
class _ManualTask:
    due_ms: int
    task_id: int
    interval_ms: int = field(compare=False)
    callback: TickCallback = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class ManualScheduler:
    """
    Deterministic scheduler on a virtual clock.

    Time only moves through `advance()`; tasks due at the same instant run
    in the order they were scheduled.
    """

    def __init__(self):
        self.now_ms = 0
        self._tasks: dict[int, _ManualTask] = {}
        self._ids = itertools.count(1)

    def schedule_periodic(self, interval_ms: int, callback: TickCallback) -> int:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        task_id = next(self._ids)
        self._tasks[task_id] = _ManualTask(
            due_ms=self.now_ms + interval_ms,
            task_id=task_id,
            interval_ms=interval_ms,
            callback=callback,
        )
        return task_id

    def cancel(self, handle: int) -> None:
        task = self._tasks.pop(handle, None)
        if task is not None:
            task.cancelled = True

    @property
    def active_tasks(self) -> int:
        return len(self._tasks)

    def advance(self, ms: int) -> int:
        """Move the clock forward, firing every due callback. Returns the number fired."""
        target = self.now_ms + ms
        fired = 0

        while True:
            due = [t for t in self._tasks.values() if t.due_ms <= target]
            if not due:
                break
            task = min(due)
            self.now_ms = task.due_ms
            task.due_ms += task.interval_ms
            task.callback()
            fired += 1

        self.now_ms = target
        return fired

    def run_ticks(self, count: int, interval_ms: int) -> int:
        """Advance one interval at a time, `count` times."""
        return sum(self.advance(interval_ms) for _ in range(count))


class AsyncioScheduler:
    """
    Scheduler backed by an asyncio event loop.

    The next tick is armed only after the current callback returns, so a
    slow tick delays the following one instead of overlapping it.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop
        self._handles: dict[int, asyncio.TimerHandle] = {}
        self._ids = itertools.count(1)

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule_periodic(self, interval_ms: int, callback: TickCallback) -> int:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        task_id = next(self._ids)
        delay = interval_ms / 1000

        def _run() -> None:
            if task_id not in self._handles:
                return
            try:
                callback()
            except Exception as e:
                logger.error("Periodic callback failed", task_id=task_id, error=str(e))
                self._handles.pop(task_id, None)
                raise
            if task_id in self._handles:
                self._handles[task_id] = self.loop.call_later(delay, _run)

        self._handles[task_id] = self.loop.call_later(delay, _run)
        return task_id

    def cancel(self, handle: int) -> None:
        timer = self._handles.pop(handle, None)
        if timer is not None:
            timer.cancel()

    @property
    def active_tasks(self) -> int:
        return len(self._handles)
