from __future__ import annotations

from typing import Callable, List, Optional

import logging
import time

logger = logging.getLogger(__name__)


class ScheduledTask:
    """A callback waiting for its deadline. Cancelling it is final."""

    def __init__(self, deadline: float, callback: Callable[[], None], name: str = "") -> None:
        self.deadline = deadline
        self.callback = callback
        self.name = name or getattr(callback, "__name__", "task")
        self.cancelled = False
        self.done = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        state = "pending" if self.pending else ("cancelled" if self.cancelled else "done")
        return f"ScheduledTask({self.name!r}, deadline={self.deadline:.3f}, {state})"


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class Scheduler:
    """Cooperative delayed callbacks.

    Nothing runs on its own: ``run_pending`` fires whatever was due when
    it was called. Tasks scheduled from inside a callback wait for the
    next call, so a chain of zero-delay tasks advances one step per call.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self.clock = clock or time.monotonic
        self._tasks: List[ScheduledTask] = []

    def call_later(self, delay: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        task = ScheduledTask(self.clock() + max(0.0, delay), callback, name)
        self._tasks.append(task)
        logger.debug("Scheduled %r", task)
        return task

    @property
    def pending(self) -> List[ScheduledTask]:
        return [task for task in self._tasks if task.pending]

    def next_deadline(self) -> Optional[float]:
        deadlines = [task.deadline for task in self._tasks if task.pending]
        return min(deadlines) if deadlines else None

    def run_pending(self) -> int:
        now = self.clock()
        self._tasks = [task for task in self._tasks if task.pending]
        due = sorted((task for task in self._tasks if task.deadline <= now), key=lambda t: t.deadline)

        fired = 0
        for task in due:
            # An earlier callback may have cancelled this one
            if not task.pending:
                continue
            task.done = True
            task.callback()
            fired += 1

        self._tasks = [task for task in self._tasks if task.pending]
        return fired

    def cancel_all(self) -> None:
        for task in self._tasks:
            task.cancel()
        self._tasks = []
