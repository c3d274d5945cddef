"""Task queue scheduler driven by an explicit millisecond clock."""

import heapq
import itertools
from typing import Callable, List, Tuple

from ..core.interfaces import IScheduler
from ..logger import get_logger

logger = get_logger(__name__)


class TaskQueueScheduler(IScheduler):
    """Runs deferred callbacks when the owner advances the clock.

    Nothing happens in the background: callbacks fire only inside
    `run_until`, in due-time order, so the same scheduler serves simulated
    time in tests and a polled wall clock in a host loop.
    """

    def __init__(self, start_ms: float = 0.0):
        self._now = start_ms
        self._tasks: List[Tuple[float, int, Callable[[], None]]] = []
        self._counter = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> None:
        if delay_ms < 0:
            raise ValueError("delay_ms must not be negative")
        heapq.heappush(self._tasks, (self._now + delay_ms, next(self._counter), callback))

    def run_until(self, now_ms: float) -> int:
        """Run every task due at or before `now_ms`.

        Returns:
            Number of callbacks run
        """
        ran = 0
        while self._tasks and self._tasks[0][0] <= now_ms:
            due, _, callback = heapq.heappop(self._tasks)
            self._now = max(self._now, due)
            callback()
            ran += 1
        self._now = max(self._now, now_ms)
        return ran

    def clear(self) -> None:
        if self._tasks:
            logger.debug(f"Dropping {len(self._tasks)} pending tasks")
        self._tasks.clear()
