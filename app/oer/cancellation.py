"""Cancellation scope grouping the requests issued by one fetch cycle."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, Set

logger = logging.getLogger(__name__)


class CancelScope:
    """Tracks the asyncio tasks of one fetch cycle.

    Tasks are kept alive by the scope until they finish.  ``cancel()``
    cancels every task still running; it may be called any number of
    times.  A cancelled scope refuses new work.
    """

    def __init__(self, cycle: int) -> None:
        self.cycle = cycle
        self.cancelled = False
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        if self.cancelled:
            coro.close()
            raise RuntimeError(f"Fetch cycle {self.cycle} has been cancelled")
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def cancel(self) -> None:
        if not self.cancelled:
            logger.debug("Cancelling %s request(s) of cycle %s", len(self._tasks), self.cycle)
        self.cancelled = True
        for task in list(self._tasks):
            task.cancel()

    async def wait(self) -> None:
        """Wait for the tasks running right now, whatever their outcome."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
