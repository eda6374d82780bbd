"""Continuation tracking for handler coroutines.

Handlers run synchronously inside dispatch(); the network work they start
is handed to a TaskTracker, which schedules it on the running event loop
and keeps a strong reference until it finishes. drain() waits for every
continuation, including the ones spawned while draining (chained
workflows dispatch their follow-up actions from inside a continuation).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Coroutine

from fleetstore.exceptions import NoEventLoopError

logger = logging.getLogger("fleetstore.tasks")


class TaskTracker:
    """Owns the in-flight continuations of one console."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    def require_loop(self) -> asyncio.AbstractEventLoop:
        """The running loop. Raises NoEventLoopError outside of one."""
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            raise NoEventLoopError(
                "No running event loop; dispatch actions from the loop's thread"
            ) from None

    def spawn(self, coro: Coroutine, *, name: str | None = None) -> asyncio.Task:
        """Schedule coro on the running loop. Must be called from the loop's thread.

        Without a running loop coro is closed unstarted and NoEventLoopError
        is raised.
        """
        try:
            loop = self.require_loop()
        except NoEventLoopError:
            coro.close()
            raise
        task = loop.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._done)
        return task

    def _done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Continuation %s failed", task.get_name(), exc_info=exc)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait until no continuation is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
