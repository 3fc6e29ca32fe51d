"""Fire-and-forget task bookkeeping."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Coroutine, Optional

LOGGER = logging.getLogger(__name__)


class TaskTracker:
    """Hold references to background tasks until they finish.

    Callers get no handle to await; the tracker exists so tasks are not
    garbage collected mid-flight and can be drained on shutdown.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: Optional[str] = None) -> None:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)

        def _finalise(completed: asyncio.Task[Any]) -> None:
            self._tasks.discard(completed)
            with contextlib.suppress(asyncio.CancelledError, Exception):
                completed.result()

        task.add_done_callback(_finalise)

    async def drain(self) -> None:
        """Wait for every task spawned on the running loop."""
        loop = asyncio.get_running_loop()
        while True:
            pending = [task for task in self._tasks if task.get_loop() is loop]
            stale = [task for task in self._tasks if task.get_loop() is not loop]
            for task in stale:
                # Loop already gone; nothing left to wait for.
                self._tasks.discard(task)
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)
