"""Fire-and-forget scheduling of coroutines on the running event loop.

The event loop only keeps weak references to tasks, so a task nobody holds
can be garbage collected mid-flight. ``BackgroundTaskRunner`` holds every
scheduled task until it finishes and logs failures that would otherwise
only surface as "Task exception was never retrieved".

Example::

    runner = BackgroundTaskRunner()
    runner.spawn(initializer.initialize(tenant_id), name=f"initialize:{tenant_id}")
    ...
    await runner.drain()  # on shutdown
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Coroutine

logger = logging.getLogger(__name__)


class BackgroundTaskRunner:
    """Owns background tasks for the lifetime of an application.

    Attributes:
        _tasks: Tasks scheduled and not yet finished.
        _closed: Whether ``drain`` has been called.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task[Any]:
        """Schedule ``coro`` without awaiting it.

        Must be called from within a running event loop.

        Raises:
            RuntimeError: If the runner has been drained.
        """
        if self._closed:
            coro.close()
            msg = "BackgroundTaskRunner is closed"
            raise RuntimeError(msg)
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("background_task_cancelled", extra={"task_name": task.get_name()})
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "background_task_failed",
                extra={"task_name": task.get_name(), "error": str(exc)},
                exc_info=exc,
            )

    @property
    def pending(self) -> int:
        """Number of tasks still running."""
        return len(self._tasks)

    def is_idle(self) -> bool:
        return not self._tasks

    async def wait_idle(self) -> None:
        """Wait until every task scheduled so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def drain(self, timeout: float | None = None) -> None:
        """Stop accepting work and wait for outstanding tasks.

        Tasks still running after ``timeout`` seconds are cancelled.
        """
        self._closed = True
        if not self._tasks:
            return
        logger.info("background_tasks_draining", extra={"pending": len(self._tasks)})
        pending = list(self._tasks)
        _, still_running = await asyncio.wait(pending, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
