"\"\"\"Detached background work for post-response side effects.\"\"\""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine

import structlog


class BackgroundPublisher:
    """Schedules side-effect coroutines without blocking the caller."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()
        self._logger = structlog.get_logger(__name__)

    def publish(self, name: str, work: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(work, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._finished)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every published task; failures are already logged."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _finished(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            self._logger.info("background.task_cancelled", task=task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            self._logger.error("background.task_failed", task=task.get_name(), error=str(exc))
