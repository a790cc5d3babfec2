"""Fire-and-forget follow-up work with failures reported, not raised."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from remote_queries.orchestrator.collaborators import Notifier

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Spawns detached tasks on the running loop and keeps them referenced.

    A failing task is reported through the notifier; it never affects the
    task that spawned it or any sibling.
    """

    def __init__(self, notifier: Notifier) -> None:
        self._notifier = notifier
        self._tasks: set[asyncio.Task[None]] = set()

    def spawn(self, coro: Coroutine[Any, Any, None], *, name: str) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(self._guard(coro, name), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug("Spawned background task %s", name)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for all outstanding tasks, including ones spawned meanwhile."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _guard(self, coro: Coroutine[Any, Any, None], name: str) -> None:
        try:
            await coro
        except asyncio.CancelledError:
            logger.info("Background task %s was cancelled", name)
            raise
        except Exception as error:  # noqa: BLE001
            logger.debug("Background task %s failed", name, exc_info=True)
            await self._notifier.show_and_log_error_message(f"{name} failed: {error}")
