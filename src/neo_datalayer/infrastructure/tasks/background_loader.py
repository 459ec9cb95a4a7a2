"""Supervised background tasks.

Runs fire-and-forget coroutines (background cache fills) so that a late
failure ends up in the log instead of the caller's path, and so tasks are
kept referenced until they settle.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)


class BackgroundLoader:
    """Owns background tasks for one entity manager."""

    def __init__(self, name: str):
        self.name = name
        self._tasks: Set[asyncio.Task] = set()

    def spawn(
        self,
        coro: Awaitable[Any],
        description: str = "task",
        on_done: Optional[Callable[[asyncio.Task], None]] = None,
    ) -> asyncio.Task:
        """Schedule ``coro`` and supervise it.

        ``on_done`` runs after the task settles, whatever the outcome.
        """
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)

        def _settled(finished: asyncio.Task) -> None:
            self._tasks.discard(finished)
            if not finished.cancelled() and finished.exception() is not None:
                error = finished.exception()
                logger.error(
                    f"[EntityManager:{self.name}] Background {description} failed: {error}",
                    exc_info=(type(error), error, error.__traceback__),
                )
            if on_done is not None:
                on_done(finished)

        task.add_done_callback(_settled)
        return task

    async def drain(self) -> None:
        """Wait until every supervised task has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def cancel_all(self) -> None:
        """Cancel every pending task (used on dispose)."""
        for task in list(self._tasks):
            task.cancel()
