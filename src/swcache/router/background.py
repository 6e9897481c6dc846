"""Detached cache writes that the response path never waits for."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from swcache.errors.exceptions import SwCacheError

logger = logging.getLogger(__name__)


class BackgroundWrites:
    """Tracks fire-and-forget writes.

    A write is at-most-once and best-effort: it may land after the caller
    has discarded the response, and a failure is only logged. Its result is
    observable solely through later reads of the partition.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(self, write: Coroutine[Any, Any, Any], label: str) -> asyncio.Task[None]:
        task = asyncio.create_task(self._run(write, label))
        # Hold a reference until done so the task is not garbage collected
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every outstanding write (shutdown and tests only)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    @staticmethod
    async def _run(write: Coroutine[Any, Any, Any], label: str) -> None:
        try:
            await write
        except SwCacheError as e:
            logger.warning("Background cache write failed for %s: %s", label, e)
