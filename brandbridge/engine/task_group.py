"""Fan-out/fan-in group with first-error cancellation.

Every unit runs to completion; a failure only marks the group's shared
``cancelled`` event so that units which check it can stop early.
``wait()`` returns once all units are done and raises the first error
observed, in completion order.

Usage:
    async with ErrorGroup() as group:
        group.go(read_profile())
        group.go(read_tenant())
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any

logger = logging.getLogger(__name__)


class ErrorGroup:
    """Run awaitables concurrently and surface the first failure."""

    def __init__(self) -> None:
        self.cancelled = asyncio.Event()
        self._tasks: list[asyncio.Future[Any]] = []
        self._first_error: BaseException | None = None

    def go(self, aw: Awaitable[Any]) -> asyncio.Future[Any]:
        task = asyncio.ensure_future(aw)
        task.add_done_callback(self._on_done)
        self._tasks.append(task)
        return task

    def _on_done(self, task: asyncio.Future[Any]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        if self._first_error is None:
            self._first_error = exc
            self.cancelled.set()
        else:
            logger.debug("ErrorGroup: suppressed later failure: %r", exc)

    async def wait(self) -> None:
        """Block until every unit finished; raise the first error."""
        try:
            if self._tasks:
                await asyncio.wait(self._tasks)
        except asyncio.CancelledError:
            self.cancelled.set()
            for task in self._tasks:
                task.cancel()
            raise
        if self._first_error is not None:
            raise self._first_error

    async def __aenter__(self) -> ErrorGroup:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            await self.wait()
            return False
        # The body itself failed: let the units finish, keep the body's error.
        self.cancelled.set()
        if self._tasks:
            await asyncio.wait(self._tasks)
        return False
