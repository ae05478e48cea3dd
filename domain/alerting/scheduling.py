"""Cancellable periodic task on the running asyncio loop.

The callback runs to completion before the next sleep starts, so two
invocations never overlap and no locking is needed.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Handle for a callback fired every ``period_s`` seconds.

    The first invocation happens one period after start, like a browser
    interval timer. An exception raised by the callback is logged and the
    loop keeps going.
    """

    def __init__(
        self,
        callback: Callable[[], object],
        period_s: float,
        *,
        name: str = "periodic-task",
    ) -> None:
        if period_s <= 0:
            raise ValueError("period_s must be positive")
        self._callback = callback
        self._period_s = float(period_s)
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self.tick_count = 0

    @classmethod
    def spawn(
        cls,
        callback: Callable[[], object],
        period_s: float,
        *,
        name: str = "periodic-task",
    ) -> "PeriodicTask":
        return cls(callback, period_s, name=name).start()

    @property
    def name(self) -> str:
        return self._name

    @property
    def period_s(self) -> float:
        return self._period_s

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> "PeriodicTask":
        """Schedule on the running loop. No-op when already running."""
        if self.running:
            return self
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=self._name)
        return self

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait_cancelled(self) -> None:
        """Wait until a cancelled task has actually finished."""
        if self._task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await self._task

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._period_s)
            try:
                self._callback()
            except Exception:
                logger.exception("Periodic task %s: callback failed", self._name)
            self.tick_count += 1
