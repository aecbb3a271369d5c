"""Periodic cart refresh loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CartRefreshPoller(Generic[T]):
    """Re-run a cart refresh callable every ``interval_seconds``.

    A failed cycle is logged and the loop keeps going; ``stop`` cancels the
    pending cycle.
    """

    def __init__(
        self,
        refresh: Callable[[], Awaitable[T]],
        interval_seconds: float = 60.0,
        on_result: Callable[[T], Awaitable[None] | None] | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.refresh = refresh
        self.interval_seconds = interval_seconds
        self.on_result = on_result
        self.cycles = 0
        self.failures = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> T | None:
        """Run one cycle; return the refresh result or ``None`` on failure."""
        self.cycles += 1
        try:
            result = await self.refresh()
            if self.on_result is not None:
                outcome = self.on_result(result)
                if asyncio.iscoroutine(outcome):
                    await outcome
        except Exception:
            self.failures += 1
            logger.exception("Cart refresh cycle failed")
            return None
        return result

    async def _loop(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="cart-refresh-poller")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
