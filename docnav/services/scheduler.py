"""Recurring timer on the asyncio event loop."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class FixedInterval:
    """Fire ``callback`` every ``interval`` seconds after an initial ``delay``.

    Each firing runs as its own task, so ``destroy`` stops future firings
    without cancelling one that is still running. A failing callback is logged
    and the timer keeps going.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], Awaitable[object]],
        *,
        delay: float = 0.0,
        name: str | None = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.delay = delay
        self.callback = callback
        self.name = name or getattr(callback, "__qualname__", "interval")
        self._loop_task: asyncio.Task | None = None
        self._runs: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    @property
    def in_flight(self) -> int:
        """Number of callback runs still executing."""
        return len(self._runs)

    def start(self) -> None:
        """Start the timer on the running event loop (no-op if already running)."""
        if self.running:
            return
        self._loop_task = asyncio.create_task(self._run(), name=f"interval:{self.name}")

    def destroy(self) -> None:
        """Stop scheduling new runs. Runs already in flight are left alone."""
        if self._loop_task is not None:
            self._loop_task.cancel()
            self._loop_task = None

    def fire(self) -> asyncio.Task:
        """Run the callback now, outside the regular schedule."""
        task = asyncio.create_task(self._invoke(), name=f"interval-run:{self.name}")
        self._runs.add(task)
        task.add_done_callback(self._runs.discard)
        return task

    async def _run(self) -> None:
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        while True:
            await asyncio.sleep(self.interval)
            self.fire()

    async def _invoke(self) -> None:
        try:
            await self.callback()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Scheduled run of {self.name} failed: {e}", exc_info=True)
