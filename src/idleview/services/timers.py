"""Owned timers for periodic and delayed work on the event loop."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

_logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return int(datetime.now(tz=UTC).timestamp() * 1000)


@dataclass
class PeriodicTask:
    """Runs an async callback on a fixed interval until stopped.

    ``tick()`` runs a single iteration and is what the loop calls, so tests
    can drive the callback deterministically without waiting on the clock.
    """

    name: str
    interval_seconds: float
    callback: Callable[[], Awaitable[None]]
    run_immediately: bool = True
    _task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    @property
    def running(self) -> bool:
        """Return True while the loop task is alive."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the loop on the running event loop; no-op if already running."""
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=self.name)

    def stop(self) -> None:
        """Cancel the loop; safe to call when not running."""
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def tick(self) -> None:
        """Run the callback once, logging instead of raising on failure."""
        try:
            await self.callback()
        except Exception:
            _logger.exception("Periodic task %s failed", self.name)

    async def _run(self) -> None:
        if not self.run_immediately:
            await asyncio.sleep(self.interval_seconds)
        while True:
            await self.tick()
            await asyncio.sleep(self.interval_seconds)


@dataclass
class OneShotTimer:
    """Delayed callback that restarts from zero every time it is scheduled."""

    delay_seconds: float
    callback: Callable[[], None]
    _handle: asyncio.TimerHandle | None = field(default=None, init=False, repr=False)

    @property
    def pending(self) -> bool:
        """Return True while a callback is scheduled and has not fired."""
        return self._handle is not None

    def schedule(self) -> None:
        """(Re)start the countdown, dropping any earlier schedule."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay_seconds, self._fire)

    def cancel(self) -> None:
        """Drop the scheduled callback if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.callback()
