"""Wires timers and inbound triggers to the photo orchestrator."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from idleview.services.context import ContextService
from idleview.services.debug import DebugReporter
from idleview.services.events import EventBus
from idleview.services.orchestrator import PhotoOrchestrator
from idleview.services.timers import PeriodicTask
from idleview.services.user_settings import SettingsService

_logger = logging.getLogger(__name__)


@dataclass
class IdleviewRuntime:
    """Starts and stops all periodic work and event subscriptions.

    Event handlers return immediately and run their work as background
    tasks, so a slow fetch never blocks the publisher.
    """

    orchestrator: PhotoOrchestrator
    context_service: ContextService
    settings_service: SettingsService
    debug_reporter: DebugReporter
    events: EventBus
    check_interval_seconds: float = 30.0
    weather_interval_seconds: float = 900.0
    _loops: list[PeriodicTask] = field(default_factory=list, init=False, repr=False)
    _pending: set[asyncio.Task[None]] = field(
        default_factory=set, init=False, repr=False
    )
    _unsubscribers: list[Callable[[], None]] = field(
        default_factory=list, init=False, repr=False
    )

    @property
    def started(self) -> bool:
        """Return True between start() and stop()."""
        return bool(self._loops)

    def start(self) -> None:
        """Subscribe to triggers and start the photo and weather loops."""
        if self.started:
            return
        self.orchestrator.on_presented = self.debug_reporter.sync
        self._unsubscribers = [
            self.events.settings_updated.subscribe(self.on_settings_updated),
            self.events.refresh_photo.subscribe(self.on_refresh_photo),
        ]
        self._loops = [
            PeriodicTask(
                "photo-context-check",
                self.check_interval_seconds,
                self.orchestrator.check_photo_context,
            ),
            PeriodicTask(
                "weather-refresh",
                self.weather_interval_seconds,
                self.update_weather,
            ),
        ]
        for loop_task in self._loops:
            loop_task.start()
        self.debug_reporter.sync()
        _logger.info(
            "Photo context check every %ss, weather every %ss",
            self.check_interval_seconds,
            self.weather_interval_seconds,
        )

    def stop(self) -> None:
        """Cancel loops, pending handler work, prefetches and subscriptions."""
        for loop_task in self._loops:
            loop_task.stop()
        self._loops = []
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        for task in self._pending:
            task.cancel()
        self._pending.clear()
        self.debug_reporter.stop()
        self.orchestrator.cancel_background()
        self.orchestrator.presenter.close()

    async def drain(self) -> None:
        """Wait for handler work started by events to finish."""
        while True:
            pending = {task for task in self._pending if not task.done()}
            if not pending:
                return
            await asyncio.wait(pending)

    async def update_weather(self) -> None:
        """Refresh weather and show a photo for it, reusing a valid cache."""
        await self.context_service.refresh()
        await self.orchestrator.refresh()

    async def on_settings_updated(self, _payload: object) -> None:
        """Reload settings from storage and re-evaluate the photo."""
        _logger.info("Settings updated, reloading")
        self.settings_service.reload()
        self.debug_reporter.sync()
        self._spawn(self.update_weather(), name="settings-reload")

    async def on_refresh_photo(self, _payload: object) -> None:
        """Fetch a brand-new photo, ignoring the cache and any prefetch."""
        _logger.info("Manual photo refresh requested")
        self._spawn(self.force_refresh(), name="manual-refresh")

    async def force_refresh(self) -> None:
        """Ensure weather is known, then fetch and commit a new photo."""
        if self.context_service.weather is None:
            await self.context_service.refresh()
        await self.orchestrator.refresh(force=True, bypass_prefetch=True)

    def _spawn(self, work: Awaitable[None], *, name: str) -> None:
        task = asyncio.get_running_loop().create_task(self._run(work), name=name)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run(self, work: Awaitable[None]) -> None:
        try:
            await work
        except Exception:
            _logger.exception("Background photo work failed")
