"""Debug overlay composition."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from idleview.config import api_key_status
from idleview.domain.debug import DebugInfo, DebugSnapshot
from idleview.domain.photos import PhotoCacheEntry
from idleview.domain.settings import UserSettings
from idleview.domain.weather import WeatherSnapshot
from idleview.services.orchestrator import PhotoOrchestrator
from idleview.services.presenter import DisplaySurface
from idleview.services.query import season_for, time_of_day
from idleview.services.timers import PeriodicTask, now_ms

_logger = logging.getLogger(__name__)


class DebugInfoProvider(Protocol):
    """Supplies contextual debug fields."""

    async def get_debug_info(
        self, entry: PhotoCacheEntry | None, weather: WeatherSnapshot | None
    ) -> DebugInfo:
        """Return diagnostics for the cached entry and current weather."""


def format_photo_age(cache_timestamp: int | None, now: int) -> str:
    """Return a coarse age such as '42s ago' or '3h ago'."""
    if cache_timestamp is None:
        return "unknown"
    seconds = max(0, now - cache_timestamp) // 1000
    if seconds < 60:  # noqa: PLR2004
        return f"{seconds}s ago"
    minutes = seconds // 60
    if minutes < 60:  # noqa: PLR2004
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:  # noqa: PLR2004
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def format_time_remaining(milliseconds: int) -> str:
    """Format a countdown as '45s', '4m 05s' or '1h 02m'."""
    if milliseconds <= 0:
        return "0s"
    total_seconds = milliseconds // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}h {minutes:02d}m"
    if minutes > 0:
        return f"{minutes}m {seconds:02d}s"
    return f"{seconds}s"


@dataclass
class ContextDebugInfoProvider(DebugInfoProvider):
    """Builds debug fields from weather, season and key configuration."""

    settings_provider: Callable[[], UserSettings]
    access_key: str
    clock: Callable[[], int] = now_ms
    local_clock: Callable[[], datetime] = field(default=datetime.now)

    async def get_debug_info(
        self, entry: PhotoCacheEntry | None, weather: WeatherSnapshot | None
    ) -> DebugInfo:
        """Compose debug fields for the overlay."""
        local_now = self.local_clock()
        tod = time_of_day(
            weather.sunrise if weather else None,
            weather.sunset if weather else None,
            local_now,
        )
        status, source = api_key_status(self.access_key)
        fahrenheit = self.settings_provider().units.temperature_unit == "fahrenheit"
        if weather is None:
            temperature = rain = snowfall = cloudcover = "n/a"
        else:
            if fahrenheit:
                temperature = f"{weather.temperature * 9 / 5 + 32:.1f}°F"
            else:
                temperature = f"{weather.temperature:.1f}°C"
            rain = f"{weather.rain:.1f}mm"
            snowfall = f"{weather.snowfall:.1f}cm"
            cloudcover = f"{int(weather.cloudcover)}%"
        return DebugInfo(
            photo_age=format_photo_age(
                entry.timestamp if entry else None, self.clock()
            ),
            query=entry.query if entry else "n/a",
            time_of_day=tod.name,
            time_source=tod.source,
            api_key_status=status,
            api_key_source=source,
            season=season_for(local_now),
            temperature=temperature,
            rain=rain,
            snowfall=snowfall,
            cloudcover=cloudcover,
        )


@dataclass
class DebugReporter:
    """Renders a read-only diagnostic overlay while debug is enabled."""

    orchestrator: PhotoOrchestrator
    info_provider: DebugInfoProvider
    surface: DisplaySurface
    settings_provider: Callable[[], UserSettings]
    weather_provider: Callable[[], WeatherSnapshot | None]
    interval_seconds: float = 1.0
    clock: Callable[[], int] = now_ms
    _task: PeriodicTask | None = field(default=None, init=False, repr=False)

    @property
    def running(self) -> bool:
        """Return True while the overlay cadence is active."""
        return self._task is not None and self._task.running

    def sync(self) -> None:
        """Start or stop the cadence to match the show_debug setting."""
        if self.settings_provider().display.show_debug:
            if not self.running:
                self._task = PeriodicTask(
                    "debug-reporter", self.interval_seconds, self.render
                )
                self._task.start()
        else:
            self.stop()

    def stop(self) -> None:
        """Stop the cadence and clear the overlay."""
        if self._task is not None:
            self._task.stop()
            self._task = None
            self.surface.hide_debug()

    async def render(self) -> None:
        """Compose one snapshot and push it to the surface."""
        snapshot = await self.compose()
        if snapshot is not None:
            self.surface.show_debug(snapshot.lines())

    async def compose(self) -> DebugSnapshot | None:
        """Return the current diagnostics, or None if they can't be built."""
        cached = self.orchestrator.cache_store.read()
        try:
            info = await self.info_provider.get_debug_info(
                cached, self.weather_provider()
            )
        except Exception as exc:
            _logger.warning("Failed to render debug: %s", exc)
            return None

        next_refresh = "N/A"
        if cached is not None:
            ttl = self.settings_provider().refresh_interval_ms
            next_refresh = format_time_remaining(
                ttl - (self.clock() - cached.timestamp)
            )
        return DebugSnapshot(
            info=info,
            cache_timestamp=cached.timestamp if cached else None,
            last_photo_fetch=self.orchestrator.last_photo_fetch,
            cache_valid=self.orchestrator.last_cache_valid,
            last_error=self.orchestrator.last_error,
            next_refresh_in=next_refresh,
        )
