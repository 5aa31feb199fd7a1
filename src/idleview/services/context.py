"""Location and weather context acquisition."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

from idleview.domain.errors import ContextUnavailableError
from idleview.domain.settings import UserSettings
from idleview.domain.weather import ContextSnapshot, Location, WeatherSnapshot

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class LocationClient(Protocol):
    """Interface for IP-based geolocation."""

    async def get_location(self) -> Location:
        """Return the approximate device location."""


class WeatherClient(Protocol):
    """Interface for current weather lookups."""

    async def get_weather(self, latitude: float, longitude: float) -> WeatherSnapshot:
        """Return current conditions and today's sun times."""


class ContextProvider(Protocol):
    """Supplies the context used to pick a photo."""

    async def snapshot(self) -> ContextSnapshot | None:
        """Return the current context, or None until weather is known."""


@dataclass
class ContextService(ContextProvider):
    """Tracks the latest location and weather with retry/backoff."""

    location_client: LocationClient
    weather_client: WeatherClient
    settings_provider: Callable[[], UserSettings]
    retry_attempts: int = 3
    retry_delay_seconds: float = 1.0
    location: Location | None = None
    weather: WeatherSnapshot | None = None
    last_error: str | None = None

    async def refresh(self) -> WeatherSnapshot | None:
        """Re-read weather, resolving the location first if needed.

        Failures are logged and recorded; the previous weather stays in use.
        """
        try:
            if self.location is None:
                self.location = await self._call_with_retry(
                    self.location_client.get_location, action="location"
                )
            location = self.location
            self.weather = await self._call_with_retry(
                lambda: self.weather_client.get_weather(
                    location.latitude, location.longitude
                ),
                action="weather",
            )
        except ContextUnavailableError as exc:
            self.last_error = str(exc)
            _logger.warning("Context unavailable: %s", exc)
            return None
        self.last_error = None
        return self.weather

    async def snapshot(self) -> ContextSnapshot | None:
        """Return weather plus a fresh settings read."""
        if self.weather is None:
            return None
        return ContextSnapshot(weather=self.weather, settings=self.settings_provider())

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[T]], *, action: str
    ) -> T:
        """Call an async function, doubling the delay after each failure."""
        attempt = 0
        delay = self.retry_delay_seconds
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Context %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise ContextUnavailableError(f"{action}: {exc}") from exc
                await asyncio.sleep(delay)
                delay *= 2
