"""Weather and location context models."""

from dataclasses import dataclass

from pydantic import BaseModel

from idleview.domain.settings import UserSettings


class Location(BaseModel):
    """Approximate device location."""

    latitude: float
    longitude: float
    city: str | None = None
    country: str | None = None


class WeatherSnapshot(BaseModel):
    """Current weather conditions used to pick a photo."""

    temperature: float
    humidity: float
    wind_speed: float
    cloudcover: float
    rain: float
    snowfall: float
    sunrise: str | None = None
    sunset: str | None = None
    timezone: str | None = None


@dataclass(frozen=True)
class ContextSnapshot:
    """Read-only view of weather plus the user settings at decision time."""

    weather: WeatherSnapshot
    settings: UserSettings

    @property
    def enable_festive(self) -> bool:
        """Return True when holiday queries are enabled."""
        return self.settings.photos.enable_festive_queries
