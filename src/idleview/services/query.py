"""Photo search queries derived from weather, daylight and calendar."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Protocol

from idleview.domain.weather import ContextSnapshot

_SUN_TIME_FORMAT = "%Y-%m-%dT%H:%M"
_TWILIGHT = timedelta(minutes=30)
_PRECIPITATION_THRESHOLD = 0.5
_CLOUDY_THRESHOLD = 70.0


class QueryBuilder(Protocol):
    """Turns a context snapshot into a photo search query."""

    async def build_query(self, context: ContextSnapshot) -> str:
        """Return the search query for the given context."""


@dataclass(frozen=True)
class TimeOfDay:
    """Time-of-day bucket and whether sun times were available."""

    name: str
    source: str


def parse_sun_time(raw: str | None) -> datetime | None:
    """Parse an Open-Meteo local sunrise/sunset value."""
    if not raw:
        return None
    try:
        return datetime.strptime(raw, _SUN_TIME_FORMAT)  # noqa: DTZ007
    except ValueError:
        return None


def time_of_day(sunrise: str | None, sunset: str | None, now: datetime) -> TimeOfDay:
    """Classify ``now`` as dawn, day, dusk or night around the sun times."""
    sunrise_at = parse_sun_time(sunrise)
    sunset_at = parse_sun_time(sunset)
    if sunrise_at is None or sunset_at is None:
        return TimeOfDay(name="night", source="fallback")

    dawn_start, dawn_end = sunrise_at - _TWILIGHT, sunrise_at + _TWILIGHT
    dusk_start, dusk_end = sunset_at - _TWILIGHT, sunset_at + _TWILIGHT
    if now < dawn_start or now > dusk_end:
        name = "night"
    elif now <= dawn_end:
        name = "dawn"
    elif now >= dusk_start:
        name = "dusk"
    else:
        name = "day"
    return TimeOfDay(name=name, source="api")


def season_for(now: datetime) -> str:
    """Return the northern-hemisphere season for a date."""
    if 3 <= now.month <= 5:  # noqa: PLR2004
        return "spring"
    if 6 <= now.month <= 8:  # noqa: PLR2004
        return "summer"
    if 9 <= now.month <= 11:  # noqa: PLR2004
        return "autumn"
    return "winter"


def festive_query(now: datetime) -> str | None:
    """Return a holiday query when ``now`` falls in a festive period."""
    month, day = now.month, now.day
    if month == 12 and 20 <= day <= 26:  # noqa: PLR2004
        return "christmas"
    if (month == 12 and day >= 27) or (month == 1 and day <= 5):  # noqa: PLR2004
        return "new year"
    if month == 10 and day >= 25:  # noqa: PLR2004
        return "halloween"
    return None


def build_photo_query(context: ContextSnapshot, now: datetime) -> str:
    """Build a query: holidays first, then time of day, season, precipitation."""
    if context.enable_festive:
        holiday = festive_query(now)
        if holiday:
            return holiday

    weather = context.weather
    season = season_for(now)
    has_snow = weather.snowfall > _PRECIPITATION_THRESHOLD
    has_rain = weather.rain > _PRECIPITATION_THRESHOLD
    tod = time_of_day(weather.sunrise, weather.sunset, now)

    if tod.name == "night":
        if has_snow:
            return f"{season} snowy night"
        if has_rain:
            return f"{season} rainy night"
        return f"{season} night"
    if tod.name in {"dawn", "dusk"}:
        return f"{season} {tod.name}"
    if has_snow:
        return f"{season} snow"
    if has_rain:
        return f"{season} rain"
    if weather.cloudcover > _CLOUDY_THRESHOLD and season != "winter":
        return f"{season} cloudy"
    return season


@dataclass
class WeatherQueryBuilder(QueryBuilder):
    """Default query builder using the local wall clock."""

    clock: Callable[[], datetime] = field(default=datetime.now)

    async def build_query(self, context: ContextSnapshot) -> str:
        """Build a query for the current local time."""
        return build_photo_query(context, self.clock())
