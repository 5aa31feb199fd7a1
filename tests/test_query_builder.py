import asyncio
from datetime import datetime

from idleview.domain.settings import PhotosSettings, UserSettings
from idleview.domain.weather import ContextSnapshot
from idleview.services.query import (
    WeatherQueryBuilder,
    build_photo_query,
    festive_query,
    season_for,
    time_of_day,
)
from tests.conftest import make_weather

SUMMER_NOON = datetime(2025, 6, 15, 12, 0)


def _context(festive: bool = True, **weather: object) -> ContextSnapshot:
    settings = UserSettings(photos=PhotosSettings(enable_festive_queries=festive))
    return ContextSnapshot(weather=make_weather(**weather), settings=settings)


def test_clear_day_uses_season_only() -> None:
    assert build_photo_query(_context(), SUMMER_NOON) == "summer"


def test_cloudy_day_outside_winter() -> None:
    assert build_photo_query(_context(cloudcover=85.0), SUMMER_NOON) == "summer cloudy"


def test_cloudy_winter_day_stays_plain() -> None:
    context = _context(
        cloudcover=95.0, sunrise="2025-01-15T08:00", sunset="2025-01-15T16:30"
    )

    assert build_photo_query(context, datetime(2025, 1, 15, 12, 0)) == "winter"


def test_precipitation_during_the_day() -> None:
    assert build_photo_query(_context(rain=2.0), SUMMER_NOON) == "summer rain"
    assert build_photo_query(_context(snowfall=1.0, rain=2.0), SUMMER_NOON) == (
        "summer snow"
    )
    assert build_photo_query(_context(rain=0.5), SUMMER_NOON) == "summer"


def test_twilight_buckets() -> None:
    assert build_photo_query(_context(), datetime(2025, 6, 15, 5, 10)) == "summer dawn"
    assert build_photo_query(_context(), datetime(2025, 6, 15, 21, 20)) == (
        "summer dusk"
    )


def test_night_variants() -> None:
    late = datetime(2025, 6, 15, 23, 0)

    assert build_photo_query(_context(), late) == "summer night"
    assert build_photo_query(_context(rain=3.0), late) == "summer rainy night"
    assert build_photo_query(_context(snowfall=3.0), late) == "summer snowy night"


def test_festive_periods_take_priority() -> None:
    context = _context(rain=5.0)

    assert build_photo_query(context, datetime(2025, 12, 24, 12, 0)) == "christmas"
    assert build_photo_query(context, datetime(2026, 1, 3, 12, 0)) == "new year"
    assert build_photo_query(context, datetime(2025, 10, 31, 12, 0)) == "halloween"


def test_festive_queries_can_be_disabled() -> None:
    context = _context(
        festive=False, sunrise="2025-12-24T08:10", sunset="2025-12-24T16:00"
    )

    assert build_photo_query(context, datetime(2025, 12, 24, 12, 0)) == "winter"


def test_missing_sun_times_fall_back_to_night() -> None:
    result = time_of_day(None, "2025-06-15T21:00", SUMMER_NOON)

    assert result.name == "night"
    assert result.source == "fallback"
    assert time_of_day("garbage", "2025-06-15T21:00", SUMMER_NOON).source == (
        "fallback"
    )


def test_time_of_day_reports_api_source() -> None:
    result = time_of_day("2025-06-15T05:00", "2025-06-15T21:00", SUMMER_NOON)

    assert result.name == "day"
    assert result.source == "api"


def test_seasons_and_holidays() -> None:
    assert season_for(datetime(2025, 3, 1)) == "spring"
    assert season_for(datetime(2025, 9, 30)) == "autumn"
    assert season_for(datetime(2025, 12, 1)) == "winter"
    assert festive_query(datetime(2025, 12, 19)) is None
    assert festive_query(datetime(2025, 12, 27)) == "new year"
    assert festive_query(datetime(2025, 10, 24)) is None


def test_weather_query_builder_uses_clock() -> None:
    builder = WeatherQueryBuilder(clock=lambda: datetime(2025, 6, 15, 23, 30))

    assert asyncio.run(builder.build_query(_context())) == "summer night"
