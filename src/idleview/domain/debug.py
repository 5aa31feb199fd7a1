"""Diagnostic models for the debug overlay."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DebugInfo:
    """Contextual diagnostics derived from cache and weather state."""

    photo_age: str
    query: str
    time_of_day: str
    time_source: str
    api_key_status: str
    api_key_source: str
    season: str
    temperature: str
    rain: str
    snowfall: str
    cloudcover: str


@dataclass(frozen=True)
class DebugSnapshot:
    """Everything rendered by the debug overlay on one tick."""

    info: DebugInfo
    cache_timestamp: int | None
    last_photo_fetch: int | None
    cache_valid: bool | None
    last_error: str | None
    next_refresh_in: str

    def lines(self) -> list[str]:
        """Render the snapshot as display lines."""
        if self.cache_valid is None:
            cache_valid = "N/A"
        else:
            cache_valid = "Yes" if self.cache_valid else "No"
        return [
            f"Photo cached: {self.info.photo_age}",
            f"Query: {self.info.query}",
            f"Time: {self.info.time_of_day} ({self.info.time_source})",
            f"API Key: {self.info.api_key_status} ({self.info.api_key_source})",
            f"Season: {self.info.season}",
            (
                f"Weather: {self.info.temperature}, rain {self.info.rain}, "
                f"snow {self.info.snowfall}, clouds {self.info.cloudcover}"
            ),
            f"Cache timestamp: {self.cache_timestamp or 'N/A'}",
            f"Last photo fetch: {self.last_photo_fetch or 'N/A'}",
            f"Cache valid: {cache_valid}",
            f"Last fetch error: {self.last_error or 'None'}",
            f"Next refresh in: {self.next_refresh_in}",
        ]
