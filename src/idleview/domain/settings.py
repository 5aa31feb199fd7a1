"""User-facing settings edited from the control API."""

from pydantic import BaseModel, Field, field_validator


class UnitsSettings(BaseModel):
    """Measurement and formatting units."""

    temperature_unit: str = "celsius"
    time_format: str = "24h"
    date_format: str = "dmy"
    wind_speed_unit: str = "kmh"


class DisplaySettings(BaseModel):
    """Visibility toggles for the display surface."""

    show_humidity_wind: bool = True
    show_precipitation_cloudiness: bool = True
    show_sunrise_sunset: bool = True
    show_cpu_temp: bool = False
    show_debug: bool = False
    theme: str = "default"
    card_position: str = "left"


class PhotosSettings(BaseModel):
    """Background photo cadence and quality."""

    refresh_interval: int = Field(default=30, ge=1)
    photo_quality: str = "80"
    enable_festive_queries: bool = True

    @field_validator("photo_quality", mode="before")
    @classmethod
    def _coerce_quality(cls, value: object) -> object:
        # Older clients send the quality as a bare number.
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(int(value))
        return value


class UserSettings(BaseModel):
    """Complete settings document persisted per installation."""

    units: UnitsSettings = Field(default_factory=UnitsSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    photos: PhotosSettings = Field(default_factory=PhotosSettings)

    @property
    def refresh_interval_ms(self) -> int:
        """Return the photo refresh interval in milliseconds."""
        return self.photos.refresh_interval * 60_000
