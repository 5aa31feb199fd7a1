"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

PLACEHOLDER_ACCESS_KEY = "YOUR_UNSPLASH_ACCESS_KEY"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    unsplash_access_key: str = ""
    unsplash_base_url: str = "https://api.unsplash.com"
    open_meteo_base_url: str = "https://api.open-meteo.com/v1"
    ip_api_url: str = "http://ip-api.com/json/"
    companion_url: str = "http://localhost:8737/api/photo/current"
    data_dir: Path = Path.home() / ".config" / "idleview"
    context_check_seconds: float = 30.0
    weather_refresh_seconds: float = 900.0
    debug_interval_seconds: float = 1.0
    credit_hide_seconds: float = 10.0
    prefetch_lead_seconds: int = 60
    validity_slack_seconds: int = 0
    context_retry_attempts: int = 3
    context_retry_delay_seconds: float = 1.0
    viewport_width: int = 1920
    viewport_height: int = 1080
    api_host: str = "0.0.0.0"  # noqa: S104
    api_port: int = 8737
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def settings_path(self) -> Path:
        """Return the user settings file location."""
        return self.data_dir / "settings.json"

    @property
    def photo_cache_path(self) -> Path:
        """Return the photo cache file location."""
        return self.data_dir / "photo_cache.json"


def api_key_status(raw: str | None) -> tuple[str, str]:
    """Return the (status, source) pair describing the Unsplash key."""
    if raw and len(raw) > 10 and raw != PLACEHOLDER_ACCESS_KEY:
        return "Available", "Runtime env"
    return "Missing or invalid", "None"
