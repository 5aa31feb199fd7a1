"""JSON file persistence for user settings."""

import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from idleview.domain.settings import UserSettings
from idleview.services.user_settings import SettingsRepository

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileSettingsRepository(SettingsRepository):
    """Stores settings as pretty-printed JSON."""

    path: Path

    def load(self) -> UserSettings | None:
        """Return stored settings, or None when the file is absent or invalid."""
        if not self.path.exists():
            return None
        try:
            return UserSettings.model_validate_json(
                self.path.read_text(encoding="utf-8")
            )
        except (ValidationError, ValueError, OSError) as exc:
            _logger.warning(
                "Invalid settings file %s, using defaults: %s", self.path, exc
            )
            return None

    def save(self, settings: UserSettings) -> None:
        """Write the settings file, creating its directory if needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")
