"""User settings service."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from idleview.domain.errors import SettingsError
from idleview.domain.settings import UserSettings
from idleview.services.events import EventChannel

_logger = logging.getLogger(__name__)


class SettingsRepository(Protocol):
    """Persistence interface for user settings."""

    def load(self) -> UserSettings | None:
        """Return stored settings, or None when nothing is stored yet."""

    def save(self, settings: UserSettings) -> None:
        """Persist the full settings document."""


@dataclass
class SettingsService:
    """Owns the settings document and announces every change."""

    repository: SettingsRepository
    updates: EventChannel
    _current: UserSettings | None = None

    def get(self) -> UserSettings:
        """Return the current settings, loading defaults when unset."""
        if self._current is None:
            self._current = self.repository.load() or UserSettings()
        return self._current

    def reload(self) -> UserSettings:
        """Drop the in-memory copy and read settings from storage again."""
        self._current = None
        return self.get()

    async def update_all(self, settings: UserSettings) -> UserSettings:
        """Replace all settings."""
        return await self._commit(settings)

    async def update_partial(self, updates: dict[str, object]) -> UserSettings:
        """Merge a partial document into the current settings."""
        merged = self.get().model_dump()
        merge_settings(merged, updates)
        try:
            settings = UserSettings.model_validate(merged)
        except ValidationError as exc:
            raise SettingsError(str(exc)) from exc
        return await self._commit(settings)

    async def reset(self) -> UserSettings:
        """Restore default settings."""
        return await self._commit(UserSettings())

    async def _commit(self, settings: UserSettings) -> UserSettings:
        self.repository.save(settings)
        self._current = settings
        _logger.info("Settings updated")
        await self.updates.publish(settings)
        return settings


def merge_settings(target: dict[str, object], source: dict[str, object]) -> None:
    """Recursively merge ``source`` into ``target`` in place."""
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merge_settings(current, value)
        else:
            target[key] = value
