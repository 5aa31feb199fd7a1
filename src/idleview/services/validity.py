"""Cache freshness policy."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from idleview.domain.settings import UserSettings
from idleview.services.timers import now_ms


class ValidityOracle(Protocol):
    """Decides whether a cached photo may still be shown."""

    async def is_cache_valid(self, timestamp_ms: int) -> bool:
        """Return True if a photo cached at ``timestamp_ms`` is still fresh."""


@dataclass
class RefreshIntervalPolicy(ValidityOracle):
    """Valid while the cache is younger than the configured refresh interval."""

    settings_provider: Callable[[], UserSettings]
    slack_ms: int = 0
    clock: Callable[[], int] = now_ms

    async def is_cache_valid(self, timestamp_ms: int) -> bool:
        """Compare the cache age with the refresh interval plus slack."""
        age = max(0, self.clock() - timestamp_ms)
        ttl = self.settings_provider().refresh_interval_ms + self.slack_ms
        return age < ttl
