"""Photo cache store abstractions."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from idleview.domain.photos import PhotoCacheEntry

PHOTO_CACHE_KEY = "unsplash_photo_cache"

_logger = logging.getLogger(__name__)


class PhotoCacheStore(Protocol):
    """Persistence interface for the single cached photo."""

    def read(self) -> PhotoCacheEntry | None:
        """Return the cached entry, or None when absent or unreadable."""

    def write(self, entry: PhotoCacheEntry) -> None:
        """Replace any cached entry with the given one."""


def parse_cache_entry(raw: object) -> PhotoCacheEntry | None:
    """Parse a persisted cache value, treating corruption as a cache miss."""
    if raw is None:
        return None
    try:
        if isinstance(raw, str | bytes):
            return PhotoCacheEntry.model_validate_json(raw)
        return PhotoCacheEntry.model_validate(raw)
    except (ValidationError, json.JSONDecodeError, ValueError) as exc:
        _logger.warning("Ignoring unreadable photo cache: %s", exc)
        return None


@dataclass
class InMemoryPhotoCacheStore(PhotoCacheStore):
    """Photo cache kept in process memory as serialized JSON."""

    raw: str | None = None

    def read(self) -> PhotoCacheEntry | None:
        """Return the cached entry if it parses."""
        return parse_cache_entry(self.raw)

    def write(self, entry: PhotoCacheEntry) -> None:
        """Store the entry, replacing any previous value."""
        self.raw = entry.model_dump_json()
