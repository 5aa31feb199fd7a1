"""JSON file persistence for the cached photo."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from idleview.domain.photos import PhotoCacheEntry
from idleview.services.cache import PHOTO_CACHE_KEY, PhotoCacheStore, parse_cache_entry

_logger = logging.getLogger(__name__)


@dataclass
class JsonFilePhotoCacheStore(PhotoCacheStore):
    """Keeps the cache entry under a single key of a local JSON document."""

    path: Path
    key: str = PHOTO_CACHE_KEY

    def read(self) -> PhotoCacheEntry | None:
        """Return the stored entry; missing or corrupt files read as empty."""
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            _logger.warning("Ignoring unreadable cache file %s: %s", self.path, exc)
            return None
        if not isinstance(document, dict):
            return None
        return parse_cache_entry(document.get(self.key))

    def write(self, entry: PhotoCacheEntry) -> None:
        """Replace the stored entry atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = {self.key: entry.model_dump_json()}
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(document), encoding="utf-8")
        tmp_path.replace(self.path)
