"""Photo fetching on top of the Unsplash API client."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from idleview.domain.errors import PhotoFetchError
from idleview.domain.photos import Photo
from idleview.domain.settings import UserSettings
from idleview.services.timers import now_ms

_LEGACY_QUALITY = {"low": 65, "medium": 80, "high": 100, "maximum": 100}
_DEFAULT_QUALITY = 80

_logger = logging.getLogger(__name__)


class UnsplashClient(Protocol):
    """Interface for Unsplash API interactions."""

    async def random_photo(
        self, query: str, width: int, height: int
    ) -> dict[str, object]:
        """Return the raw payload of a random landscape photo."""

    async def trigger_download(self, download_location: str) -> None:
        """Report a photo download as required by the API guidelines."""


class PhotoFetcher(Protocol):
    """Fetches a ready-to-display photo for a query."""

    async def fetch_photo(self, query: str, width: int, height: int) -> Photo:
        """Return a photo sized for the viewport."""


@dataclass
class PhotoService(PhotoFetcher):
    """Fetch photos and size them for the display."""

    client: UnsplashClient
    settings_provider: Callable[[], UserSettings]
    clock: Callable[[], int] = now_ms

    async def fetch_photo(self, query: str, width: int, height: int) -> Photo:
        """Fetch a random photo and rewrite its URL for size and quality."""
        payload = await self.client.random_photo(query, width, height)
        try:
            urls = payload["urls"]
            user = payload["user"]
            links = payload.get("links") or {}
            regular = urls["regular"]
            author = user["name"]
            author_url = user["links"]["html"]
        except (KeyError, TypeError) as exc:
            raise PhotoFetchError(f"Unexpected photo payload: {exc}") from exc

        quality = parse_quality(self.settings_provider().photos.photo_quality)
        url = sized_photo_url(regular, width, height, quality, self.clock())
        _logger.info("Photo ready: author=%s quality=%s", author, quality)
        return Photo(
            url=url,
            author=author,
            author_url=author_url,
            download_location=links.get("download_location"),
        )

    async def trigger_download(self, photo: Photo) -> None:
        """Ping the download endpoint of a presented photo."""
        if photo.download_location:
            await self.client.trigger_download(photo.download_location)


def parse_quality(raw: str) -> int:
    """Map a quality setting to a JPEG quality percentage."""
    legacy = _LEGACY_QUALITY.get(raw)
    if legacy is not None:
        return legacy
    if raw.isdigit():
        return int(raw)
    return _DEFAULT_QUALITY


def sized_photo_url(
    url: str, width: int, height: int, quality: int, timestamp_ms: int
) -> str:
    """Replace the provider's quality parameter and add sizing parameters."""
    position = url.find("&q=")
    if position != -1:
        end = url.find("&", position + 1)
        url = url[:position] if end == -1 else url[:position] + url[end:]
    separator = "&" if "?" in url else "?"
    return (
        f"{url}{separator}w={width}&h={height}&fit=crop&q={quality}&t={timestamp_ms}"
    )
