"""Commits photos to the cache and the display surface."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from idleview.domain.errors import ImageDecodeError
from idleview.domain.photos import CurrentPhoto, Photo, PhotoCacheEntry
from idleview.services.cache import PhotoCacheStore
from idleview.services.timers import OneShotTimer

_logger = logging.getLogger(__name__)


class DisplaySurface(Protocol):
    """The visible background and its overlays."""

    def viewport(self) -> tuple[int, int]:
        """Return the current (width, height) in pixels."""

    async def load_image(self, url: str) -> None:
        """Wait until the image at ``url`` is retrievable and decodable."""

    def set_background(self, photo: Photo) -> None:
        """Swap the visible background."""

    def show_credit(self, photo: Photo) -> None:
        """Show the attribution overlay for a photo."""

    def hide_credit(self) -> None:
        """Hide the attribution overlay."""

    def show_debug(self, lines: list[str]) -> None:
        """Render the debug overlay."""

    def hide_debug(self) -> None:
        """Remove the debug overlay."""


class CompanionNotifier(Protocol):
    """Side channel announcing the displayed photo."""

    async def notify(self, photo: CurrentPhoto) -> None:
        """Send the current photo to the companion consumer."""


class DownloadTracker(Protocol):
    """Reports photo downloads back to the provider."""

    async def trigger_download(self, photo: Photo) -> None:
        """Record that a photo was displayed."""


@dataclass
class Presenter:
    """Writes the cache entry and presents the photo on the surface."""

    surface: DisplaySurface
    cache_store: PhotoCacheStore
    companion: CompanionNotifier
    downloads: DownloadTracker | None = None
    credit_hide_seconds: float = 10.0
    current_url: str | None = None
    _credit_timer: OneShotTimer | None = field(default=None, init=False, repr=False)

    async def commit(
        self, photo: Photo, query: str, timestamp_ms: int
    ) -> PhotoCacheEntry:
        """Replace the cache entry with ``photo`` and present it."""
        entry = PhotoCacheEntry(photo=photo, query=query, timestamp=timestamp_ms)
        self.cache_store.write(entry)
        await self.present(photo)
        return entry

    async def present(self, photo: Photo) -> None:
        """Show a photo once it has loaded, then notify side channels."""
        try:
            await self.surface.load_image(photo.url)
        except ImageDecodeError as exc:
            _logger.warning("Photo did not decode, presenting anyway: %s", exc)
        except Exception:
            _logger.exception("Failed to load photo %s", photo.url)

        self.current_url = photo.url
        self.surface.set_background(photo)
        self.surface.show_credit(photo)
        self._restart_credit_timer()

        if self.downloads is not None:
            try:
                await self.downloads.trigger_download(photo)
            except Exception as exc:
                _logger.warning("Failed to trigger download: %s", exc)

        try:
            await self.companion.notify(CurrentPhoto.from_photo(photo))
        except Exception as exc:
            _logger.debug("Could not update companion photo: %s", exc)

    def close(self) -> None:
        """Cancel the pending attribution auto-hide."""
        if self._credit_timer is not None:
            self._credit_timer.cancel()

    def _restart_credit_timer(self) -> None:
        if self._credit_timer is None:
            self._credit_timer = OneShotTimer(
                self.credit_hide_seconds, self.surface.hide_credit
            )
        self._credit_timer.schedule()
