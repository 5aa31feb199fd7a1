"""Current photo state exposed to companion apps."""

import logging
from dataclasses import dataclass

from idleview.domain.photos import CurrentPhoto

_logger = logging.getLogger(__name__)


@dataclass
class CurrentPhotoRegistry:
    """Holds the last photo announced over the side channel."""

    photo: CurrentPhoto | None = None

    def get(self) -> CurrentPhoto | None:
        """Return the announced photo, if any."""
        return self.photo

    def set(self, photo: CurrentPhoto) -> CurrentPhoto:
        """Record a newly announced photo."""
        self.photo = photo
        _logger.info("Current photo updated: %s by %s", photo.url, photo.author)
        return photo
