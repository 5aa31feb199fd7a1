"""Display surface that tracks state in memory and verifies images over HTTP."""

import logging
from dataclasses import dataclass, field

import httpx

from idleview.domain.errors import ImageDecodeError
from idleview.domain.photos import Photo
from idleview.services.presenter import DisplaySurface

_logger = logging.getLogger(__name__)


@dataclass
class HeadlessDisplaySurface(DisplaySurface):
    """Surface for kiosks driven over HTTP rather than a local window."""

    http_client: httpx.AsyncClient
    width: int = 1920
    height: int = 1080
    background: Photo | None = None
    credit: str | None = None
    credit_visible: bool = False
    debug_lines: list[str] = field(default_factory=list)

    @classmethod
    def create(cls, width: int, height: int) -> "HeadlessDisplaySurface":
        """Create a surface with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(), width=width, height=height)

    def viewport(self) -> tuple[int, int]:
        """Return the configured viewport size."""
        return self.width, self.height

    async def load_image(self, url: str) -> None:
        """Download the image and check it is a recognised format."""
        try:
            response = await self.http_client.get(url, timeout=30)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ImageDecodeError(f"Failed to load {url}: {exc}") from exc
        if detect_mime_type(response.content) is None:
            raise ImageDecodeError(f"Unrecognised image data at {url}")

    def set_background(self, photo: Photo) -> None:
        """Record the new background."""
        self.background = photo
        _logger.info("Background set: %s", photo.url)

    def show_credit(self, photo: Photo) -> None:
        """Show attribution for the photo."""
        self.credit = f"Photo by {photo.author} on Unsplash"
        self.credit_visible = True

    def hide_credit(self) -> None:
        """Hide attribution."""
        self.credit_visible = False

    def show_debug(self, lines: list[str]) -> None:
        """Replace the debug overlay contents."""
        self.debug_lines = list(lines)

    def hide_debug(self) -> None:
        """Clear the debug overlay."""
        self.debug_lines = []

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def detect_mime_type(image_bytes: bytes) -> str | None:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes.startswith((b"GIF87a", b"GIF89a")):
        return "image/gif"
    return None
