"""Companion app side-channel client."""

from dataclasses import dataclass

import httpx

from idleview.domain.photos import CurrentPhoto
from idleview.services.presenter import CompanionNotifier


@dataclass
class HttpxCompanionClient(CompanionNotifier):
    """Posts the displayed photo to the companion endpoint."""

    url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, url: str) -> "HttpxCompanionClient":
        """Create a companion client with a managed httpx session."""
        return cls(url=url, http_client=httpx.AsyncClient())

    async def notify(self, photo: CurrentPhoto) -> None:
        """Send the photo summary to the companion API."""
        response = await self.http_client.post(
            self.url, json=photo.model_dump(), timeout=5
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
