"""Unsplash API client."""

from dataclasses import dataclass

import httpx

from idleview.domain.errors import PhotoFetchError
from idleview.services.photos import UnsplashClient


@dataclass
class HttpxUnsplashClient(UnsplashClient):
    """HTTPX-backed Unsplash client."""

    access_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, access_key: str, base_url: str) -> "HttpxUnsplashClient":
        """Create an Unsplash client with a managed httpx session."""
        return cls(
            access_key=access_key, base_url=base_url, http_client=httpx.AsyncClient()
        )

    async def random_photo(
        self, query: str, width: int, height: int
    ) -> dict[str, object]:
        """Fetch a random landscape photo matching the query."""
        url = f"{self.base_url}/photos/random"
        response = await self.http_client.get(
            url,
            params={
                "orientation": "landscape",
                "query": query,
                "w": width,
                "h": height,
            },
            headers=self._headers(),
            timeout=15,
        )
        if not response.is_success:
            raise PhotoFetchError(
                f"Unsplash API error ({response.status_code}): {response.text}",
                status_code=response.status_code,
            )
        return response.json()

    async def trigger_download(self, download_location: str) -> None:
        """Hit the download endpoint of a displayed photo."""
        await self.http_client.get(
            download_location, headers=self._headers(), timeout=10
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Client-ID {self.access_key}"}
