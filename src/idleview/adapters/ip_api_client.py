"""IP geolocation client."""

from dataclasses import dataclass

import httpx

from idleview.domain.weather import Location
from idleview.services.context import LocationClient


@dataclass
class HttpxIpApiClient(LocationClient):
    """HTTPX-backed ip-api.com client."""

    url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, url: str) -> "HttpxIpApiClient":
        """Create a location client with a managed httpx session."""
        return cls(url=url, http_client=httpx.AsyncClient())

    async def get_location(self) -> Location:
        """Resolve the public IP to coordinates."""
        response = await self.http_client.get(self.url, timeout=10)
        response.raise_for_status()
        data = response.json()
        return Location(
            latitude=data["lat"],
            longitude=data["lon"],
            city=data.get("city"),
            country=data.get("country"),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
