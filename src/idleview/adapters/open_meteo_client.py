"""Open-Meteo forecast client."""

from dataclasses import dataclass

import httpx

from idleview.domain.weather import WeatherSnapshot
from idleview.services.context import WeatherClient

_CURRENT_FIELDS = (
    "temperature_2m,relative_humidity_2m,rain,snowfall,cloudcover,wind_speed_10m"
)


@dataclass
class HttpxOpenMeteoClient(WeatherClient):
    """HTTPX-backed Open-Meteo client."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxOpenMeteoClient":
        """Create a weather client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient())

    async def get_weather(self, latitude: float, longitude: float) -> WeatherSnapshot:
        """Fetch current conditions and today's sunrise and sunset."""
        response = await self.http_client.get(
            f"{self.base_url}/forecast",
            params={
                "latitude": latitude,
                "longitude": longitude,
                "current": _CURRENT_FIELDS,
                "daily": "sunrise,sunset",
                "timezone": "auto",
            },
            timeout=15,
        )
        response.raise_for_status()
        data = response.json()
        current = data["current"]
        daily = data.get("daily") or {}
        return WeatherSnapshot(
            temperature=current["temperature_2m"],
            humidity=current["relative_humidity_2m"],
            wind_speed=current["wind_speed_10m"],
            cloudcover=current["cloudcover"],
            rain=current["rain"],
            snowfall=current["snowfall"],
            sunrise=_first(daily.get("sunrise")),
            sunset=_first(daily.get("sunset")),
            timezone=data.get("timezone"),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _first(values: object) -> str | None:
    if isinstance(values, list) and values:
        return str(values[0])
    return None
