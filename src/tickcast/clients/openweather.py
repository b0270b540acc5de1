"""OpenWeatherMap API client for current conditions and forecasts.

Provides async access to the 2.5 endpoints:
- Current weather by city name
- 5 day / 3 hour forecast by city name

All requests ask for metric units (Celsius, m/s).

API Documentation: https://openweathermap.org/api

Usage:
    from tickcast.clients.openweather import OpenWeatherClient

    async with OpenWeatherClient(api_key) as client:
        current = await client.get_current_weather("London")
        forecast = await client.get_forecast("London")
"""

from typing import Any

from tickcast.clients.base import BaseAsyncClient
from tickcast.config import DEFAULT_WEATHER_BASE_URL


class OpenWeatherClient(BaseAsyncClient):
    """Async client for OpenWeatherMap.

    Args:
        api_key: OpenWeatherMap API key
        rate_limit: Max requests per second (default: 10)
        base_url: Override for the 2.5 API root
        timeout: Request timeout in seconds
    """

    provider = "openweathermap"

    def __init__(
        self,
        api_key: str,
        rate_limit: int = 10,
        base_url: str = DEFAULT_WEATHER_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(
            base_url=base_url,
            headers={},  # OpenWeatherMap uses query param for auth, not header
            rate_limit=rate_limit,
            timeout=timeout,
        )
        self.api_key = api_key

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Override to inject API key and metric units into params."""
        params = params or {}
        params["appid"] = self.api_key
        params.setdefault("units", "metric")
        return await super()._request(method, endpoint, params)

    async def get_current_weather(self, city: str) -> dict[str, Any]:
        """Get current conditions for a city.

        Args:
            city: City name, optionally "City,CC" with an ISO country code

        Returns:
            Dict with: name, sys.country, weather[0].description,
            main (temp, feels_like, humidity, pressure), wind (speed, deg),
            visibility (metres), clouds.all (percent).

        API Docs: https://openweathermap.org/current
        """
        return await self.get("/weather", params={"q": city})

    async def get_forecast(self, city: str) -> dict[str, Any]:
        """Get the 5 day forecast in 3 hour steps.

        Args:
            city: City name, optionally "City,CC"

        Returns:
            Dict with 'list' key containing up to 40 steps.
            Each step has: dt (epoch seconds, UTC), main (temp, humidity),
            wind.speed, weather[0].description.

        API Docs: https://openweathermap.org/forecast5
        """
        return await self.get("/forecast", params={"q": city})
