"""Provider client layer for Tickcast.

Async HTTP clients for fetching raw data from:
- OpenWeatherMap: Current conditions, 5 day / 3 hour forecast
- Alpha Vantage: Global quote, daily/weekly/monthly time series
"""

from tickcast.clients.base import BaseAsyncClient, RateLimiter
from tickcast.clients.openweather import OpenWeatherClient
from tickcast.clients.alpha_vantage import AlphaVantageClient

__all__ = [
    "BaseAsyncClient",
    "RateLimiter",
    "OpenWeatherClient",
    "AlphaVantageClient",
]
