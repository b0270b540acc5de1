"""Extractors — provider API → validated raw models, via the cache.

Each extractor normalises its query, derives a cache key, and either
returns the cached payload (no network access) or fetches from the
provider, parses into the frozen models of ``tickcast.models`` and caches
the result. Error responses are never cached, and nothing is written
until every provider call of the extraction has been parsed, so a
cancelled or failed extraction leaves the cache untouched.

Cache keys:
    weather:{city lower-cased}
    stock:{SYMBOL}:{interval}
"""

import logging
import re
from collections.abc import Awaitable, Callable
from datetime import date, datetime, timezone
from typing import Any, TypeVar

from tickcast.cache import CacheStore
from tickcast.clients import AlphaVantageClient, OpenWeatherClient
from tickcast.clients.alpha_vantage import SERIES_KEYS
from tickcast.config import settings
from tickcast.exceptions import ProviderError, QueryValidationError
from tickcast.models import (
    RawCurrentWeather,
    RawForecastPoint,
    RawQuote,
    RawTimeSeriesPoint,
    StockRawData,
    TimeInterval,
    WeatherRawData,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SYMBOL_RE = re.compile(r"^[A-Z0-9][A-Z0-9.\-]{0,19}$")

# Errors raised while reading a provider body that does not have the expected shape.
# pydantic's ValidationError is a ValueError.
_SHAPE_ERRORS = (KeyError, IndexError, TypeError, ValueError, AttributeError)


def _require_api_key(api_key: str) -> None:
    if not api_key or not api_key.strip():
        raise QueryValidationError("API key is required")


def normalize_city(city: str) -> str:
    """Strip and validate a city query (case is kept for the provider)."""
    city = (city or "").strip()
    if not city:
        raise QueryValidationError("City name must not be empty")
    return city


def normalize_symbol(symbol: str) -> str:
    """Strip, uppercase and validate a ticker symbol."""
    symbol = (symbol or "").strip().upper()
    if not symbol:
        raise QueryValidationError("Symbol must not be empty")
    if not _SYMBOL_RE.match(symbol):
        raise QueryValidationError(f"Invalid symbol: {symbol!r}")
    return symbol


def normalize_interval(interval: TimeInterval | str) -> TimeInterval:
    """Parse an interval name (case-insensitive) into a TimeInterval."""
    if isinstance(interval, TimeInterval):
        return interval
    try:
        return TimeInterval(str(interval).strip().lower())
    except ValueError:
        valid = ", ".join(i.value for i in TimeInterval)
        raise QueryValidationError(f"Interval must be one of {valid}, got {interval!r}")


class BaseExtractor:
    """Cache-first extraction shared by the weather and stock extractors.

    Args:
        cache: Store for raw payloads
        ttl: Lifetime of cached payloads in seconds
        base_url: Provider API root
        rate_limit: Provider requests/second
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        cache: CacheStore,
        ttl: float,
        base_url: str,
        rate_limit: int,
        timeout: float,
    ) -> None:
        self.cache = cache
        self.ttl = ttl
        self.base_url = base_url
        self.rate_limit = rate_limit
        self.timeout = timeout

    async def _cached(self, key: str, fetch: Callable[[], Awaitable[T]]) -> T:
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        logger.info("Cache miss for %s, fetching from provider", key)
        payload = await fetch()
        self.cache.set(key, payload, self.ttl)
        return payload

    @staticmethod
    def _shape_error(provider: str, what: str, error: Exception) -> ProviderError:
        logger.warning("%s: unexpected %s payload: %s", provider, what, error)
        return ProviderError(
            message=f"Unexpected {what} payload from {provider}: {error}",
            provider=provider,
        )


class WeatherExtractor(BaseExtractor):
    """Extracts current conditions + forecast for a city.

    Usage:
        extractor = WeatherExtractor(cache=MemoryCache())
        raw = await extractor.extract("London", api_key)
    """

    def __init__(
        self,
        cache: CacheStore,
        ttl: float | None = None,
        base_url: str | None = None,
        rate_limit: int | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            cache=cache,
            ttl=ttl or settings.weather_cache_ttl,
            base_url=base_url or settings.weather_base_url,
            rate_limit=rate_limit or settings.weather_rate_limit,
            timeout=timeout or settings.request_timeout,
        )

    @staticmethod
    def cache_key(city: str) -> str:
        return f"weather:{normalize_city(city).lower()}"

    async def extract(self, city: str, api_key: str) -> WeatherRawData:
        """Return current weather and forecast for ``city``.

        Raises:
            QueryValidationError: Blank city or API key
            ProviderError: Provider error or unexpected payload shape
            NetworkError: Transport failure
        """
        city = normalize_city(city)
        _require_api_key(api_key)
        return await self._cached(self.cache_key(city), lambda: self._fetch(city, api_key))

    async def _fetch(self, city: str, api_key: str) -> WeatherRawData:
        async with OpenWeatherClient(
            api_key=api_key,
            rate_limit=self.rate_limit,
            base_url=self.base_url,
            timeout=self.timeout,
        ) as client:
            current_body = await client.get_current_weather(city)
            try:
                current = self._parse_current(current_body)
            except _SHAPE_ERRORS as e:
                raise self._shape_error("openweathermap", "current weather", e) from e

            forecast_body = await client.get_forecast(city)
            try:
                forecast = self._parse_forecast(city, forecast_body)
                raw = WeatherRawData(current=current, forecast=forecast)
            except _SHAPE_ERRORS as e:
                raise self._shape_error("openweathermap", "forecast", e) from e

        logger.info(
            "%s: current + %d forecast steps", current.city, len(raw.forecast),
        )
        return raw

    @staticmethod
    def _parse_current(body: dict[str, Any]) -> RawCurrentWeather:
        main = body["main"]
        wind = body.get("wind", {})
        return RawCurrentWeather(
            city=body["name"],
            country=body.get("sys", {}).get("country", ""),
            description=body["weather"][0]["description"],
            temperature=main["temp"],
            feels_like=main["feels_like"],
            humidity=main["humidity"],
            pressure=main["pressure"],
            wind_speed=wind.get("speed", 0.0),
            wind_deg=wind.get("deg", 0.0),
            visibility=body.get("visibility", 0.0),
            clouds=body.get("clouds", {}).get("all", 0.0),
        )

    @staticmethod
    def _parse_forecast(city: str, body: dict[str, Any]) -> tuple[RawForecastPoint, ...]:
        items = body["list"]
        if not items:
            raise ProviderError(
                message=f"No forecast found for city {city}",
                status_code=404,
                provider="openweathermap",
            )
        points = [
            RawForecastPoint(
                timestamp=datetime.fromtimestamp(item["dt"], tz=timezone.utc),
                temp=item["main"]["temp"],
                humidity=item["main"]["humidity"],
                wind_speed=item.get("wind", {}).get("speed", 0.0),
                description=item["weather"][0]["description"],
            )
            for item in items
        ]
        return tuple(sorted(points, key=lambda p: p.timestamp))


class StockExtractor(BaseExtractor):
    """Extracts quote + time series for a symbol at an interval.

    The returned ``time_series`` is oldest-first and holds at most
    ``series_limit`` of the most recent bars.

    Usage:
        extractor = StockExtractor(cache=MemoryCache())
        raw = await extractor.extract("AAPL", api_key, "weekly")
    """

    def __init__(
        self,
        cache: CacheStore,
        ttl: float | None = None,
        base_url: str | None = None,
        rate_limit: int | None = None,
        timeout: float | None = None,
        series_limit: int | None = None,
    ) -> None:
        super().__init__(
            cache=cache,
            ttl=ttl or settings.finance_cache_ttl,
            base_url=base_url or settings.finance_base_url,
            rate_limit=rate_limit or settings.finance_rate_limit,
            timeout=timeout or settings.request_timeout,
        )
        self.series_limit = series_limit or settings.series_limit

    @staticmethod
    def cache_key(symbol: str, interval: TimeInterval | str) -> str:
        return f"stock:{normalize_symbol(symbol)}:{normalize_interval(interval).value}"

    async def extract(
        self,
        symbol: str,
        api_key: str,
        interval: TimeInterval | str = TimeInterval.DAILY,
    ) -> StockRawData:
        """Return quote and oldest-first series for ``symbol``.

        Raises:
            QueryValidationError: Blank/invalid symbol, bad interval, blank key
            ProviderError: Provider error, unknown symbol or unexpected payload
            NetworkError: Transport failure
        """
        symbol = normalize_symbol(symbol)
        interval = normalize_interval(interval)
        _require_api_key(api_key)
        return await self._cached(
            self.cache_key(symbol, interval),
            lambda: self._fetch(symbol, interval, api_key),
        )

    async def _fetch(self, symbol: str, interval: TimeInterval, api_key: str) -> StockRawData:
        async with AlphaVantageClient(
            api_key=api_key,
            rate_limit=self.rate_limit,
            base_url=self.base_url,
            timeout=self.timeout,
        ) as client:
            quote = self._parse_quote(symbol, await client.get_quote(symbol))
            series = self._parse_series(
                symbol, interval, await client.get_time_series(symbol, interval)
            )

        try:
            raw = StockRawData(quote=quote, time_series=series[-self.series_limit:])
        except _SHAPE_ERRORS as e:
            raise self._shape_error("alphavantage", "time series", e) from e

        logger.info(
            "%s: quote + %d %s bars", symbol, len(raw.time_series), interval.value,
        )
        return raw

    @classmethod
    def _parse_quote(cls, symbol: str, body: dict[str, Any]) -> RawQuote:
        gq = body.get("Global Quote") if isinstance(body, dict) else None
        if not gq:
            raise ProviderError(
                message=f"No quote found for symbol {symbol}",
                status_code=404,
                provider="alphavantage",
            )
        try:
            return RawQuote(
                symbol=gq["01. symbol"],
                open=float(gq["02. open"]),
                high=float(gq["03. high"]),
                low=float(gq["04. low"]),
                price=float(gq["05. price"]),
                volume=int(gq["06. volume"]),
                change=float(gq["09. change"]),
                change_percent=float(str(gq["10. change percent"]).rstrip("%")),
            )
        except _SHAPE_ERRORS as e:
            raise cls._shape_error("alphavantage", "quote", e) from e

    @classmethod
    def _parse_series(
        cls,
        symbol: str,
        interval: TimeInterval,
        body: dict[str, Any],
    ) -> list[RawTimeSeriesPoint]:
        key = SERIES_KEYS[interval]
        bars = body.get(key) if isinstance(body, dict) else None
        if not bars:
            raise ProviderError(
                message=f"No {interval.value} time series for symbol {symbol}",
                status_code=404,
                provider="alphavantage",
            )
        try:
            points = [
                RawTimeSeriesPoint(
                    date=date.fromisoformat(day),
                    open=float(bar["1. open"]),
                    high=float(bar["2. high"]),
                    low=float(bar["3. low"]),
                    close=float(bar["4. close"]),
                    volume=int(float(bar["5. volume"])),
                )
                for day, bar in bars.items()
            ]
        except _SHAPE_ERRORS as e:
            raise cls._shape_error("alphavantage", "time series", e) from e
        # Provider returns newest-first; the pipeline contract is oldest-first
        return sorted(points, key=lambda p: p.date)
