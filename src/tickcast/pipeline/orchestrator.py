"""Orchestrator — Extract → Transform → PipelineResult.

One pipeline run:
  1. Record extracted_at, await the extractor (cache first, then provider)
  2. Run the pure transformer on the complete raw payload
  3. Record transformed_at, wrap {raw, transformed, metadata}

Failures from either stage propagate unchanged; nothing is retried here.
Running the same query twice inside the cache TTL returns identical
``raw`` and ``transformed`` content and touches the provider once.

Usage:
    orchestrator = Orchestrator(cache=MemoryCache())
    result = await orchestrator.run_stock("AAPL", "daily", api_key)
    print(result.transformed.analytics.trend)
"""

import logging
from datetime import datetime, timezone

from tickcast.cache import CacheStore, MemoryCache
from tickcast.config import settings
from tickcast.models import (
    PipelineMetadata,
    StockPipelineResult,
    TimeInterval,
    WeatherPipelineResult,
)
from tickcast.pipeline.extractor import StockExtractor, WeatherExtractor, normalize_interval
from tickcast.transform import transform_stock_data, transform_weather_data

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Orchestrator:
    """Pipeline coordinator owning one cache and both extractors.

    The cache's lifecycle belongs to whoever builds the orchestrator: pass
    one in to share it, or let the orchestrator create a private one.

    Args:
        cache: Raw payload store (default: new MemoryCache)
        weather_extractor: Override the weather extractor
        stock_extractor: Override the stock extractor
        ma_short_window: Short MA window (default: settings)
        ma_long_window: Long MA window (default: settings)
        trend_threshold_pct: Trend threshold (default: settings)
        forecast_timezone: Day boundary zone for aggregates (default: settings)
    """

    def __init__(
        self,
        cache: CacheStore | None = None,
        weather_extractor: WeatherExtractor | None = None,
        stock_extractor: StockExtractor | None = None,
        ma_short_window: int | None = None,
        ma_long_window: int | None = None,
        trend_threshold_pct: float | None = None,
        forecast_timezone: str | None = None,
    ) -> None:
        self.cache = cache if cache is not None else MemoryCache()
        self.weather_extractor = weather_extractor or WeatherExtractor(cache=self.cache)
        self.stock_extractor = stock_extractor or StockExtractor(cache=self.cache)
        self.ma_short_window = ma_short_window or settings.ma_short_window
        self.ma_long_window = ma_long_window or settings.ma_long_window
        self.trend_threshold_pct = (
            trend_threshold_pct if trend_threshold_pct is not None
            else settings.trend_threshold_pct
        )
        self.forecast_timezone = forecast_timezone or settings.forecast_timezone

    async def run_weather(self, city: str, api_key: str) -> WeatherPipelineResult:
        """Run the weather pipeline for a city.

        Args:
            city: City name
            api_key: OpenWeatherMap API key

        Returns:
            WeatherPipelineResult with current conditions, forecast,
            labelled hourly steps and daily aggregates
        """
        extracted_at = _now()
        raw = await self.weather_extractor.extract(city, api_key)
        transformed = transform_weather_data(raw, tz=self.forecast_timezone)
        transformed_at = _now()

        result = WeatherPipelineResult(
            raw=raw,
            transformed=transformed,
            metadata=PipelineMetadata(
                extracted_at=extracted_at,
                transformed_at=transformed_at,
            ),
        )
        logger.info(
            "Weather pipeline for %s: %d hourly, %d daily (%.0fms)",
            raw.current.city,
            len(transformed.hourly_forecast),
            len(transformed.daily_forecast),
            result.metadata.processing_ms,
        )
        return result

    async def run_stock(
        self,
        symbol: str,
        interval: TimeInterval | str,
        api_key: str,
    ) -> StockPipelineResult:
        """Run the stock pipeline for a symbol at an interval.

        Args:
            symbol: Ticker symbol (case-insensitive)
            interval: daily, weekly or monthly
            api_key: Alpha Vantage API key

        Returns:
            StockPipelineResult with quote, series, moving averages and
            analytics; metadata carries the interval
        """
        interval = normalize_interval(interval)

        extracted_at = _now()
        raw = await self.stock_extractor.extract(symbol, api_key, interval)
        transformed = transform_stock_data(
            raw,
            interval=interval,
            ma_short_window=self.ma_short_window,
            ma_long_window=self.ma_long_window,
            trend_threshold_pct=self.trend_threshold_pct,
        )
        transformed_at = _now()

        result = StockPipelineResult(
            raw=raw,
            transformed=transformed,
            metadata=PipelineMetadata(
                extracted_at=extracted_at,
                transformed_at=transformed_at,
                interval=interval,
            ),
        )
        logger.info(
            "Stock pipeline for %s (%s): %d bars, trend=%s (%.0fms)",
            raw.quote.symbol,
            interval.value,
            len(transformed.time_series),
            transformed.analytics.trend.value,
            result.metadata.processing_ms,
        )
        return result

    def clear_cache(self) -> None:
        """Drop every cached payload (operator action)."""
        self.cache.clear()


async def run_weather_pipeline(
    city: str,
    api_key: str,
    cache: CacheStore | None = None,
) -> WeatherPipelineResult:
    """Entry point: weather pipeline for ``city``.

    Pass the same ``cache`` across calls to reuse cached payloads; without
    one every call starts from an empty cache.
    """
    return await Orchestrator(cache=cache).run_weather(city, api_key)


async def run_stock_pipeline(
    symbol: str,
    interval: TimeInterval | str,
    api_key: str,
    cache: CacheStore | None = None,
) -> StockPipelineResult:
    """Entry point: stock pipeline for ``symbol`` at ``interval``.

    Pass the same ``cache`` across calls to reuse cached payloads.
    """
    return await Orchestrator(cache=cache).run_stock(symbol, interval, api_key)
