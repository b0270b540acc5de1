"""Typed intermediate representation shared by extractors and transformers.

Extractors parse provider JSON into the ``Raw*`` models, transformers only
ever see these models, and the orchestrator wraps both sides into a
``*PipelineResult``. Every model is frozen: once constructed it is never
mutated, so a cached payload can be handed to any number of pipeline runs.

Ordering contract:
    ``StockRawData.time_series`` is oldest-first (ascending by date) and
    ``WeatherRawData.forecast`` is ascending by timestamp. Moving averages
    and per-point ``change`` depend on this, so it is validated here rather
    than assumed downstream.
"""

from datetime import date, datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Trend(str, Enum):
    """Coarse price direction over a series."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class TimeInterval(str, Enum):
    """Time-series granularity offered by the finance provider."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- Finance: raw ---


class RawQuote(_Frozen):
    """Latest quote snapshot for one symbol."""

    symbol: str = Field(min_length=1)
    price: float = Field(gt=0)
    open: float = Field(gt=0)
    high: float = Field(gt=0)
    low: float = Field(gt=0)
    change: float
    change_percent: float
    volume: int = Field(ge=0)


class RawTimeSeriesPoint(_Frozen):
    """One OHLCV bar (daily, weekly or monthly)."""

    date: date
    open: float = Field(gt=0)
    high: float = Field(gt=0)
    low: float = Field(gt=0)
    close: float = Field(gt=0)
    volume: int = Field(ge=0)


class StockRawData(_Frozen):
    """Quote plus oldest-first time series, as cached by the stock extractor."""

    quote: RawQuote
    time_series: tuple[RawTimeSeriesPoint, ...]

    @model_validator(mode="after")
    def check_oldest_first(self) -> "StockRawData":
        dates = [p.date for p in self.time_series]
        if any(a >= b for a, b in zip(dates, dates[1:])):
            raise ValueError("time_series must be strictly ordered oldest-first")
        return self


# --- Weather: raw ---


class RawCurrentWeather(_Frozen):
    """Current conditions for one city (metric units)."""

    city: str
    country: str
    description: str
    temperature: float
    feels_like: float
    humidity: float = Field(ge=0)
    pressure: float
    wind_speed: float = Field(ge=0)
    wind_deg: float
    visibility: float = Field(ge=0)
    clouds: float = Field(ge=0)


class RawForecastPoint(_Frozen):
    """One forecast step (typically 3-hourly)."""

    timestamp: datetime
    temp: float
    humidity: float = Field(ge=0)
    wind_speed: float = Field(ge=0)
    description: str

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are UTC."""
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)


class WeatherRawData(_Frozen):
    """Current conditions plus chronological forecast, as cached by the weather extractor."""

    current: RawCurrentWeather
    forecast: tuple[RawForecastPoint, ...]

    @model_validator(mode="after")
    def check_chronological(self) -> "WeatherRawData":
        stamps = [p.timestamp for p in self.forecast]
        if any(a > b for a, b in zip(stamps, stamps[1:])):
            raise ValueError("forecast must be ordered by timestamp")
        return self


# --- Finance: transformed ---


class TransformedStockData(_Frozen):
    """Chart-ready bar with the close-to-close change."""

    date: date
    label: str
    open: float
    high: float
    low: float
    close: float
    volume: int
    change: float


class StockAnalytics(_Frozen):
    """Summary statistics over the full returned series."""

    avg_price: float
    highest_price: float
    lowest_price: float
    volatility: float  # percent
    trend: Trend


class StockTransformed(_Frozen):
    """Transformed series, moving averages (None where undefined) and analytics."""

    time_series: tuple[TransformedStockData, ...]
    ma7: tuple[float | None, ...]
    ma20: tuple[float | None, ...]
    analytics: StockAnalytics


# --- Weather: transformed ---


class TransformedForecast(_Frozen):
    """Forecast step with a human-readable time label."""

    timestamp: datetime
    label: str
    temp: float
    humidity: float
    wind_speed: float
    description: str


class DailyAggregate(_Frozen):
    """Per-calendar-day summary of forecast steps."""

    date: date
    label: str
    min_temp: float
    max_temp: float
    avg_humidity: float
    avg_wind_speed: float


class WeatherTransformed(_Frozen):
    hourly_forecast: tuple[TransformedForecast, ...]
    daily_forecast: tuple[DailyAggregate, ...]


# --- Pipeline results ---


class PipelineMetadata(_Frozen):
    """Provenance of one pipeline run."""

    extracted_at: datetime
    transformed_at: datetime
    interval: TimeInterval | None = None

    @property
    def processing_ms(self) -> float:
        """Wall time from extraction start to transformation end (ms)."""
        return (self.transformed_at - self.extracted_at).total_seconds() * 1000


class WeatherPipelineResult(_Frozen):
    raw: WeatherRawData
    transformed: WeatherTransformed
    metadata: PipelineMetadata


class StockPipelineResult(_Frozen):
    raw: StockRawData
    transformed: StockTransformed
    metadata: PipelineMetadata
