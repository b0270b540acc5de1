"""Weather transforms: labelled hourly steps and per-day aggregates.

Pure functions over chronological ``RawForecastPoint`` sequences. No I/O.

Calendar days are taken in a fixed reference timezone (default UTC, see
``Settings.forecast_timezone``). Naive timestamps are read as UTC. Only
days that contain at least one forecast step produce an aggregate.
"""

from collections.abc import Sequence

import pandas as pd

from tickcast.config import DEFAULT_FORECAST_TIMEZONE
from tickcast.exceptions import InsufficientDataError
from tickcast.models import (
    DailyAggregate,
    RawForecastPoint,
    TransformedForecast,
    WeatherRawData,
    WeatherTransformed,
)

HOURLY_LABEL_FORMAT = "%a %H:%M"
DAILY_LABEL_FORMAT = "%a, %b %d"


def _to_frame(points: Sequence[RawForecastPoint], tz: str) -> pd.DataFrame:
    if not points:
        raise InsufficientDataError("Forecast is empty")
    df = pd.DataFrame([p.model_dump() for p in points])
    df["local_time"] = pd.to_datetime(df["timestamp"], utc=True).dt.tz_convert(tz)
    return df


def transform_hourly(
    points: Sequence[RawForecastPoint],
    tz: str = DEFAULT_FORECAST_TIMEZONE,
) -> list[TransformedForecast]:
    """Pass forecast steps through with a weekday + time label."""
    df = _to_frame(points, tz)
    return [
        TransformedForecast(
            timestamp=point.timestamp,
            label=local_time.strftime(HOURLY_LABEL_FORMAT),
            temp=point.temp,
            humidity=point.humidity,
            wind_speed=point.wind_speed,
            description=point.description,
        )
        for point, local_time in zip(points, df["local_time"])
    ]


def aggregate_daily(
    points: Sequence[RawForecastPoint],
    tz: str = DEFAULT_FORECAST_TIMEZONE,
) -> list[DailyAggregate]:
    """Group forecast steps by calendar day and summarise each day.

    Args:
        points: Forecast steps
        tz: Reference timezone for the day boundary

    Returns:
        One DailyAggregate per represented day, ascending by date, with
        min/max of ``temp`` and means of ``humidity`` and ``wind_speed``.

    Example:
        temps [10, 12, 14] on 2024-01-01 and [20, 22] on 2024-01-02
        -> [(2024-01-01, min 10, max 14), (2024-01-02, min 20, max 22)]

    Raises:
        InsufficientDataError: If ``points`` is empty
    """
    df = _to_frame(points, tz)
    df["day"] = df["local_time"].dt.date

    daily = df.groupby("day", sort=True).agg(
        min_temp=("temp", "min"),
        max_temp=("temp", "max"),
        avg_humidity=("humidity", "mean"),
        avg_wind_speed=("wind_speed", "mean"),
    )

    return [
        DailyAggregate(
            date=day,
            label=day.strftime(DAILY_LABEL_FORMAT),
            min_temp=float(row.min_temp),
            max_temp=float(row.max_temp),
            avg_humidity=float(row.avg_humidity),
            avg_wind_speed=float(row.avg_wind_speed),
        )
        for day, row in daily.iterrows()
    ]


def transform_weather_data(
    raw: WeatherRawData,
    tz: str = DEFAULT_FORECAST_TIMEZONE,
) -> WeatherTransformed:
    """Full weather transform: labelled hourly steps plus daily aggregates.

    Raises:
        InsufficientDataError: If the forecast is empty
    """
    if not raw.forecast:
        raise InsufficientDataError(f"No forecast points for {raw.current.city}")

    return WeatherTransformed(
        hourly_forecast=tuple(transform_hourly(raw.forecast, tz)),
        daily_forecast=tuple(aggregate_daily(raw.forecast, tz)),
    )
