"""Pure transforms from raw provider records to chart-ready analytics.

Finance:
- moving_average: trailing simple moving average (MA7, MA20)
- compute_changes: close-to-close change per bar
- compute_stock_analytics: average, extremes, volatility, trend

Weather:
- transform_hourly: labelled forecast steps
- aggregate_daily: per-calendar-day min/max/means
"""

from tickcast.transform.finance import (
    classify_trend,
    compute_changes,
    compute_stock_analytics,
    moving_average,
    transform_stock_data,
    transform_time_series,
)
from tickcast.transform.weather import (
    aggregate_daily,
    transform_hourly,
    transform_weather_data,
)

__all__ = [
    "classify_trend",
    "compute_changes",
    "compute_stock_analytics",
    "moving_average",
    "transform_stock_data",
    "transform_time_series",
    "aggregate_daily",
    "transform_hourly",
    "transform_weather_data",
]
