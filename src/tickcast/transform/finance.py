"""Finance transforms: moving averages, changes, summary analytics.

Pure functions over oldest-first ``RawTimeSeriesPoint`` sequences. No I/O.

Definitions:
    MA(n)_i      = mean(close[i-n+1 .. i]) for i >= n-1, None before
    change_i     = close_i - close_{i-1}, change_0 = 0
    volatility   = std(close) / mean(close) * 100   (population std)
    trend        = sign of (close_last - close_first) / close_first * 100
                   beyond +/- trend_threshold_pct, else neutral

An empty series raises InsufficientDataError. A series shorter than an MA
window is not an error: that MA is None at every index.
"""

from collections.abc import Sequence

import numpy as np
import pandas as pd

from tickcast.config import (
    DEFAULT_MA_LONG_WINDOW,
    DEFAULT_MA_SHORT_WINDOW,
    DEFAULT_TREND_THRESHOLD_PCT,
)
from tickcast.exceptions import InsufficientDataError
from tickcast.models import (
    RawTimeSeriesPoint,
    StockAnalytics,
    StockRawData,
    StockTransformed,
    TimeInterval,
    TransformedStockData,
    Trend,
)

LABEL_FORMATS: dict[TimeInterval, str] = {
    TimeInterval.DAILY: "%b %d",
    TimeInterval.WEEKLY: "%b %d",
    TimeInterval.MONTHLY: "%b %Y",
}


def _to_frame(points: Sequence[RawTimeSeriesPoint]) -> pd.DataFrame:
    if not points:
        raise InsufficientDataError("Time series is empty")
    return pd.DataFrame([p.model_dump() for p in points])


def moving_average(closes: Sequence[float], window: int) -> list[float | None]:
    """Compute the trailing simple moving average of ``closes``.

    Args:
        closes: Close prices, oldest first
        window: Number of trailing points per average

    Returns:
        One value per input point; None where fewer than ``window`` points
        are available.

    Example:
        >>> moving_average([10, 20, 30, 40], window=3)
        [None, None, 20.0, 30.0]
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    ma = pd.Series(closes, dtype="float64").rolling(window=window, min_periods=window).mean()
    return [None if pd.isna(v) else float(v) for v in ma]


def compute_changes(closes: Sequence[float]) -> list[float]:
    """Close-to-close change per point; the first point's change is 0."""
    return [float(v) for v in pd.Series(closes, dtype="float64").diff().fillna(0.0)]


def classify_trend(
    first_close: float,
    last_close: float,
    threshold_pct: float = DEFAULT_TREND_THRESHOLD_PCT,
) -> Trend:
    """Classify direction from the first to the last close.

    Bullish when the close rose by more than ``threshold_pct`` percent,
    bearish when it fell by more than that, neutral otherwise.
    """
    move_pct = (last_close - first_close) / first_close * 100
    if move_pct > threshold_pct:
        return Trend.BULLISH
    if move_pct < -threshold_pct:
        return Trend.BEARISH
    return Trend.NEUTRAL


def compute_stock_analytics(
    points: Sequence[RawTimeSeriesPoint],
    trend_threshold_pct: float = DEFAULT_TREND_THRESHOLD_PCT,
) -> StockAnalytics:
    """Summary analytics over the whole series.

    Raises:
        InsufficientDataError: If ``points`` is empty
    """
    df = _to_frame(points)
    close = df["close"]
    avg_price = float(close.mean())
    volatility = float(np.std(close.to_numpy(), ddof=0) / avg_price * 100)

    return StockAnalytics(
        avg_price=avg_price,
        highest_price=float(df["high"].max()),
        lowest_price=float(df["low"].min()),
        volatility=volatility,
        trend=classify_trend(
            float(close.iloc[0]), float(close.iloc[-1]), trend_threshold_pct
        ),
    )


def transform_time_series(
    points: Sequence[RawTimeSeriesPoint],
    interval: TimeInterval = TimeInterval.DAILY,
) -> list[TransformedStockData]:
    """Attach change and chart label to every bar, preserving order."""
    df = _to_frame(points)
    df["change"] = compute_changes(df["close"].tolist())
    fmt = LABEL_FORMATS[TimeInterval(interval)]

    return [
        TransformedStockData(
            date=row.date,
            label=row.date.strftime(fmt),
            open=row.open,
            high=row.high,
            low=row.low,
            close=row.close,
            volume=int(row.volume),
            change=row.change,
        )
        for row in df.itertuples(index=False)
    ]


def transform_stock_data(
    raw: StockRawData,
    interval: TimeInterval = TimeInterval.DAILY,
    ma_short_window: int = DEFAULT_MA_SHORT_WINDOW,
    ma_long_window: int = DEFAULT_MA_LONG_WINDOW,
    trend_threshold_pct: float = DEFAULT_TREND_THRESHOLD_PCT,
) -> StockTransformed:
    """Full finance transform: series, both moving averages, analytics.

    Args:
        raw: Extracted quote and oldest-first series
        interval: Series granularity, selects the chart label format
        ma_short_window: Window of the ``ma7`` series
        ma_long_window: Window of the ``ma20`` series
        trend_threshold_pct: Threshold for bullish/bearish

    Returns:
        StockTransformed with series, ``ma7``/``ma20`` aligned to the series
        index, and analytics

    Raises:
        InsufficientDataError: If the series is empty
    """
    points = raw.time_series
    if not points:
        raise InsufficientDataError(f"No time-series points for {raw.quote.symbol}")

    closes = [p.close for p in points]
    return StockTransformed(
        time_series=tuple(transform_time_series(points, interval)),
        ma7=tuple(moving_average(closes, ma_short_window)),
        ma20=tuple(moving_average(closes, ma_long_window)),
        analytics=compute_stock_analytics(points, trend_threshold_pct),
    )
