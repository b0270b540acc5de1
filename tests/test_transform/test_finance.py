"""Tests for finance transforms: MA, change, analytics, trend."""

from datetime import date, timedelta

import pytest

from tickcast.exceptions import InsufficientDataError
from tickcast.models import (
    RawQuote,
    RawTimeSeriesPoint,
    StockRawData,
    TimeInterval,
    Trend,
)
from tickcast.transform.finance import (
    classify_trend,
    compute_changes,
    compute_stock_analytics,
    moving_average,
    transform_stock_data,
    transform_time_series,
)


def make_points(
    closes: list[float],
    start: date = date(2024, 1, 1),
    step: timedelta = timedelta(days=1),
) -> list[RawTimeSeriesPoint]:
    """Oldest-first bars with high/low one unit around close."""
    return [
        RawTimeSeriesPoint(
            date=start + i * step,
            open=c,
            high=c + 1,
            low=c - 1,
            close=c,
            volume=1000 * (i + 1),
        )
        for i, c in enumerate(closes)
    ]


def make_raw(closes: list[float]) -> StockRawData:
    return StockRawData(
        quote=RawQuote(
            symbol="AAPL", price=150.0, open=149.0, high=151.0, low=148.0,
            change=1.0, change_percent=0.67, volume=1_000_000,
        ),
        time_series=tuple(make_points(closes)),
    )


class TestMovingAverage:
    """Test trailing simple moving average."""

    def test_window_three(self) -> None:
        ma = moving_average([10, 20, 30, 40, 50, 60, 70], window=3)

        assert ma[0] is None
        assert ma[1] is None
        assert ma[2] == pytest.approx(20.0)
        assert ma[3] == pytest.approx(30.0)
        assert ma[6] == pytest.approx(60.0)

    def test_same_length_as_input(self) -> None:
        closes = [float(i) for i in range(1, 31)]
        assert len(moving_average(closes, 7)) == 30
        assert len(moving_average(closes, 20)) == 30

    def test_first_defined_index(self) -> None:
        """MA(n) is defined from index n-1 onward."""
        closes = [float(i) for i in range(1, 31)]
        ma20 = moving_average(closes, 20)

        assert all(v is None for v in ma20[:19])
        assert ma20[19] == pytest.approx(sum(range(1, 21)) / 20)

    def test_series_shorter_than_window(self) -> None:
        """Too few points: every value is the sentinel."""
        assert moving_average([1.0, 2.0, 3.0], window=7) == [None, None, None]

    def test_window_one_is_identity(self) -> None:
        assert moving_average([5.0, 6.0], window=1) == [5.0, 6.0]

    def test_invalid_window(self) -> None:
        with pytest.raises(ValueError, match="window must be >= 1"):
            moving_average([1.0], window=0)


class TestChanges:
    def test_first_change_is_zero(self) -> None:
        assert compute_changes([100.0, 105.0, 102.0]) == pytest.approx([0.0, 5.0, -3.0])

    def test_single_point(self) -> None:
        assert compute_changes([42.0]) == [0.0]


class TestTrend:
    """Test trend classification with the threshold."""

    def test_bullish(self) -> None:
        assert classify_trend(100.0, 110.0, threshold_pct=0.5) is Trend.BULLISH

    def test_bearish(self) -> None:
        assert classify_trend(110.0, 100.0, threshold_pct=0.5) is Trend.BEARISH

    def test_flat_is_neutral(self) -> None:
        assert classify_trend(50.0, 50.0, threshold_pct=0.5) is Trend.NEUTRAL

    @pytest.mark.parametrize(
        "last,expected",
        [
            (100.4, Trend.NEUTRAL),   # +0.4% inside threshold
            (100.6, Trend.BULLISH),
            (99.6, Trend.NEUTRAL),
            (99.4, Trend.BEARISH),
        ],
    )
    def test_default_threshold_boundaries(self, last: float, expected: Trend) -> None:
        """Default threshold is 0.5%."""
        assert classify_trend(100.0, last) is expected

    @pytest.mark.parametrize("threshold", [0.0, 1.0, 5.0])
    def test_threshold_is_configurable(self, threshold: float) -> None:
        """A move just beyond the threshold is a trend, just inside is not."""
        above = 100.0 * (1 + (threshold + 0.1) / 100)
        inside = 100.0 * (1 + max(threshold - 0.1, 0) / 100)

        assert classify_trend(100.0, above, threshold) is Trend.BULLISH
        if threshold > 0:
            assert classify_trend(100.0, inside, threshold) is Trend.NEUTRAL


class TestStockAnalytics:
    """Test summary analytics over the series."""

    def test_constant_series(self) -> None:
        """Constant close → zero volatility, neutral trend."""
        analytics = compute_stock_analytics(make_points([50, 50, 50, 50]))

        assert analytics.volatility == pytest.approx(0.0)
        assert analytics.trend is Trend.NEUTRAL
        assert analytics.avg_price == pytest.approx(50.0)

    def test_extremes_use_high_and_low(self) -> None:
        analytics = compute_stock_analytics(make_points([10, 30, 20]))

        assert analytics.highest_price == pytest.approx(31.0)
        assert analytics.lowest_price == pytest.approx(9.0)
        assert analytics.avg_price == pytest.approx(20.0)

    def test_volatility_is_population_std_over_mean(self) -> None:
        """closes [90, 110]: std 10, mean 100 → 10%."""
        analytics = compute_stock_analytics(make_points([90, 110]))
        assert analytics.volatility == pytest.approx(10.0)

    def test_trend_from_first_and_last(self) -> None:
        assert compute_stock_analytics(make_points([100, 110])).trend is Trend.BULLISH
        assert compute_stock_analytics(make_points([110, 100])).trend is Trend.BEARISH

    def test_empty_series_raises(self) -> None:
        with pytest.raises(InsufficientDataError):
            compute_stock_analytics([])


class TestTransformTimeSeries:
    def test_order_and_change_preserved(self) -> None:
        points = make_points([100, 102, 101])
        transformed = transform_time_series(points)

        assert [t.date for t in transformed] == [p.date for p in points]
        assert [t.change for t in transformed] == pytest.approx([0.0, 2.0, -1.0])
        assert transformed[2].volume == 3000

    def test_daily_label(self) -> None:
        transformed = transform_time_series(make_points([100.0]), TimeInterval.DAILY)
        assert transformed[0].label == "Jan 01"

    def test_monthly_label(self) -> None:
        transformed = transform_time_series(make_points([100.0]), TimeInterval.MONTHLY)
        assert transformed[0].label == "Jan 2024"


class TestTransformStockData:
    """Test the full finance transform."""

    def test_full_transform(self) -> None:
        closes = [float(100 + i) for i in range(25)]
        result = transform_stock_data(make_raw(closes))

        assert len(result.time_series) == 25
        assert len(result.ma7) == 25
        assert len(result.ma20) == 25
        assert result.ma7[5] is None
        assert result.ma7[6] == pytest.approx(103.0)
        assert result.ma20[19] == pytest.approx(109.5)
        assert result.analytics.trend is Trend.BULLISH

    def test_custom_windows(self) -> None:
        result = transform_stock_data(
            make_raw([10, 20, 30, 40]), ma_short_window=2, ma_long_window=3
        )
        assert result.ma7 == (None, 15.0, 25.0, 35.0)
        assert result.ma20 == (None, None, 20.0, 30.0)

    def test_custom_threshold(self) -> None:
        """+1% is neutral with a 2% threshold."""
        result = transform_stock_data(make_raw([100, 101]), trend_threshold_pct=2.0)
        assert result.analytics.trend is Trend.NEUTRAL

    def test_empty_series_raises(self) -> None:
        """Zero points → InsufficientDataError, never NaN output."""
        with pytest.raises(InsufficientDataError, match="AAPL"):
            transform_stock_data(make_raw([]))

    def test_deterministic(self) -> None:
        raw = make_raw([100, 103, 99, 104])
        assert transform_stock_data(raw) == transform_stock_data(raw)


class TestOrderingContract:
    def test_newest_first_series_rejected(self) -> None:
        """StockRawData only accepts oldest-first series."""
        points = make_points([5.0, 6.0, 7.0])
        with pytest.raises(ValueError, match="oldest-first"):
            StockRawData(quote=make_raw([]).quote, time_series=tuple(reversed(points)))
