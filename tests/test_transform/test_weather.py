"""Tests for weather transforms: hourly labels and daily aggregation."""

from datetime import date, datetime, timezone

import pytest

from tickcast.exceptions import InsufficientDataError
from tickcast.models import RawCurrentWeather, RawForecastPoint, WeatherRawData
from tickcast.transform.weather import (
    aggregate_daily,
    transform_hourly,
    transform_weather_data,
)


def point(
    ts: datetime,
    temp: float,
    humidity: float = 50.0,
    wind_speed: float = 3.0,
    description: str = "clear sky",
) -> RawForecastPoint:
    return RawForecastPoint(
        timestamp=ts, temp=temp, humidity=humidity,
        wind_speed=wind_speed, description=description,
    )


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def two_day_forecast() -> list[RawForecastPoint]:
    """Temps [10, 12, 14] on 2024-01-01 and [20, 22] on 2024-01-02 (UTC)."""
    return [
        point(utc(2024, 1, 1, 6), 10, humidity=80, wind_speed=2.0),
        point(utc(2024, 1, 1, 12), 12, humidity=70, wind_speed=4.0),
        point(utc(2024, 1, 1, 18), 14, humidity=60, wind_speed=6.0),
        point(utc(2024, 1, 2, 6), 20, humidity=40, wind_speed=1.0),
        point(utc(2024, 1, 2, 12), 22, humidity=50, wind_speed=3.0),
    ]


CURRENT = RawCurrentWeather(
    city="London", country="GB", description="light rain",
    temperature=11.2, feels_like=9.8, humidity=81, pressure=1012,
    wind_speed=4.1, wind_deg=230, visibility=10000, clouds=75,
)


class TestAggregateDaily:
    """Test per-calendar-day grouping."""

    def test_two_days(self, two_day_forecast) -> None:
        daily = aggregate_daily(two_day_forecast)

        assert len(daily) == 2
        assert daily[0].date == date(2024, 1, 1)
        assert (daily[0].min_temp, daily[0].max_temp) == (10.0, 14.0)
        assert daily[1].date == date(2024, 1, 2)
        assert (daily[1].min_temp, daily[1].max_temp) == (20.0, 22.0)

    def test_means(self, two_day_forecast) -> None:
        daily = aggregate_daily(two_day_forecast)

        assert daily[0].avg_humidity == pytest.approx(70.0)
        assert daily[0].avg_wind_speed == pytest.approx(4.0)
        assert daily[1].avg_humidity == pytest.approx(45.0)
        assert daily[1].avg_wind_speed == pytest.approx(2.0)

    def test_no_row_for_missing_day(self) -> None:
        """A gap day in the horizon produces no synthetic row."""
        daily = aggregate_daily([
            point(utc(2024, 1, 1, 12), 5),
            point(utc(2024, 1, 3, 12), 7),
        ])

        assert [d.date for d in daily] == [date(2024, 1, 1), date(2024, 1, 3)]

    def test_single_point_day(self) -> None:
        daily = aggregate_daily([point(utc(2024, 1, 1, 0), 3.5, humidity=90)])

        assert len(daily) == 1
        assert daily[0].min_temp == daily[0].max_temp == 3.5
        assert daily[0].avg_humidity == pytest.approx(90.0)

    def test_label(self, two_day_forecast) -> None:
        daily = aggregate_daily(two_day_forecast)
        assert daily[0].label == "Mon, Jan 01"

    def test_reference_timezone_moves_day_boundary(self) -> None:
        """23:00 UTC belongs to the next day in Asia/Tokyo (UTC+9)."""
        points = [point(utc(2024, 1, 1, 12), 10), point(utc(2024, 1, 1, 23), 20)]

        assert len(aggregate_daily(points)) == 1
        tokyo = aggregate_daily(points, tz="Asia/Tokyo")
        assert [d.date for d in tokyo] == [date(2024, 1, 1), date(2024, 1, 2)]

    def test_naive_timestamps_read_as_utc(self) -> None:
        daily = aggregate_daily([point(datetime(2024, 1, 1, 23), 1.0)])
        assert daily[0].date == date(2024, 1, 1)

    def test_empty_raises(self) -> None:
        with pytest.raises(InsufficientDataError):
            aggregate_daily([])


class TestTransformHourly:
    def test_passthrough_with_label(self, two_day_forecast) -> None:
        hourly = transform_hourly(two_day_forecast)

        assert len(hourly) == 5
        assert hourly[0].label == "Mon 06:00"
        assert hourly[0].temp == 10.0
        assert hourly[0].timestamp == two_day_forecast[0].timestamp
        assert hourly[3].humidity == 40.0
        assert hourly[4].description == "clear sky"


class TestTransformWeatherData:
    def test_full_transform(self, two_day_forecast) -> None:
        raw = WeatherRawData(current=CURRENT, forecast=tuple(two_day_forecast))
        result = transform_weather_data(raw)

        assert len(result.hourly_forecast) == 5
        assert len(result.daily_forecast) == 2

    def test_empty_forecast_raises(self) -> None:
        raw = WeatherRawData(current=CURRENT, forecast=())
        with pytest.raises(InsufficientDataError, match="London"):
            transform_weather_data(raw)
