"""Shared provider payloads for client, extractor and pipeline tests."""

import pytest

WEATHER_BASE = "https://api.openweathermap.org/data/2.5"
FINANCE_URL = "https://www.alphavantage.co/query"


def _forecast_item(dt: int, temp: float, humidity: int, wind: float) -> dict:
    return {
        "dt": dt,
        "main": {"temp": temp, "feels_like": temp - 1, "humidity": humidity, "pressure": 1012},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky"}],
        "wind": {"speed": wind, "deg": 200},
        "dt_txt": "",
    }


@pytest.fixture
def owm_current() -> dict:
    """OpenWeatherMap /weather body for London."""
    return {
        "coord": {"lon": -0.1257, "lat": 51.5085},
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
        "main": {
            "temp": 11.2,
            "feels_like": 9.8,
            "temp_min": 10.0,
            "temp_max": 12.3,
            "pressure": 1012,
            "humidity": 81,
        },
        "visibility": 10000,
        "wind": {"speed": 4.1, "deg": 230},
        "clouds": {"all": 75},
        "dt": 1704103200,
        "sys": {"country": "GB", "sunrise": 1704096000, "sunset": 1704124800},
        "name": "London",
        "cod": 200,
    }


@pytest.fixture
def owm_forecast() -> dict:
    """OpenWeatherMap /forecast body: three steps on 2024-01-01, two on 2024-01-02 (UTC)."""
    return {
        "cod": "200",
        "cnt": 5,
        "list": [
            _forecast_item(1704088800, 10.0, 80, 2.0),  # 2024-01-01 06:00
            _forecast_item(1704110400, 12.0, 70, 4.0),  # 2024-01-01 12:00
            _forecast_item(1704132000, 14.0, 60, 6.0),  # 2024-01-01 18:00
            _forecast_item(1704175200, 20.0, 40, 1.0),  # 2024-01-02 06:00
            _forecast_item(1704196800, 22.0, 50, 3.0),  # 2024-01-02 12:00
        ],
        "city": {"name": "London", "country": "GB"},
    }


@pytest.fixture
def av_quote() -> dict:
    """Alpha Vantage GLOBAL_QUOTE body for AAPL."""
    return {
        "Global Quote": {
            "01. symbol": "AAPL",
            "02. open": "184.2200",
            "03. high": "186.4000",
            "04. low": "183.9200",
            "05. price": "185.6400",
            "06. volume": "82488674",
            "07. latest trading day": "2024-01-05",
            "08. previous close": "181.9100",
            "09. change": "3.7300",
            "10. change percent": "2.0505%",
        }
    }


@pytest.fixture
def av_daily() -> dict:
    """Alpha Vantage TIME_SERIES_DAILY body, newest-first as the provider sends it."""
    closes = {
        "2024-01-05": "110.0000",
        "2024-01-04": "108.0000",
        "2024-01-03": "104.0000",
        "2024-01-02": "100.0000",
    }
    return {
        "Meta Data": {
            "1. Information": "Daily Prices (open, high, low, close) and Volumes",
            "2. Symbol": "AAPL",
        },
        "Time Series (Daily)": {
            day: {
                "1. open": close,
                "2. high": str(float(close) + 1),
                "3. low": str(float(close) - 1),
                "4. close": close,
                "5. volume": "1000000",
            }
            for day, close in closes.items()
        },
    }
