"""Configuration management for Tickcast.

Loads provider endpoints, cache policy and analytics constants from
environment variables using Pydantic. API keys are optional here: the
pipeline always receives the key per call, the settings only supply a
default for the CLI.

Usage:
    from tickcast.config import settings

    print(settings.weather_cache_ttl)
    print(settings.log_level)
"""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Cache policy (seconds)
DEFAULT_WEATHER_CACHE_TTL = 600.0
DEFAULT_FINANCE_CACHE_TTL = 900.0

# Analytics
DEFAULT_MA_SHORT_WINDOW = 7
DEFAULT_MA_LONG_WINDOW = 20
DEFAULT_TREND_THRESHOLD_PCT = 0.5
DEFAULT_FORECAST_TIMEZONE = "UTC"
DEFAULT_SERIES_LIMIT = 100

# Providers
DEFAULT_WEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
DEFAULT_FINANCE_BASE_URL = "https://www.alphavantage.co"


class Settings(BaseSettings):
    """Tickcast configuration from environment variables.

    Loads from .env file automatically. Validates on instantiation.

    Attributes:
        weather_api_key: OpenWeatherMap key used by the CLI when none is passed
        finance_api_key: Alpha Vantage key used by the CLI when none is passed
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR)
        weather_cache_ttl: Lifetime of cached weather payloads (seconds)
        finance_cache_ttl: Lifetime of cached quote + series payloads (seconds)
        ma_short_window: Short moving-average window (points)
        ma_long_window: Long moving-average window (points)
        trend_threshold_pct: Minimum first-to-last move to call a trend (percent)
        forecast_timezone: Reference zone for daily forecast grouping
        series_limit: Number of most recent time-series points kept
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars
    )

    # API Keys (optional, CLI only)
    weather_api_key: str | None = Field(default=None, description="OpenWeatherMap API key")
    finance_api_key: str | None = Field(default=None, description="Alpha Vantage API key")

    # System Settings
    log_level: str = Field(default="INFO", description="Logging level")
    request_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout (seconds)")

    # Providers
    weather_base_url: str = Field(default=DEFAULT_WEATHER_BASE_URL, description="OpenWeatherMap base URL")
    finance_base_url: str = Field(default=DEFAULT_FINANCE_BASE_URL, description="Alpha Vantage base URL")
    weather_rate_limit: int = Field(default=10, ge=1, description="OpenWeatherMap requests/second")
    finance_rate_limit: int = Field(default=5, ge=1, description="Alpha Vantage requests/second")

    # Cache policy
    weather_cache_ttl: float = Field(
        default=DEFAULT_WEATHER_CACHE_TTL,
        gt=0,
        description="Weather cache lifetime (seconds)",
    )
    finance_cache_ttl: float = Field(
        default=DEFAULT_FINANCE_CACHE_TTL,
        gt=0,
        description="Finance cache lifetime (seconds)",
    )

    # Analytics
    ma_short_window: int = Field(default=DEFAULT_MA_SHORT_WINDOW, ge=1, description="Short MA window")
    ma_long_window: int = Field(default=DEFAULT_MA_LONG_WINDOW, ge=2, description="Long MA window")
    trend_threshold_pct: float = Field(
        default=DEFAULT_TREND_THRESHOLD_PCT,
        ge=0,
        description="First-to-last close move (percent) required for bullish/bearish",
    )
    forecast_timezone: str = Field(
        default=DEFAULT_FORECAST_TIMEZONE,
        description="IANA zone used to group forecast points by calendar day",
    )
    series_limit: int = Field(
        default=DEFAULT_SERIES_LIMIT,
        ge=1,
        description="Most recent time-series points kept per extraction",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid:
            raise ValueError(f"log_level must be one of {valid}, got {v}")
        return v_upper

    @field_validator("forecast_timezone")
    @classmethod
    def validate_forecast_timezone(cls, v: str) -> str:
        """Ensure the forecast timezone is a known IANA zone."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"forecast_timezone must be an IANA zone name, got '{v}'")
        return v

    @model_validator(mode="after")
    def validate_ma_windows(self) -> "Settings":
        """Ensure the short MA window is shorter than the long one."""
        if self.ma_short_window >= self.ma_long_window:
            raise ValueError(
                f"ma_short_window ({self.ma_short_window}) must be smaller than "
                f"ma_long_window ({self.ma_long_window})"
            )
        return self


# Global settings instance, loaded once at import
settings = Settings()
