"""Text rendering of pipeline results for the terminal."""

from tickcast.models import PipelineMetadata, StockPipelineResult, WeatherPipelineResult


def format_price(price: float) -> str:
    """Thousands separators and two decimals: 1234.5 -> '1,234.50'."""
    return f"{price:,.2f}"


def format_volume(volume: float) -> str:
    """Compact volume: 1_500_000 -> '1.50M'."""
    if volume >= 1_000_000_000:
        return f"{volume / 1_000_000_000:.2f}B"
    if volume >= 1_000_000:
        return f"{volume / 1_000_000:.2f}M"
    if volume >= 1_000:
        return f"{volume / 1_000:.2f}K"
    return str(int(volume))


def format_change(change: float, change_percent: float) -> str:
    """Signed change with percent: '+2.50 (1.68%)'."""
    sign = "+" if change >= 0 else ""
    return f"{sign}{format_price(change)} ({change_percent:.2f}%)"


def _metadata_lines(metadata: PipelineMetadata) -> list[str]:
    lines = [
        "Pipeline Metadata",
        f"  Extracted:   {metadata.extracted_at.isoformat(timespec='seconds')}",
        f"  Transformed: {metadata.transformed_at.isoformat(timespec='seconds')}",
        f"  Processing:  {metadata.processing_ms:.0f}ms",
    ]
    if metadata.interval is not None:
        lines.append(f"  Interval:    {metadata.interval.value.capitalize()}")
    return lines


def render_stock(result: StockPipelineResult) -> str:
    """Quote header, quote stats, period analytics and metadata."""
    quote = result.raw.quote
    analytics = result.transformed.analytics
    lines = [
        f"{quote.symbol}  ${format_price(quote.price)}  {format_change(quote.change, quote.change_percent)}",
        f"{len(result.transformed.time_series)} data points",
        "",
        f"Open ${format_price(quote.open)}  High ${format_price(quote.high)}  "
        f"Low ${format_price(quote.low)}  Volume {format_volume(quote.volume)}",
        f"Avg Price ${format_price(analytics.avg_price)}  "
        f"Period High ${format_price(analytics.highest_price)}  "
        f"Period Low ${format_price(analytics.lowest_price)}",
        f"Volatility {analytics.volatility:.2f}%  Trend {analytics.trend.value}",
        "",
    ]
    return "\n".join(lines + _metadata_lines(result.metadata))


def render_weather(result: WeatherPipelineResult) -> str:
    """Current conditions, daily outlook and metadata."""
    current = result.raw.current
    lines = [
        f"{current.city} {current.country}",
        current.description.capitalize(),
        "",
        f"Temperature {round(current.temperature)}°C  Feels Like {round(current.feels_like)}°C  "
        f"Humidity {current.humidity:g}%  Wind {current.wind_speed:g} m/s",
        f"Pressure {current.pressure:g} hPa  Visibility {current.visibility / 1000:.1f} km  "
        f"Cloudiness {current.clouds:g}%  Wind Direction {current.wind_deg:g}°",
        "",
    ]
    for day in result.transformed.daily_forecast:
        lines.append(
            f"{day.label}: {day.min_temp:.1f}°C .. {day.max_temp:.1f}°C, "
            f"humidity {day.avg_humidity:.0f}%, wind {day.avg_wind_speed:.1f} m/s"
        )
    lines.append("")
    return "\n".join(lines + _metadata_lines(result.metadata))
