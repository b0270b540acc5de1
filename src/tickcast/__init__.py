"""Tickcast — cached ETL for stock quotes and weather forecasts."""

from tickcast.pipeline import classify, run_stock_pipeline, run_weather_pipeline

__version__ = "0.1.0"

__all__ = ["classify", "run_stock_pipeline", "run_weather_pipeline", "__version__"]
