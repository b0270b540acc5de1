"""ETL pipeline — Provider → Cache → Transform → Result.

The pipeline coordinates the entire data flow:
1. Extract raw data (cache first, provider on miss)
2. Transform into chart-ready series and analytics
3. Return results with extraction/transformation timestamps

Components:
- Orchestrator: Main coordinator and entry points
- WeatherExtractor / StockExtractor: Provider → Cache
- classify: Failure → displayable message
"""

from tickcast.pipeline.errors import ClassifiedError, ErrorKind, classify
from tickcast.pipeline.extractor import StockExtractor, WeatherExtractor
from tickcast.pipeline.orchestrator import (
    Orchestrator,
    run_stock_pipeline,
    run_weather_pipeline,
)

__all__ = [
    "ClassifiedError",
    "ErrorKind",
    "classify",
    "StockExtractor",
    "WeatherExtractor",
    "Orchestrator",
    "run_stock_pipeline",
    "run_weather_pipeline",
]
