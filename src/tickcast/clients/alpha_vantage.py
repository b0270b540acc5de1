"""Alpha Vantage API client for quotes and OHLCV time series.

Provides async access to the single ``/query`` endpoint:
- GLOBAL_QUOTE: latest price, change, volume
- TIME_SERIES_DAILY / WEEKLY / MONTHLY: OHLCV bars keyed by date

Alpha Vantage answers most failures with HTTP 200 and one of these keys
instead of data:
    "Error Message"  invalid symbol, invalid or missing API key
    "Note"           call frequency exceeded
    "Information"    daily quota exceeded, premium-only endpoint
They are raised as ProviderError with the closest HTTP status so the
error classifier can treat both providers alike.

API Documentation: https://www.alphavantage.co/documentation/

Usage:
    from tickcast.clients.alpha_vantage import AlphaVantageClient

    async with AlphaVantageClient(api_key) as client:
        quote = await client.get_quote("AAPL")
        series = await client.get_time_series("AAPL", "weekly")
"""

import logging
from typing import Any

from tickcast.clients.base import BaseAsyncClient
from tickcast.config import DEFAULT_FINANCE_BASE_URL
from tickcast.exceptions import ProviderError
from tickcast.models import TimeInterval

logger = logging.getLogger(__name__)

SERIES_FUNCTIONS: dict[TimeInterval, str] = {
    TimeInterval.DAILY: "TIME_SERIES_DAILY",
    TimeInterval.WEEKLY: "TIME_SERIES_WEEKLY",
    TimeInterval.MONTHLY: "TIME_SERIES_MONTHLY",
}

# Response key holding the bars, per interval
SERIES_KEYS: dict[TimeInterval, str] = {
    TimeInterval.DAILY: "Time Series (Daily)",
    TimeInterval.WEEKLY: "Weekly Time Series",
    TimeInterval.MONTHLY: "Monthly Time Series",
}


class AlphaVantageClient(BaseAsyncClient):
    """Async client for Alpha Vantage.

    Args:
        api_key: Alpha Vantage API key
        rate_limit: Max requests per second (default: 5)
        base_url: Override for the API root
        timeout: Request timeout in seconds
    """

    provider = "alphavantage"

    def __init__(
        self,
        api_key: str,
        rate_limit: int = 5,
        base_url: str = DEFAULT_FINANCE_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(
            base_url=base_url,
            headers={},  # Alpha Vantage uses query param for auth, not header
            rate_limit=rate_limit,
            timeout=timeout,
        )
        self.api_key = api_key

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Override to inject API key and surface in-body errors."""
        params = params or {}
        params["apikey"] = self.api_key
        body = await super()._request(method, endpoint, params)
        if isinstance(body, dict):
            self._raise_for_body(body)
        return body

    def _raise_for_body(self, body: dict[str, Any]) -> None:
        if "Error Message" in body:
            message = str(body["Error Message"])
            status = 401 if "apikey" in message.lower() else 404
        elif "Note" in body:
            message, status = str(body["Note"]), 429
        elif "Information" in body:
            message, status = str(body["Information"]), 429
        else:
            return
        logger.warning("Alpha Vantage error (%d): %s", status, message)
        raise ProviderError(
            message=message,
            status_code=status,
            response_body=message[:500],
            provider=self.provider,
        )

    async def get_quote(self, symbol: str) -> dict[str, Any]:
        """Get the latest quote for a symbol.

        Args:
            symbol: Stock symbol

        Returns:
            Dict with 'Global Quote' key, whose values are strings keyed
            "01. symbol" .. "10. change percent". An unknown symbol yields
            an empty 'Global Quote'.

        API Docs: https://www.alphavantage.co/documentation/#latestprice
        """
        params = {"function": "GLOBAL_QUOTE", "symbol": symbol.upper()}
        return await self.get("/query", params=params)

    async def get_time_series(
        self,
        symbol: str,
        interval: TimeInterval | str = TimeInterval.DAILY,
    ) -> dict[str, Any]:
        """Get OHLCV bars for a symbol.

        Args:
            symbol: Stock symbol
            interval: daily, weekly or monthly

        Returns:
            Dict with the interval's series key (see SERIES_KEYS) mapping
            "YYYY-MM-DD" to {"1. open", "2. high", "3. low", "4. close",
            "5. volume"}. Dates are newest-first in the response.

        API Docs: https://www.alphavantage.co/documentation/#time-series-data
        """
        interval = TimeInterval(interval)
        params = {"function": SERIES_FUNCTIONS[interval], "symbol": symbol.upper()}
        if interval is TimeInterval.DAILY:
            params["outputsize"] = "compact"  # Latest 100 bars
        return await self.get("/query", params=params)
