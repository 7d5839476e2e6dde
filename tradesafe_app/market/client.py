"""
Market data client for the Finnhub REST API.

Every public fetch resolves to a usable value. Missing credentials, network
failures, timeouts and "no data" responses are converted into mock data and
reported through ``FetchResult.reason`` instead of being raised.
"""

import json
import random
import socket
from datetime import date
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from ..config.defaults import MarketDataParams
from ..errors import (
    MalformedResponseError,
    MissingCredentialsError,
    NoDataError,
    UpstreamError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from ..logging.config import get_market_data_logger, log_mock_fallback
from .mock import MockMarketData, static_profile
from .models import CompanyProfile, FetchResult, NewsItem, Quote

logger = get_market_data_logger(__name__)

INDICATOR_RESOLUTIONS = ("1", "5", "15", "30", "60", "D", "W", "M")


class MarketDataClient:
    """Fetches quotes, company profiles, news and indicators, falling back to mock data."""

    def __init__(self, params: Optional[MarketDataParams] = None,
                 rng: Optional[random.Random] = None,
                 mock: Optional[MockMarketData] = None):
        self.params = params or MarketDataParams()
        self.api_key = self.params.api_key or ""
        self.base_url = self.params.base_url.rstrip("/")
        self.mock = mock or MockMarketData(self.params, rng)
        self.logger = logger

    @property
    def is_configured(self) -> bool:
        """Whether an API key is available for live requests."""
        return bool(self.api_key)

    def fetch_quote(self, symbol: str, rng: Optional[random.Random] = None) -> FetchResult[Quote]:
        """
        Fetch the current quote for a symbol, or a mock quote on failure.

        Args:
            symbol: Ticker symbol
            rng: Random source for the mock quote, the client's own when omitted
        """
        try:
            payload = self._get_json("/quote", {"symbol": symbol}, symbol=symbol)

            if not isinstance(payload, dict):
                raise MalformedResponseError(
                    "Quote response is not an object",
                    symbol=symbol,
                    raw_data=str(payload)[:200]
                )

            # Finnhub answers unknown symbols with all-zero prices
            if not payload or not payload.get("c"):
                raise NoDataError("Invalid symbol or no data available", symbol=symbol)

            return FetchResult.live(Quote.from_api(symbol, payload))

        except UpstreamError as e:
            log_mock_fallback(self.logger, symbol, "quote", e.reason, error=str(e))
            return FetchResult.mock(self.mock.quote(symbol, rng), e.reason)

    def fetch_profile(self, symbol: str) -> FetchResult[CompanyProfile]:
        """Fetch display information for a symbol, or the static entry on failure."""
        try:
            payload = self._get_json("/stock/profile2", {"symbol": symbol}, symbol=symbol)

            if not isinstance(payload, dict) or not payload.get("name"):
                raise NoDataError("No profile available", symbol=symbol)

            return FetchResult.live(CompanyProfile(
                symbol=symbol,
                name=str(payload["name"]),
                exchange=str(payload.get("exchange") or static_profile(symbol).exchange),
            ))

        except UpstreamError as e:
            log_mock_fallback(self.logger, symbol, "profile", e.reason, error=str(e))
            return FetchResult.mock(self.mock.profile(symbol), e.reason)

    def fetch_company_news(self, symbol: str, from_date: date, to_date: date) -> list[NewsItem]:
        """Fetch company news between two dates; empty on any failure."""
        try:
            payload = self._get_json(
                "/company-news",
                {"symbol": symbol, "from": from_date.isoformat(), "to": to_date.isoformat()},
                symbol=symbol
            )

            if not isinstance(payload, list):
                raise MalformedResponseError(
                    "News response is not a list",
                    symbol=symbol,
                    raw_data=str(payload)[:200]
                )

            return [NewsItem.from_api(item) for item in payload if isinstance(item, dict)]

        except UpstreamError as e:
            log_mock_fallback(self.logger, symbol, "news", e.reason, error=str(e))
            return []

    def fetch_technical_indicator(
        self,
        symbol: str,
        indicator: str,
        resolution: str,
        from_ts: int,
        to_ts: int,
    ) -> Optional[dict[str, Any]]:
        """
        Fetch a technical indicator series (sma, ema, rsi, ...) for a symbol.

        Args:
            symbol: Ticker symbol
            indicator: Indicator name understood by the upstream API
            resolution: Candle resolution, one of ``INDICATOR_RESOLUTIONS``
            from_ts: Range start, UNIX seconds
            to_ts: Range end, UNIX seconds

        Returns:
            Raw indicator payload, or None when unavailable. There is no
            synthetic fallback for indicators.
        """
        if resolution not in INDICATOR_RESOLUTIONS:
            raise ValueError(f"Unsupported resolution {resolution!r}")

        try:
            payload = self._get_json(
                "/indicator",
                {
                    "symbol": symbol,
                    "resolution": resolution,
                    "from": from_ts,
                    "to": to_ts,
                    "indicator": indicator,
                },
                symbol=symbol
            )

            if not isinstance(payload, dict):
                raise MalformedResponseError(
                    "Indicator response is not an object",
                    symbol=symbol,
                    raw_data=str(payload)[:200]
                )

            if payload.get("s") == "no_data":
                raise NoDataError("No indicator data for range", symbol=symbol)

            return payload

        except UpstreamError as e:
            log_mock_fallback(
                self.logger, symbol, "indicator", e.reason,
                error=str(e), context={"indicator": indicator}
            )
            return None

    def _get_json(self, path: str, params: dict[str, Any], symbol: Optional[str] = None) -> Any:
        """Perform an authenticated GET and decode the JSON body."""
        if not self.api_key:
            raise MissingCredentialsError("Finnhub API key not configured", symbol=symbol)

        query = urlencode({**params, "token": self.api_key})
        req = Request(
            f"{self.base_url}{path}?{query}",
            headers={
                "Accept": "application/json",
                "User-Agent": "tradesafe-app/1.0",
            },
            method="GET"
        )

        try:
            with urlopen(req, timeout=self.params.timeout_seconds) as response:
                body = response.read().decode("utf-8")

        except HTTPError as e:
            raise UpstreamUnavailableError(
                f"HTTP {e.code}: {e.reason}", status_code=e.code, symbol=symbol
            ) from e

        except (socket.timeout, TimeoutError) as e:
            raise UpstreamTimeoutError(
                f"Request timed out after {self.params.timeout_seconds}s",
                timeout_seconds=self.params.timeout_seconds,
                symbol=symbol
            ) from e

        except URLError as e:
            if isinstance(e.reason, (socket.timeout, TimeoutError)):
                raise UpstreamTimeoutError(
                    f"Request timed out after {self.params.timeout_seconds}s",
                    timeout_seconds=self.params.timeout_seconds,
                    symbol=symbol
                ) from e
            raise UpstreamUnavailableError(f"Network error: {e.reason}", symbol=symbol) from e

        except OSError as e:
            raise UpstreamUnavailableError(f"Network error: {e}", symbol=symbol) from e

        try:
            return json.loads(body)
        except ValueError as e:
            raise MalformedResponseError(
                f"Invalid JSON: {e}", raw_data=body[:200], symbol=symbol
            ) from e
