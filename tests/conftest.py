"""Pytest configuration and shared fixtures."""

import random
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from tradesafe_app.config.defaults import DashboardParams
from tradesafe_app.dashboard.service import DashboardService
from tradesafe_app.market.mock import MockMarketData, static_profile
from tradesafe_app.market.models import CompanyProfile, FetchResult, NewsItem, Quote
from tradesafe_app.portfolio.simulator import PortfolioSimulator
from tradesafe_app.signals.engine import SignalEngine


class FixedClock:
    """Controllable clock for deterministic expiry tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class StubMarketData:
    """In-memory market data source with per-symbol quotes and failures."""

    def __init__(self, quotes: Optional[dict[str, Quote]] = None,
                 failing: Optional[set[str]] = None,
                 configured: bool = True):
        self.quotes = quotes or {}
        self.failing = failing or set()
        self.configured = configured
        self.mock = MockMarketData(rng=random.Random(7))
        self.calls: list[str] = []
        self.indicator_calls: list[tuple] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    def fetch_quote(self, symbol: str, rng: Optional[random.Random] = None) -> FetchResult[Quote]:
        self.calls.append(symbol)
        if symbol in self.failing:
            raise RuntimeError(f"boom for {symbol}")
        if symbol in self.quotes:
            return FetchResult.live(self.quotes[symbol])
        return FetchResult.mock(self.mock.quote(symbol, rng), "missing_credentials")

    def fetch_profile(self, symbol: str) -> FetchResult[CompanyProfile]:
        return FetchResult.live(static_profile(symbol))

    def fetch_company_news(self, symbol: str, from_date: date, to_date: date) -> list[NewsItem]:
        return []

    def fetch_technical_indicator(self, symbol, indicator, resolution, from_ts, to_ts):
        self.indicator_calls.append((symbol, indicator, resolution, from_ts, to_ts))
        if symbol in self.failing:
            return None
        return {"s": "ok", "t": [from_ts, to_ts], indicator: [1.0, 2.0]}


def make_quote(symbol: str = "AAPL", current: float = 103.0, previous_close: float = 100.0) -> Quote:
    change = current - previous_close
    return Quote(
        symbol=symbol,
        current=current,
        previous_close=previous_close,
        open=previous_close,
        high=max(current, previous_close) + 1,
        low=min(current, previous_close) - 1,
        change=change,
        percent_change=change / previous_close * 100 if previous_close else 0.0,
    )


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def sample_quote() -> Quote:
    """AAPL up 3% on the day."""
    return make_quote("AAPL", 103.0, 100.0)


@pytest.fixture
def sample_profile() -> CompanyProfile:
    return static_profile("AAPL")


@pytest.fixture
def sample_quote_payload() -> dict:
    """Upstream /quote response body."""
    return {"c": 189.25, "d": 1.75, "dp": 0.9333, "h": 190.1, "l": 186.9, "o": 187.2, "pc": 187.5, "t": 1709294400}


@pytest.fixture
def quote_factory():
    """Build quotes from current and previous close prices."""
    return make_quote


@pytest.fixture
def stub_market_data():
    """Factory for StubMarketData instances."""
    return StubMarketData


WATCHLIST = ("AAPL", "MSFT", "GOOGL", "TSLA", "AMZN", "META", "NFLX", "NVDA")


@pytest.fixture
def make_service(rng, clock, stub_market_data):
    """Build a dashboard service around a stub market data source."""

    def _make(client=None, environment="development", **params):
        params.setdefault("watchlist", WATCHLIST)
        return DashboardService(
            client=client or stub_market_data(),
            engine=SignalEngine(rng=rng, clock=clock),
            simulator=PortfolioSimulator(rng=rng, clock=clock),
            params=DashboardParams(**params),
            rng=rng,
            clock=clock,
            environment=environment,
        )

    return _make
