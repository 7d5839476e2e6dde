"""
Dashboard service coordinator.

Owns all mutable dashboard state (the retained signal list and the portfolio
simulator) and orchestrates market data fetches and signal derivation. The
service knows nothing about scheduling: periodic refreshes call
``generate()`` and ``tick_portfolio()`` from outside.
"""

import random
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta
from typing import Any, Optional, Protocol, Sequence

import structlog

from ..config.defaults import AppConfig, DashboardParams, get_default_config
from ..market.client import INDICATOR_RESOLUTIONS, MarketDataClient
from ..market.models import CompanyProfile, DataSource, FetchResult, NewsItem, Quote
from ..portfolio.simulator import PortfolioSimulator, PortfolioSnapshot
from ..signals.engine import SignalEngine
from ..signals.models import Expert, Signal
from ..utils.time import Clock, format_timestamp, utc_now

logger = structlog.get_logger(__name__)


class MarketDataSource(Protocol):
    """What the service needs from a market data client."""

    @property
    def is_configured(self) -> bool: ...

    def fetch_quote(self, symbol: str, rng: Optional[random.Random] = None) -> FetchResult[Quote]: ...

    def fetch_profile(self, symbol: str) -> FetchResult[CompanyProfile]: ...

    def fetch_company_news(self, symbol: str, from_date: date, to_date: date) -> list[NewsItem]: ...

    def fetch_technical_indicator(
        self, symbol: str, indicator: str, resolution: str, from_ts: int, to_ts: int
    ) -> Optional[dict[str, Any]]: ...


class DashboardService:
    """
    Main coordinator for the signal dashboard.

    Manages the generation pipeline:
    Watchlist sample → Quote + Profile → Signal Engine → Retained signal list
    """

    def __init__(
        self,
        client: MarketDataSource,
        engine: SignalEngine,
        simulator: PortfolioSimulator,
        params: Optional[DashboardParams] = None,
        rng: Optional[random.Random] = None,
        clock: Clock = utc_now,
        environment: str = "development",
    ) -> None:
        self.client = client
        self.engine = engine
        self.simulator = simulator
        self.params = params or DashboardParams()
        self.rng = rng or random.Random()
        self.clock = clock
        self.environment = environment
        self.logger = logger

        # Newest first, never longer than params.signal_cap
        self._signals: list[Signal] = []
        self._lock = threading.Lock()

        self.logger.info(
            "Dashboard service initialized",
            watchlist=list(self.params.watchlist),
            signal_cap=self.params.signal_cap,
            live_data=self.client.is_configured
        )

    @classmethod
    def from_config(
        cls,
        config: Optional[AppConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Clock = utc_now,
    ) -> "DashboardService":
        """Wire a service and its collaborators from configuration."""
        config = config or get_default_config()
        rng = rng or random.Random()

        return cls(
            client=MarketDataClient(config.market_data, rng=random.Random(rng.getrandbits(64))),
            engine=SignalEngine(config.signals, rng=rng, clock=clock),
            simulator=PortfolioSimulator(config.portfolio, rng=rng, clock=clock),
            params=config.dashboard,
            rng=rng,
            clock=clock,
            environment=config.server.environment,
        )

    def pick_symbols(self, count: int) -> list[str]:
        """Random subset of the watchlist without repeats."""
        watchlist = list(self.params.watchlist)
        return self.rng.sample(watchlist, min(count, len(watchlist)))

    def generate(self, symbols: Optional[Sequence[str]] = None) -> list[Signal]:
        """
        Generate one signal per symbol and add them to the retained list.

        Args:
            symbols: Symbols to evaluate; defaults to a random sample of
                ``batch_size`` symbols from the watchlist

        Returns:
            Newly generated signals. Symbols that fail are logged and skipped.
        """
        if symbols is None:
            symbols = self.pick_symbols(self.params.batch_size)
        symbols = list(symbols)

        if not symbols:
            return []

        new_signals: list[Signal] = []
        workers = max(1, min(self.params.fetch_workers, len(symbols)))

        # Fetches run concurrently, each with its own random source seeded here
        # in symbol order. Derivation stays on this thread.
        seeds = [self.rng.getrandbits(64) for _ in symbols]
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="market-data") as pool:
            futures = [
                (symbol, pool.submit(self._fetch_market_data, symbol, random.Random(seed)))
                for symbol, seed in zip(symbols, seeds)
            ]

            for symbol, future in futures:
                try:
                    quote_result, profile_result = future.result()
                    source = DataSource.MOCK if quote_result.is_mock else DataSource.LIVE
                    signal = self.engine.derive_signal(
                        quote_result.value, profile_result.value, source=source
                    )
                except Exception as e:
                    self.logger.error(
                        "Failed to generate signal, skipping symbol",
                        symbol=symbol,
                        error=str(e),
                        error_type=type(e).__name__
                    )
                    continue

                new_signals.append(signal)

        with self._lock:
            self._signals = (new_signals + self._signals)[:self.params.signal_cap]
            retained = len(self._signals)

        self.logger.info(
            "Generated trading signals",
            requested=len(symbols),
            generated=len(new_signals),
            retained=retained
        )

        return new_signals

    def warm_up(self, batches: Optional[int] = None) -> int:
        """Run several generations so the dashboard starts populated."""
        batches = self.params.warm_up_batches if batches is None else batches
        total = 0
        for _ in range(batches):
            total += len(self.generate())
        return total

    def list_active_signals(self) -> list[Signal]:
        """Retained signals that have not yet expired, newest first."""
        now = self.clock()
        with self._lock:
            return [s for s in self._signals if s.is_active(now)]

    def list_experts(self) -> list[Expert]:
        return list(self.engine.experts)

    def current_portfolio(self) -> PortfolioSnapshot:
        with self._lock:
            return self.simulator.snapshot()

    def tick_portfolio(self) -> PortfolioSnapshot:
        """Advance the portfolio simulation by one step."""
        with self._lock:
            snapshot = self.simulator.tick()

        self.logger.debug(
            "Portfolio updated",
            portfolio_value=round(snapshot.portfolio_value, 2),
            daily_profit=round(snapshot.daily_profit, 2)
        )
        return snapshot

    def get_quote(self, symbol: str) -> FetchResult[Quote]:
        """Single quote passthrough; mock on upstream failure."""
        return self.client.fetch_quote(symbol)

    def get_company_news(self, symbol: str, days: int = 7) -> list[NewsItem]:
        """Company news from the last ``days`` days; empty when unavailable."""
        to_date = self.clock().date()
        return self.client.fetch_company_news(symbol, to_date - timedelta(days=days), to_date)

    def get_technical_indicator(
        self, symbol: str, indicator: str, resolution: str = "D", days: int = 30
    ) -> Optional[dict[str, Any]]:
        """Indicator series over the last ``days`` days; None when unavailable."""
        if resolution not in INDICATOR_RESOLUTIONS:
            raise ValueError(f"Unsupported resolution {resolution!r}")

        to_ts = int(self.clock().timestamp())
        return self.client.fetch_technical_indicator(
            symbol, indicator, resolution, to_ts - days * 86400, to_ts
        )

    def health(self) -> dict[str, Any]:
        """Health summary reported by the delivery layer."""
        with self._lock:
            retained = len(self._signals)

        return {
            "status": "OK",
            "environment": self.environment,
            "timestamp": format_timestamp(self.clock()),
            "finnhub": (
                "Configured" if self.client.is_configured
                else "Not Configured - Using Mock Data"
            ),
            "retainedSignals": retained,
        }

    def _fetch_market_data(
        self, symbol: str, rng: random.Random
    ) -> tuple[FetchResult[Quote], FetchResult[CompanyProfile]]:
        return self.client.fetch_quote(symbol, rng=rng), self.client.fetch_profile(symbol)
