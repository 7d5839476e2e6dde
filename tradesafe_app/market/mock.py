"""Synthetic market data used when the upstream API is unavailable."""

import random
from typing import Optional

from ..config.defaults import MarketDataParams
from .models import CompanyProfile, Quote

COMPANY_PROFILES = {
    "AAPL": ("Apple Inc.", "NASDAQ"),
    "MSFT": ("Microsoft Corporation", "NASDAQ"),
    "GOOGL": ("Alphabet Inc.", "NASDAQ"),
    "TSLA": ("Tesla Inc.", "NASDAQ"),
    "AMZN": ("Amazon.com Inc.", "NASDAQ"),
    "META": ("Meta Platforms Inc.", "NASDAQ"),
    "NFLX": ("Netflix Inc.", "NASDAQ"),
    "NVDA": ("NVIDIA Corporation", "NASDAQ"),
}


def static_profile(symbol: str) -> CompanyProfile:
    """Look up a symbol in the static profile table."""
    name, exchange = COMPANY_PROFILES.get(symbol, (f"{symbol} Company", "Unknown"))
    return CompanyProfile(symbol=symbol, name=name, exchange=exchange)


class MockMarketData:
    """Generates plausible quotes as a random walk around a base price."""

    def __init__(self, params: Optional[MarketDataParams] = None,
                 rng: Optional[random.Random] = None):
        self.params = params or MarketDataParams()
        self.rng = rng or random.Random()

    def quote(self, symbol: str, rng: Optional[random.Random] = None) -> Quote:
        """Synthetic quote; ``rng`` overrides the instance random source."""
        p = self.params
        rng = rng or self.rng
        base = p.mock_base_min + rng.random() * p.mock_base_span
        change = (rng.random() - 0.5) * p.mock_change_span
        high = base + rng.random() * p.mock_range_span
        low = base - rng.random() * p.mock_range_span
        previous_close = base - change

        return Quote(
            symbol=symbol,
            current=base,
            previous_close=previous_close,
            open=previous_close,
            high=high,
            low=low,
            change=change,
            percent_change=change / previous_close * 100,
        )

    def profile(self, symbol: str) -> CompanyProfile:
        return static_profile(symbol)
