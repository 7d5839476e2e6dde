"""
TradeSafe App - Trading Signal Dashboard Backend

Polls a market-data API (or fabricates mock data when no key is configured),
derives simple buy/sell trading signals from price movement and pushes them
to connected dashboard clients on a fixed schedule.
"""

__version__ = "0.1.0"
__author__ = "TradeSafe Team"
