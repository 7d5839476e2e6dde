"""
Market data access: upstream client, models and mock data generation.
"""
from .client import MarketDataClient
from .mock import MockMarketData
from .models import CompanyProfile, DataSource, FetchResult, NewsItem, Quote

__all__ = [
    "CompanyProfile",
    "DataSource",
    "FetchResult",
    "MarketDataClient",
    "MockMarketData",
    "NewsItem",
    "Quote",
]
