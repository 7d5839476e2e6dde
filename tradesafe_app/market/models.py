"""
Market data models.

Immutable representations of what the upstream API returns, plus the
``FetchResult`` wrapper that records whether a value is live or synthetic.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from ..errors import MalformedResponseError

T = TypeVar("T")


class DataSource(str, Enum):
    """Origin of a market data value."""
    LIVE = "live"
    MOCK = "mock"


@dataclass(frozen=True)
class Quote:
    """Point-in-time quote for a symbol."""
    symbol: str
    current: float          # Current price
    previous_close: float   # Previous session close
    open: float             # Session open
    high: float             # Session high
    low: float              # Session low
    change: float           # Absolute change vs previous close
    percent_change: float   # Percent change vs previous close

    @classmethod
    def from_api(cls, symbol: str, payload: dict[str, Any]) -> "Quote":
        """Build a quote from the upstream ``c/pc/o/h/l/d/dp`` payload."""
        try:
            current = float(payload["c"])
            previous_close = float(payload["pc"])

            change = payload.get("d")
            percent_change = payload.get("dp")
            if change is None:
                change = current - previous_close
            if percent_change is None:
                percent_change = (change / previous_close * 100) if previous_close else 0.0

            return cls(
                symbol=symbol,
                current=current,
                previous_close=previous_close,
                open=float(payload.get("o") or previous_close),
                high=float(payload.get("h") or current),
                low=float(payload.get("l") or current),
                change=float(change),
                percent_change=float(percent_change),
            )
        except (KeyError, TypeError, ValueError, ZeroDivisionError) as e:
            raise MalformedResponseError(
                f"Quote payload has missing or non-numeric fields: {e}",
                symbol=symbol,
                raw_data=str(payload)[:200]
            ) from e

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "current": round(self.current, 2),
            "previousClose": round(self.previous_close, 2),
            "open": round(self.open, 2),
            "high": round(self.high, 2),
            "low": round(self.low, 2),
            "change": round(self.change, 2),
            "percentChange": round(self.percent_change, 2),
        }


@dataclass(frozen=True)
class CompanyProfile:
    """Display information for a symbol."""
    symbol: str
    name: str
    exchange: str

    def to_dict(self) -> dict[str, Any]:
        return {"symbol": self.symbol, "name": self.name, "exchange": self.exchange}


@dataclass(frozen=True)
class NewsItem:
    """Single company news headline."""
    headline: str
    source: str
    url: str
    summary: str
    published_at: Optional[datetime]

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "NewsItem":
        published_at = None
        published = payload.get("datetime")
        if isinstance(published, (int, float)) and published > 0:
            try:
                published_at = datetime.fromtimestamp(published, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                published_at = None

        return cls(
            headline=str(payload.get("headline", "")),
            source=str(payload.get("source", "")),
            url=str(payload.get("url", "")),
            summary=str(payload.get("summary", "")),
            published_at=published_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "headline": self.headline,
            "source": self.source,
            "url": self.url,
            "summary": self.summary,
            "publishedAt": self.published_at.isoformat() if self.published_at else None,
        }


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    Outcome of an upstream fetch.

    ``source`` is LIVE when the value came from the API. When it is MOCK,
    ``reason`` names the upstream failure that triggered the substitution.
    """
    value: T
    source: DataSource
    reason: Optional[str] = None

    @classmethod
    def live(cls, value: T) -> "FetchResult[T]":
        return cls(value=value, source=DataSource.LIVE)

    @classmethod
    def mock(cls, value: T, reason: str) -> "FetchResult[T]":
        return cls(value=value, source=DataSource.MOCK, reason=reason)

    @property
    def is_mock(self) -> bool:
        return self.source is DataSource.MOCK
