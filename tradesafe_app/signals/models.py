"""
Signal data models.

Signals are immutable once derived. The expert roster is static reference
data that signals are randomly attributed to.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from ..market.models import DataSource
from ..utils.time import format_timestamp


class Trend(str, Enum):
    """Signal direction."""
    UP = "up"
    DOWN = "down"


class RiskTier(str, Enum):
    """Volatility bucket derived from absolute percent change."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Expert:
    """Analyst shown as the author of a signal."""
    id: int
    name: str
    specialty: str
    rating: float
    reviews: int
    success_rate: int
    avatar: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "specialty": self.specialty,
            "rating": self.rating,
            "reviews": self.reviews,
            "successRate": self.success_rate,
            "avatar": self.avatar,
        }


EXPERT_ROSTER: tuple[Expert, ...] = (
    Expert(1, "Mark Johnson", "Stock Market Analyst", 4.9, 128, 78, "MJ"),
    Expert(2, "Sarah Chen", "Forex Specialist", 4.7, 94, 82, "SC"),
    Expert(3, "Michael Torres", "Cryptocurrency Expert", 4.5, 156, 71, "MT"),
    Expert(4, "Emily Watson", "Technical Analyst", 4.8, 89, 75, "EW"),
)


@dataclass(frozen=True)
class PriceLevels:
    """Entry range, target and stop-loss, rounded to cents."""
    entry_low: float
    entry_high: float
    target: float
    stop_loss: float

    @property
    def entry_range(self) -> str:
        return f"{self.entry_low:.2f} - {self.entry_high:.2f}"


@dataclass(frozen=True)
class Signal:
    """A generated trading suggestion with direction, levels and expiry."""
    id: str
    symbol: str
    asset: str
    trend: Trend
    expert: str
    risk: RiskTier
    levels: PriceLevels
    current_price: float
    price_change_pct: float
    created_at: datetime
    expires_at: datetime
    source: DataSource = DataSource.LIVE

    def is_active(self, now: datetime) -> bool:
        """Active until the expiry instant, exclusive."""
        return now < self.expires_at

    def to_dict(self) -> dict[str, Any]:
        """Wire format consumed by the dashboard frontend."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "asset": self.asset,
            "trend": self.trend.value,
            "expert": self.expert,
            "risk": self.risk.value,
            "entry": self.levels.entry_range,
            "target": f"{self.levels.target:.2f}",
            "stopLoss": f"{self.levels.stop_loss:.2f}",
            "currentPrice": f"{self.current_price:.2f}",
            "priceChange": f"{self.price_change_pct:.2f}",
            "timestamp": format_timestamp(self.created_at),
            "expiry": format_timestamp(self.expires_at),
            "source": self.source.value,
        }
