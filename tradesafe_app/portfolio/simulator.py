"""
Portfolio random-walk simulator.

There is no trade accounting here: each tick nudges value and daily P/L by a
bounded random delta and redraws the other headline figures.
"""

import random
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional

from ..config.defaults import PortfolioParams
from ..utils.time import Clock, format_timestamp, utc_now


@dataclass
class PortfolioSnapshot:
    """Aggregate simulated portfolio metrics."""
    portfolio_value: float
    daily_profit: float
    open_trades: int
    win_rate: int
    risk_ratio: float
    last_update: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "portfolioValue": round(self.portfolio_value, 2),
            "dailyProfit": round(self.daily_profit, 2),
            "openTrades": self.open_trades,
            "winRate": self.win_rate,
            "riskRatio": round(self.risk_ratio, 2),
            "lastUpdate": format_timestamp(self.last_update),
        }


class PortfolioSimulator:
    """Owns the portfolio snapshot and mutates it in place on each tick."""

    def __init__(self, params: Optional[PortfolioParams] = None,
                 rng: Optional[random.Random] = None,
                 clock: Clock = utc_now):
        self.params = params or PortfolioParams()
        self.rng = rng or random.Random()
        self.clock = clock
        self._snapshot = PortfolioSnapshot(
            portfolio_value=max(self.params.value_floor, self.params.initial_value),
            daily_profit=self.params.initial_daily_profit,
            open_trades=self.params.initial_open_trades,
            win_rate=self.params.initial_win_rate,
            risk_ratio=self.params.initial_risk_ratio,
            last_update=self.clock(),
        )

    def snapshot(self) -> PortfolioSnapshot:
        """Copy of the current state."""
        return replace(self._snapshot)

    def tick(self) -> PortfolioSnapshot:
        """Advance the simulation one step and return the new state."""
        p = self.params
        s = self._snapshot

        change = (self.rng.random() - 0.5) * p.max_step
        s.portfolio_value = max(p.value_floor, s.portfolio_value + change)
        s.daily_profit += change
        s.open_trades = p.open_trades_min + self.rng.randrange(p.open_trades_spread)
        s.win_rate = p.win_rate_min + self.rng.randrange(p.win_rate_spread)
        s.risk_ratio = p.risk_ratio_min + self.rng.random() * p.risk_ratio_spread
        s.last_update = self.clock()

        return self.snapshot()
