"""
Signal derivation from a single quote.

The engine is a pure function of its inputs plus the injected random source
and clock: trend from the sign of the move, risk tier from its size, price
levels as percentage offsets from the current price.
"""

import random
import uuid
from datetime import timedelta
from typing import Optional, Sequence

from ..config.defaults import SignalParams
from ..errors import SignalDerivationError
from ..market.models import CompanyProfile, DataSource, Quote
from ..utils.time import Clock, utc_now
from .models import EXPERT_ROSTER, Expert, PriceLevels, RiskTier, Signal, Trend


def price_change_pct(current: float, previous_close: float) -> float:
    """Percent move from the previous close."""
    if previous_close <= 0:
        raise SignalDerivationError(
            f"Previous close must be positive, got {previous_close}"
        )
    return (current - previous_close) / previous_close * 100


def classify_trend(change_pct: float) -> Trend:
    """Up only for a strictly positive move; an unchanged price counts as down."""
    return Trend.UP if change_pct > 0 else Trend.DOWN


class SignalEngine:
    """Turns quotes into trading signals."""

    def __init__(self, params: Optional[SignalParams] = None,
                 rng: Optional[random.Random] = None,
                 clock: Clock = utc_now,
                 experts: Sequence[Expert] = EXPERT_ROSTER):
        if not experts:
            raise ValueError("Expert roster must not be empty")
        self.params = params or SignalParams()
        self.rng = rng or random.Random()
        self.clock = clock
        self.experts = tuple(experts)

    def classify_risk(self, change_pct: float) -> RiskTier:
        volatility = abs(change_pct)
        if volatility < self.params.low_risk_threshold:
            return RiskTier.LOW
        if volatility > self.params.high_risk_threshold:
            return RiskTier.HIGH
        return RiskTier.MEDIUM

    def risk_multiplier(self, risk: RiskTier) -> float:
        return {
            RiskTier.LOW: self.params.low_risk_multiplier,
            RiskTier.MEDIUM: self.params.medium_risk_multiplier,
            RiskTier.HIGH: self.params.high_risk_multiplier,
        }[risk]

    def calculate_levels(self, current_price: float, trend: Trend, risk: RiskTier) -> PriceLevels:
        """
        Compute entry range, target and stop-loss around the current price.

        Uptrends enter slightly below the price and target above it;
        downtrends mirror that.
        """
        p = self.params
        m = self.risk_multiplier(risk)

        if trend is Trend.UP:
            entry_low = current_price * (1 - p.entry_far_pct * m)
            entry_high = current_price * (1 - p.entry_near_pct * m)
            target = current_price * (1 + p.target_pct * m)
            stop_loss = current_price * (1 - p.stop_loss_pct * m)
        else:
            entry_low = current_price * (1 + p.entry_near_pct * m)
            entry_high = current_price * (1 + p.entry_far_pct * m)
            target = current_price * (1 - p.target_pct * m)
            stop_loss = current_price * (1 + p.stop_loss_pct * m)

        return PriceLevels(
            entry_low=round(entry_low, 2),
            entry_high=round(entry_high, 2),
            target=round(target, 2),
            stop_loss=round(stop_loss, 2),
        )

    def pick_expert(self) -> Expert:
        return self.rng.choice(self.experts)

    def derive_signal(self, quote: Quote, profile: CompanyProfile,
                      source: DataSource = DataSource.LIVE) -> Signal:
        """Derive a signal for ``quote.symbol``."""
        try:
            change = price_change_pct(quote.current, quote.previous_close)
        except SignalDerivationError as e:
            e.symbol = quote.symbol
            raise

        trend = classify_trend(change)
        risk = self.classify_risk(change)
        levels = self.calculate_levels(quote.current, trend, risk)
        expert = self.pick_expert()

        created_at = self.clock()
        days = self.rng.randint(self.params.expiry_min_days, self.params.expiry_max_days)

        return Signal(
            id=uuid.UUID(int=self.rng.getrandbits(128), version=4).hex,
            symbol=quote.symbol,
            asset=f"{quote.symbol} - {profile.name}",
            trend=trend,
            expert=expert.name,
            risk=risk,
            levels=levels,
            current_price=round(quote.current, 2),
            price_change_pct=change,
            created_at=created_at,
            expires_at=created_at + timedelta(days=days),
            source=source,
        )
