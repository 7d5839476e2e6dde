"""
Signal derivation and signal data models.
"""
from .engine import SignalEngine, classify_trend, price_change_pct
from .models import EXPERT_ROSTER, Expert, PriceLevels, RiskTier, Signal, Trend

__all__ = [
    "EXPERT_ROSTER",
    "Expert",
    "PriceLevels",
    "RiskTier",
    "Signal",
    "SignalEngine",
    "Trend",
    "classify_trend",
    "price_change_pct",
]
