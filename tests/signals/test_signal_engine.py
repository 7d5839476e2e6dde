"""Tests for signal derivation."""

import random
from datetime import timedelta

import pytest

from tradesafe_app.config.defaults import SignalParams
from tradesafe_app.errors import SignalDerivationError
from tradesafe_app.market.models import DataSource
from tradesafe_app.signals.engine import SignalEngine, classify_trend, price_change_pct
from tradesafe_app.signals.models import EXPERT_ROSTER, RiskTier, Trend


class TestPriceChange:
    """Test percent change and trend classification."""

    def test_price_change_pct(self):
        assert price_change_pct(103.0, 100.0) == pytest.approx(3.0)
        assert price_change_pct(95.0, 100.0) == pytest.approx(-5.0)

    def test_non_positive_previous_close_rejected(self):
        with pytest.raises(SignalDerivationError):
            price_change_pct(10.0, 0.0)
        with pytest.raises(SignalDerivationError):
            price_change_pct(10.0, -1.0)

    def test_trend_up_only_for_positive_change(self):
        assert classify_trend(0.01) is Trend.UP
        assert classify_trend(-0.01) is Trend.DOWN

    def test_zero_change_resolves_to_down(self):
        assert classify_trend(0.0) is Trend.DOWN


class TestRiskTier:
    """Test risk tiering by absolute percent change."""

    @pytest.fixture
    def engine(self, rng, clock):
        return SignalEngine(SignalParams(), rng=rng, clock=clock)

    @pytest.mark.parametrize("change,expected", [
        (0.0, RiskTier.LOW),
        (1.99, RiskTier.LOW),
        (-1.5, RiskTier.LOW),
        (2.0, RiskTier.MEDIUM),
        (3.0, RiskTier.MEDIUM),
        (-5.0, RiskTier.MEDIUM),
        (5.01, RiskTier.HIGH),
        (-12.0, RiskTier.HIGH),
    ])
    def test_classify_risk(self, engine, change, expected):
        assert engine.classify_risk(change) is expected

    def test_custom_thresholds(self, rng, clock):
        engine = SignalEngine(SignalParams(low_risk_threshold=1.0, high_risk_threshold=3.0),
                              rng=rng, clock=clock)
        assert engine.classify_risk(0.5) is RiskTier.LOW
        assert engine.classify_risk(2.0) is RiskTier.MEDIUM
        assert engine.classify_risk(3.5) is RiskTier.HIGH

    def test_risk_multiplier(self, engine):
        assert engine.risk_multiplier(RiskTier.LOW) == 0.5
        assert engine.risk_multiplier(RiskTier.MEDIUM) == 1.0
        assert engine.risk_multiplier(RiskTier.HIGH) == 1.5


class TestPriceLevels:
    """Test entry, target and stop-loss computation."""

    @pytest.fixture
    def engine(self, rng, clock):
        return SignalEngine(rng=rng, clock=clock)

    def test_uptrend_low_risk(self, engine):
        levels = engine.calculate_levels(100.0, Trend.UP, RiskTier.LOW)

        assert levels.entry_low == 99.50
        assert levels.entry_high == 99.75
        assert levels.target == 104.00
        assert levels.stop_loss == 98.00
        assert levels.entry_range == "99.50 - 99.75"

    def test_downtrend_medium_risk(self, engine):
        levels = engine.calculate_levels(200.0, Trend.DOWN, RiskTier.MEDIUM)

        assert levels.entry_low == 201.00
        assert levels.entry_high == 202.00
        assert levels.target == 184.00
        assert levels.stop_loss == 208.00

    def test_uptrend_high_risk(self, engine):
        levels = engine.calculate_levels(100.0, Trend.UP, RiskTier.HIGH)

        assert levels.entry_low == 98.50
        assert levels.entry_high == 99.25
        assert levels.target == 112.00
        assert levels.stop_loss == 94.00

    def test_levels_rounded_to_cents(self, engine):
        levels = engine.calculate_levels(123.4567, Trend.UP, RiskTier.MEDIUM)

        for value in (levels.entry_low, levels.entry_high, levels.target, levels.stop_loss):
            assert round(value, 2) == value

    def test_levels_bracket_price_in_trend_direction(self, engine):
        up = engine.calculate_levels(150.0, Trend.UP, RiskTier.MEDIUM)
        assert up.stop_loss < up.entry_low < up.entry_high < 150.0 < up.target

        down = engine.calculate_levels(150.0, Trend.DOWN, RiskTier.MEDIUM)
        assert down.target < 150.0 < down.entry_low < down.entry_high < down.stop_loss


class TestDeriveSignal:
    """Test end-to-end signal derivation."""

    def test_derive_signal_fields(self, rng, clock, sample_quote, sample_profile):
        engine = SignalEngine(rng=rng, clock=clock)

        signal = engine.derive_signal(sample_quote, sample_profile)

        assert signal.symbol == "AAPL"
        assert signal.asset == "AAPL - Apple Inc."
        assert signal.trend is Trend.UP
        assert signal.risk is RiskTier.MEDIUM
        assert signal.current_price == 103.0
        assert signal.price_change_pct == pytest.approx(3.0)
        assert signal.expert in {e.name for e in EXPERT_ROSTER}
        assert signal.created_at == clock.now
        assert signal.source is DataSource.LIVE

    def test_stored_change_matches_formula(self, rng, clock, quote_factory, sample_profile):
        engine = SignalEngine(rng=rng, clock=clock)
        sampler = random.Random(3)

        for _ in range(200):
            previous_close = sampler.uniform(1, 500)
            current = previous_close * sampler.uniform(0.8, 1.2)
            quote = quote_factory("AAPL", current, previous_close)

            signal = engine.derive_signal(quote, sample_profile)

            expected = (current - previous_close) / previous_close * 100
            assert signal.price_change_pct == pytest.approx(expected, abs=1e-9)
            assert signal.trend is (Trend.UP if expected > 0 else Trend.DOWN)

    def test_expiry_window(self, rng, clock, sample_quote, sample_profile):
        engine = SignalEngine(rng=rng, clock=clock)

        for _ in range(100):
            signal = engine.derive_signal(sample_quote, sample_profile)
            lifetime = signal.expires_at - signal.created_at
            assert timedelta(days=2) <= lifetime <= timedelta(days=4)
            assert signal.expires_at > signal.created_at

    def test_expert_assignment_covers_roster(self, rng, clock, sample_quote, sample_profile):
        engine = SignalEngine(rng=rng, clock=clock)

        experts = {engine.derive_signal(sample_quote, sample_profile).expert for _ in range(200)}

        assert experts == {e.name for e in EXPERT_ROSTER}

    def test_same_seed_same_signal(self, clock, sample_quote, sample_profile):
        first = SignalEngine(rng=random.Random(9), clock=clock).derive_signal(sample_quote, sample_profile)
        second = SignalEngine(rng=random.Random(9), clock=clock).derive_signal(sample_quote, sample_profile)

        assert first == second

    def test_ids_are_unique(self, rng, clock, sample_quote, sample_profile):
        engine = SignalEngine(rng=rng, clock=clock)

        ids = {engine.derive_signal(sample_quote, sample_profile).id for _ in range(50)}

        assert len(ids) == 50

    def test_invalid_quote_raises_with_symbol(self, rng, clock, quote_factory, sample_profile):
        engine = SignalEngine(rng=rng, clock=clock)
        quote = quote_factory("TSLA", 10.0, 0.0)

        with pytest.raises(SignalDerivationError) as exc_info:
            engine.derive_signal(quote, sample_profile)

        assert exc_info.value.symbol == "TSLA"

    def test_empty_roster_rejected(self, rng, clock):
        with pytest.raises(ValueError):
            SignalEngine(rng=rng, clock=clock, experts=[])


class TestSignalSerialization:
    """Test the wire format consumed by the dashboard."""

    def test_to_dict(self, rng, clock, quote_factory, sample_profile):
        engine = SignalEngine(rng=rng, clock=clock)
        quote = quote_factory("AAPL", 100.0, 101.0)

        data = engine.derive_signal(quote, sample_profile, source=DataSource.MOCK).to_dict()

        assert data["asset"] == "AAPL - Apple Inc."
        assert data["trend"] == "down"
        assert data["risk"] == "low"
        assert data["entry"] == "100.25 - 100.50"
        assert data["target"] == "96.00"
        assert data["stopLoss"] == "102.00"
        assert data["currentPrice"] == "100.00"
        assert data["priceChange"] == "-0.99"
        assert data["timestamp"] == "2024-03-01T12:00:00.000Z"
        assert data["source"] == "mock"
        assert set(data) >= {"id", "expert", "expiry"}

    def test_is_active_is_exclusive_at_expiry(self, rng, clock, sample_quote, sample_profile):
        signal = SignalEngine(rng=rng, clock=clock).derive_signal(sample_quote, sample_profile)

        assert signal.is_active(signal.created_at)
        assert not signal.is_active(signal.expires_at)
