"""Default configuration parameters for the signal dashboard."""

from dataclasses import dataclass, field


DEFAULT_WATCHLIST = ("AAPL", "MSFT", "GOOGL", "TSLA", "AMZN", "META", "NFLX", "NVDA")


@dataclass(frozen=True)
class MarketDataParams:
    """Upstream market-data API parameters."""
    base_url: str = "https://finnhub.io/api/v1"
    api_key: str = ""                                # Empty means permanent mock mode
    timeout_seconds: float = 10.0                    # Per-call ceiling

    # Mock data generation
    mock_base_min: float = 100.0                     # Mock base price lower bound
    mock_base_span: float = 200.0                    # Mock base price in [min, min + span)
    mock_change_span: float = 10.0                   # Mock change in [-span/2, span/2)
    mock_range_span: float = 5.0                     # Max high/low offset from base


@dataclass(frozen=True)
class SignalParams:
    """Signal derivation parameters."""
    # Risk tiering by absolute percent change
    low_risk_threshold: float = 2.0                  # Below this is low risk
    high_risk_threshold: float = 5.0                 # Above this is high risk

    # Level offsets as fractions of current price, scaled by risk multiplier
    entry_near_pct: float = 0.005
    entry_far_pct: float = 0.01
    target_pct: float = 0.08
    stop_loss_pct: float = 0.04

    # Risk multipliers
    low_risk_multiplier: float = 0.5
    medium_risk_multiplier: float = 1.0
    high_risk_multiplier: float = 1.5

    # Expiry window in whole days
    expiry_min_days: int = 2
    expiry_max_days: int = 4


@dataclass(frozen=True)
class PortfolioParams:
    """Portfolio simulation parameters."""
    initial_value: float = 12458.75
    initial_daily_profit: float = 245.60
    initial_open_trades: int = 8
    initial_win_rate: int = 73
    initial_risk_ratio: float = 1.4

    value_floor: float = 10000.0                     # Value never drops below this
    max_step: float = 100.0                          # Delta drawn from [-step/2, step/2)

    open_trades_min: int = 6
    open_trades_spread: int = 5                      # Redrawn in [min, min + spread)
    win_rate_min: int = 70
    win_rate_spread: int = 15
    risk_ratio_min: float = 1.2
    risk_ratio_spread: float = 0.8


@dataclass(frozen=True)
class DashboardParams:
    """Dashboard orchestration parameters."""
    watchlist: tuple[str, ...] = DEFAULT_WATCHLIST
    signal_cap: int = 8                              # Retained signal list size
    batch_size: int = 2                              # Symbols sampled per generation
    warm_up_batches: int = 3                         # Generations run at start-up
    fetch_workers: int = 4                           # Thread pool size for upstream calls


@dataclass(frozen=True)
class ScheduleParams:
    """Periodic refresh intervals."""
    signal_interval_seconds: float = 180.0
    portfolio_interval_seconds: float = 120.0
    health_interval_seconds: float = 300.0


@dataclass(frozen=True)
class ServerParams:
    """Delivery layer parameters."""
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"
    log_json: bool = False


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    market_data: MarketDataParams = field(default_factory=MarketDataParams)
    signals: SignalParams = field(default_factory=SignalParams)
    portfolio: PortfolioParams = field(default_factory=PortfolioParams)
    dashboard: DashboardParams = field(default_factory=DashboardParams)
    schedule: ScheduleParams = field(default_factory=ScheduleParams)
    server: ServerParams = field(default_factory=ServerParams)

    @property
    def is_production(self) -> bool:
        return self.server.environment == "production"


def get_default_config() -> AppConfig:
    """Get the default configuration instance."""
    return AppConfig(
        market_data=MarketDataParams(),
        signals=SignalParams(),
        portfolio=PortfolioParams(),
        dashboard=DashboardParams(),
        schedule=ScheduleParams(),
        server=ServerParams(),
    )
