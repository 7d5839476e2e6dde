"""Unit tests for configuration management."""

import pytest
from pathlib import Path

from tradesafe_app.config.defaults import get_default_config
from tradesafe_app.config.loader import ConfigLoader, load_config
from tradesafe_app.config.validation import ConfigValidator
from tradesafe_app.errors import ConfigurationError


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration can be created."""
        config = get_default_config()
        assert config is not None
        assert config.dashboard.signal_cap == 8
        assert config.signals.low_risk_threshold == 2.0
        assert config.signals.high_risk_threshold == 5.0
        assert config.portfolio.value_floor == 10000.0
        assert config.market_data.timeout_seconds == 10.0
        assert config.market_data.api_key == ""

    def test_production_flag(self) -> None:
        assert get_default_config().is_production is False


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        """Test that ConfigLoader can be created."""
        loader = ConfigLoader.create()
        assert loader is not None
        assert isinstance(loader.config_dir, Path)

    def test_bundled_settings_load(self) -> None:
        """Test the repository settings.yaml loads and validates."""
        config = ConfigLoader.create().load(environ={})
        assert config.dashboard.watchlist[0] == "AAPL"
        assert config.schedule.signal_interval_seconds == 180

    def test_missing_settings_file_uses_defaults(self, tmp_path) -> None:
        loader = ConfigLoader.create(tmp_path)
        assert loader.load_file_config() == {}
        assert loader.load(environ={}) == get_default_config()

    def test_file_overrides_defaults(self, tmp_path) -> None:
        (tmp_path / "settings.yaml").write_text(
            "dashboard:\n  signal_cap: 10\n  watchlist: [AAPL, MSFT]\nsignals:\n  high_risk_threshold: 3.0\n"
        )

        config = load_config(tmp_path, environ={})

        assert config.dashboard.signal_cap == 10
        assert config.dashboard.watchlist == ("AAPL", "MSFT")
        assert config.signals.high_risk_threshold == 3.0
        # Other defaults should remain
        assert config.signals.low_risk_threshold == 2.0

    def test_environment_overrides_file(self, tmp_path) -> None:
        (tmp_path / "settings.yaml").write_text("server:\n  port: 8080\n")
        environ = {
            "FINNHUB_API_KEY": "abc123",
            "PORT": "9000",
            "TRADESAFE_ENV": "production",
            "CORS_ORIGIN": "https://a.example, https://b.example",
        }

        config = load_config(tmp_path, environ=environ)

        assert config.market_data.api_key == "abc123"
        assert config.server.port == 9000
        assert config.is_production
        assert config.server.cors_origins == ("https://a.example", "https://b.example")

    def test_empty_api_key_is_valid(self, tmp_path) -> None:
        config = load_config(tmp_path, environ={"FINNHUB_API_KEY": ""})
        assert config.market_data.api_key == ""

    def test_explicit_overrides_win(self, tmp_path) -> None:
        config = load_config(tmp_path, overrides={"server": {"port": 1234}}, environ={"PORT": "9000"})
        assert config.server.port == 1234

    def test_invalid_env_value(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError):
            load_config(tmp_path, environ={"PORT": "not-a-port"})

    def test_invalid_file_value_rejected(self, tmp_path) -> None:
        (tmp_path / "settings.yaml").write_text("dashboard:\n  signal_cap: 0\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path, environ={})

        assert exc_info.value.errors[0].field == "signal_cap"

    def test_unknown_keys_ignored(self, tmp_path) -> None:
        (tmp_path / "settings.yaml").write_text("dashboard:\n  colour: blue\n")
        assert load_config(tmp_path, environ={}).dashboard.signal_cap == 8


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_defaults_are_valid(self) -> None:
        config = ConfigLoader.create()._dataclass_to_dict(get_default_config())
        assert ConfigValidator.validate_config(config) == []

    def test_thresholds_must_be_ordered(self) -> None:
        errors = ConfigValidator.validate_signal_params(
            {"low_risk_threshold": 6.0, "high_risk_threshold": 5.0}
        )
        assert len(errors) == 1
        assert errors[0].field == "low_risk_threshold"

    def test_negative_threshold(self) -> None:
        errors = ConfigValidator.validate_signal_params({"low_risk_threshold": -1})
        assert errors[0].message == "Must be a non-negative number"

    def test_expiry_window(self) -> None:
        errors = ConfigValidator.validate_signal_params({"expiry_min_days": 3, "expiry_max_days": 1})
        assert [e.field for e in errors] == ["expiry_max_days"]

        errors = ConfigValidator.validate_signal_params({"expiry_min_days": 0})
        assert [e.field for e in errors] == ["expiry_min_days"]

    def test_batch_size_within_watchlist(self) -> None:
        errors = ConfigValidator.validate_dashboard_params({"watchlist": ["AAPL"], "batch_size": 2})
        assert len(errors) == 1
        assert errors[0].field == "batch_size"

    def test_empty_watchlist(self) -> None:
        errors = ConfigValidator.validate_dashboard_params({"watchlist": []})
        assert errors[0].field == "watchlist"

    def test_invalid_floor(self) -> None:
        errors = ConfigValidator.validate_portfolio_params({"value_floor": 0})
        assert errors[0].field == "value_floor"

    def test_invalid_spread(self) -> None:
        errors = ConfigValidator.validate_portfolio_params({"open_trades_spread": 0})
        assert errors[0].field == "open_trades_spread"

    def test_invalid_interval(self) -> None:
        errors = ConfigValidator.validate_schedule_params({"signal_interval_seconds": 0})
        assert errors[0].field == "signal_interval_seconds"

    def test_invalid_timeout_and_url(self) -> None:
        errors = ConfigValidator.validate_market_data_params(
            {"timeout_seconds": -1, "base_url": "ftp://nope"}
        )
        assert {e.field for e in errors} == {"timeout_seconds", "base_url"}
