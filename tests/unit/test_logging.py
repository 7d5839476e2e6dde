"""Tests for structured logging helpers."""

import structlog
from structlog.testing import capture_logs

from tradesafe_app.logging.config import get_market_data_logger, log_mock_fallback


class TestMockFallbackLogging:
    """Test log levels and context of mock substitutions."""

    def test_missing_credentials_is_debug(self):
        with capture_logs() as logs:
            log_mock_fallback(structlog.get_logger("test"), "AAPL", "quote", "missing_credentials")

        assert logs == [{
            "event": "Using mock market data",
            "log_level": "debug",
            "symbol": "AAPL",
            "resource": "quote",
            "reason": "missing_credentials",
        }]

    def test_upstream_failure_is_warning(self):
        with capture_logs() as logs:
            log_mock_fallback(
                structlog.get_logger("test"), "MSFT", "profile", "timeout",
                error="timed out", context={"timeout_seconds": 10.0}
            )

        entry = logs[0]
        assert entry["log_level"] == "warning"
        assert entry["error"] == "timed out"
        assert entry["context"] == {"timeout_seconds": 10.0}

    def test_market_data_logger_binds_subsystem(self):
        with capture_logs() as logs:
            get_market_data_logger("test").info("hello")

        assert logs[0]["subsystem"] == "market_data"
