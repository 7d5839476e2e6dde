"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_market_data_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate market data parameters."""
        errors = []

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if "base_url" in params:
            value = params["base_url"]
            if not isinstance(value, str) or not value.startswith(("http://", "https://")):
                errors.append(ValidationError(
                    field="base_url",
                    message="Must be an http(s) URL",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_signal_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate signal derivation parameters."""
        errors = []

        low = params.get("low_risk_threshold")
        high = params.get("high_risk_threshold")

        for name, value in (("low_risk_threshold", low), ("high_risk_threshold", high)):
            if value is not None and (not _is_number(value) or value < 0):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a non-negative number",
                    value=value
                ))

        if _is_number(low) and _is_number(high) and low > high:
            errors.append(ValidationError(
                field="low_risk_threshold",
                message="Must not exceed high_risk_threshold",
                value=low
            ))

        min_days = params.get("expiry_min_days")
        max_days = params.get("expiry_max_days")

        if min_days is not None and (not isinstance(min_days, int) or min_days <= 0):
            errors.append(ValidationError(
                field="expiry_min_days",
                message="Must be a positive integer",
                value=min_days
            ))

        if isinstance(min_days, int) and isinstance(max_days, int) and max_days < min_days:
            errors.append(ValidationError(
                field="expiry_max_days",
                message="Must be at least expiry_min_days",
                value=max_days
            ))

        return errors

    @staticmethod
    def validate_portfolio_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate portfolio simulation parameters."""
        errors = []

        if "value_floor" in params:
            value = params["value_floor"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="value_floor",
                    message="Must be a positive number",
                    value=value
                ))

        if "max_step" in params:
            value = params["max_step"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="max_step",
                    message="Must be a non-negative number",
                    value=value
                ))

        for name in ("open_trades_spread", "win_rate_spread"):
            if name in params:
                value = params[name]
                if not isinstance(value, int) or value < 1:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive integer",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_dashboard_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate dashboard orchestration parameters."""
        errors = []

        watchlist = params.get("watchlist")
        if watchlist is not None and (not watchlist or not all(isinstance(s, str) for s in watchlist)):
            errors.append(ValidationError(
                field="watchlist",
                message="Must be a non-empty list of symbols",
                value=watchlist
            ))

        if "signal_cap" in params:
            value = params["signal_cap"]
            if not isinstance(value, int) or value < 1:
                errors.append(ValidationError(
                    field="signal_cap",
                    message="Must be a positive integer",
                    value=value
                ))

        if "batch_size" in params:
            value = params["batch_size"]
            if not isinstance(value, int) or value < 1:
                errors.append(ValidationError(
                    field="batch_size",
                    message="Must be a positive integer",
                    value=value
                ))
            elif watchlist and value > len(watchlist):
                errors.append(ValidationError(
                    field="batch_size",
                    message="Must not exceed the watchlist size",
                    value=value
                ))

        if "fetch_workers" in params:
            value = params["fetch_workers"]
            if not isinstance(value, int) or value < 1:
                errors.append(ValidationError(
                    field="fetch_workers",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_schedule_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate refresh intervals."""
        errors = []

        for name in ("signal_interval_seconds", "portfolio_interval_seconds", "health_interval_seconds"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "market_data" in config:
            errors.extend(ConfigValidator.validate_market_data_params(config["market_data"]))

        if "signals" in config:
            errors.extend(ConfigValidator.validate_signal_params(config["signals"]))

        if "portfolio" in config:
            errors.extend(ConfigValidator.validate_portfolio_params(config["portfolio"]))

        if "dashboard" in config:
            errors.extend(ConfigValidator.validate_dashboard_params(config["dashboard"]))

        if "schedule" in config:
            errors.extend(ConfigValidator.validate_schedule_params(config["schedule"]))

        return errors
