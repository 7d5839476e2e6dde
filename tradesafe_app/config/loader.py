"""Configuration loader with 3-tier parameter precedence."""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import (
    AppConfig,
    DashboardParams,
    MarketDataParams,
    PortfolioParams,
    ScheduleParams,
    ServerParams,
    SignalParams,
    get_default_config,
)
from .validation import ConfigValidator

SECTION_TYPES = {
    "market_data": MarketDataParams,
    "signals": SignalParams,
    "portfolio": PortfolioParams,
    "dashboard": DashboardParams,
    "schedule": ScheduleParams,
    "server": ServerParams,
}

# Environment variable -> (section, field, converter)
ENV_OVERRIDES = {
    "FINNHUB_API_KEY": ("market_data", "api_key", str),
    "PORT": ("server", "port", int),
    "TRADESAFE_ENV": ("server", "environment", str),
    "CORS_ORIGIN": ("server", "cors_origins", lambda v: [o.strip() for o in v.split(",") if o.strip()]),
    "LOG_LEVEL": ("server", "log_level", str),
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: AppConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from settings.yaml, empty if the file is absent."""
        settings_file = self.config_dir / "settings.yaml"

        if not settings_file.exists():
            return {}

        with open(settings_file) as f:
            file_config = yaml.safe_load(f)

        return file_config or {}

    def load_env_config(self, environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
        """Collect overrides from environment variables."""
        environ = os.environ if environ is None else environ
        config: dict[str, Any] = {}

        for var, (section, field_name, convert) in ENV_OVERRIDES.items():
            raw = environ.get(var)
            if raw is None or raw == "":
                continue
            try:
                value = convert(raw)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {var}: {raw!r}") from e
            config.setdefault(section, {})[field_name] = value

        return config

    def merge_config(
        self,
        overrides: Optional[dict[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides and environment variables (highest priority)
        2. settings.yaml
        3. Global defaults (lowest priority)
        """
        # Start with global defaults
        config = self._dataclass_to_dict(self.defaults)

        # Apply file overrides
        config = self._deep_merge(config, self.load_file_config())

        # Apply environment overrides
        config = self._deep_merge(config, self.load_env_config(environ))

        # Apply explicit overrides
        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load(
        self,
        overrides: Optional[dict[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> AppConfig:
        """Merge, validate and build the typed configuration."""
        config = self.merge_config(overrides, environ)

        errors = ConfigValidator.validate_config(config)
        if errors:
            messages = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            raise ConfigurationError(
                "Configuration validation failed: " + "; ".join(messages),
                errors=errors,
            )

        return self._build_config(config)

    def _build_config(self, config: dict[str, Any]) -> AppConfig:
        sections = {}
        for section, section_type in SECTION_TYPES.items():
            values = config.get(section, {})
            known = {f.name for f in fields(section_type)}
            kwargs = {k: v for k, v in values.items() if k in known}
            for key in ("watchlist", "cors_origins"):
                if key in kwargs:
                    kwargs[key] = tuple(kwargs[key])
            sections[section] = section_type(**kwargs)
        return AppConfig(**sections)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                elif isinstance(value, tuple):
                    result[field_name] = list(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_config(
    config_dir: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Load the application configuration."""
    return ConfigLoader.create(config_dir).load(overrides, environ)
