#!/usr/bin/env python3
"""Configuration validation script."""

import argparse
import os
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tradesafe_app.config.loader import ConfigLoader
from tradesafe_app.config.validation import ConfigValidator
from tradesafe_app.errors import ConfigurationError


def main():
    """Main validation function."""
    parser = argparse.ArgumentParser(description="Validate TradeSafe settings")
    parser.add_argument("--config-dir", type=Path, default=None)
    args = parser.parse_args()

    print("🔍 Validating TradeSafe configuration...")

    loader = ConfigLoader.create(args.config_dir)
    print(f"\n📁 Settings directory: {loader.config_dir}")

    # File values on their own, then with the environment applied
    file_config = loader.merge_config(environ={})
    errors = ConfigValidator.validate_config(file_config)
    if errors:
        print(f"❌ Found {len(errors)} validation errors in settings.yaml:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        sys.exit(1)
    print("✅ settings.yaml is valid")

    try:
        config = loader.load(environ=os.environ)
    except ConfigurationError as e:
        print(f"❌ Environment overrides rejected: {e}")
        sys.exit(1)

    print("✅ Environment overrides are valid")
    print(f"\n📋 Effective settings:")
    print(f"  • environment : {config.server.environment}")
    print(f"  • listen      : {config.server.host}:{config.server.port}")
    print(f"  • market data : {'live' if config.market_data.api_key else 'mock (no FINNHUB_API_KEY)'}")
    print(f"  • watchlist   : {', '.join(config.dashboard.watchlist)}")
    print(f"  • signal cap  : {config.dashboard.signal_cap}")
    print(f"  • schedule    : signals {config.schedule.signal_interval_seconds}s, "
          f"portfolio {config.schedule.portfolio_interval_seconds}s")

    print(f"\n🎉 All configuration validation passed!")
    sys.exit(0)


if __name__ == "__main__":
    main()
