"""
Command line entry point.

``serve`` runs the HTTP/WebSocket API under uvicorn; ``headless`` runs the
same refresh schedule without a server and writes events to stdout.
"""

import argparse
import asyncio
import random
import sys
from pathlib import Path
from typing import Any, Optional

import structlog
import uvicorn

from .api.app import create_app
from .config.defaults import AppConfig
from .config.loader import load_config
from .dashboard.service import DashboardService
from .delivery.base import EVENT_PORTFOLIO, EVENT_SIGNALS
from .delivery.broadcaster import EventBroadcaster
from .delivery.scheduler import RefreshScheduler, register_dashboard_jobs
from .delivery.stdout_delivery import StdoutEventDelivery
from .errors import ConfigurationError
from .logging.config import configure_logging, install_fault_handlers

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tradesafe",
        description="TradeSafe trading signal dashboard backend"
    )
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory containing settings.yaml")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the random source (mock data, expert picks)")
    parser.add_argument("--log-level", default=None,
                        help="Override the configured log level")

    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the HTTP/WebSocket API (default)")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    headless = subparsers.add_parser("headless", help="Run the refresh schedule, print events")
    headless.add_argument("--pretty", action="store_true", help="Human-readable output")
    headless.add_argument("--duration", type=float, default=None,
                          help="Stop after this many seconds (default: run forever)")

    return parser


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    server: dict[str, Any] = {}
    if getattr(args, "host", None) is not None:
        server["host"] = args.host
    if getattr(args, "port", None) is not None:
        server["port"] = args.port
    if args.log_level:
        server["log_level"] = args.log_level
    return {"server": server} if server else {}


async def run_headless(
    service: DashboardService,
    config: AppConfig,
    pretty: bool = False,
    duration: Optional[float] = None,
) -> None:
    """Publish the initial state, then run the refresh jobs against stdout."""
    broadcaster = EventBroadcaster([StdoutEventDelivery(format="pretty" if pretty else "json")])
    scheduler = RefreshScheduler()
    register_dashboard_jobs(scheduler, service, broadcaster, config.schedule)

    await asyncio.to_thread(service.warm_up)
    await broadcaster.publish(EVENT_SIGNALS, [s.to_dict() for s in service.list_active_signals()])
    await broadcaster.publish(EVENT_PORTFOLIO, service.current_portfolio().to_dict())

    scheduler.start()
    try:
        if duration is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(duration)
    finally:
        await scheduler.stop()


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config_dir, _cli_overrides(args))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    # Headless mode owns stdout for events
    configure_logging(
        level=config.server.log_level,
        format_json=config.server.log_json,
        stream=sys.stderr if args.command == "headless" else None
    )
    install_fault_handlers()

    rng = random.Random(args.seed) if args.seed is not None else None
    service = DashboardService.from_config(config, rng=rng)

    logger.info(
        "TradeSafe starting",
        command=args.command or "serve",
        environment=config.server.environment,
        finnhub="Configured" if service.client.is_configured else "Not Configured - Using Mock Data",
        signal_interval_seconds=config.schedule.signal_interval_seconds,
        portfolio_interval_seconds=config.schedule.portfolio_interval_seconds
    )

    if args.command == "headless":
        try:
            asyncio.run(run_headless(service, config, pretty=args.pretty, duration=args.duration))
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
        return 0

    uvicorn.run(
        create_app(config, service),
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )
    return 0
