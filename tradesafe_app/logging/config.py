"""
Centralized logging configuration for the TradeSafe dashboard.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the system should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import os
import sys
import threading
from typing import Any, Optional, TextIO

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None,
    stream: Optional[TextIO] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
        stream: Output stream for log lines, stdout by default
    """
    log_level = getattr(logging, level.upper())
    stream = stream or sys.stdout

    # uvicorn logs through the stdlib root logger (log_config=None)
    logging.basicConfig(
        level=log_level,
        stream=stream,
        format="%(message)s",
        force=True
    )
    if log_level > logging.DEBUG:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    # Build processor chain
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    # Add final formatting processor
    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_market_data_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound to the market data subsystem."""
    return get_logger(name).bind(subsystem="market_data")


def log_mock_fallback(
    logger: FilteringBoundLogger,
    symbol: str,
    resource: str,
    reason: str,
    error: Optional[str] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a substitution of mock data for an upstream resource.

    Args:
        logger: Structlog logger instance
        symbol: Symbol the request was made for
        resource: Upstream resource name (quote, profile, news)
        reason: Short machine-readable reason
        error: Error text, if any
        context: Additional context data
    """
    bound_logger = logger.bind(
        symbol=symbol,
        resource=resource,
        reason=reason,
    )

    if error:
        bound_logger = bound_logger.bind(error=error)

    if context:
        bound_logger = bound_logger.bind(context=context)

    # Missing credentials is the expected demo configuration
    if reason == "missing_credentials":
        bound_logger.debug("Using mock market data")
    else:
        bound_logger.warning("Upstream fetch failed, using mock market data")


def install_fault_handlers(exit_code: int = 1) -> None:
    """
    Log uncaught exceptions at critical level and terminate the process.

    Covers the main thread and worker threads. KeyboardInterrupt keeps the
    default behaviour.
    """
    logger = get_logger("tradesafe_app.fault")

    def _handle(exc_type, exc_value, exc_tb) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return
        logger.critical(
            "Uncaught exception, terminating",
            exc_info=(exc_type, exc_value, exc_tb)
        )
        sys.exit(exit_code)

    def _handle_thread(args: threading.ExceptHookArgs) -> None:
        if args.exc_type is SystemExit:
            return
        logger.critical(
            "Uncaught exception in thread, terminating",
            thread=getattr(args.thread, "name", None),
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback)
        )
        # Ends the whole process, not only this thread
        logging.shutdown()
        os._exit(exit_code)

    sys.excepthook = _handle
    threading.excepthook = _handle_thread
