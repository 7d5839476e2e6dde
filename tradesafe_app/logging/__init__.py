"""
Logging configuration and utilities for the TradeSafe dashboard.
"""
from .config import configure_logging, get_logger, install_fault_handlers

__all__ = ["configure_logging", "get_logger", "install_fault_handlers"]
