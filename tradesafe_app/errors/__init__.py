"""
Error classification for the signal dashboard.

Upstream errors are recoverable: the market data client converts them into
mock data before they reach a caller. System failures are not recoverable
and indicate a configuration or programming problem.
"""

from .upstream import (
    UpstreamError,
    MissingCredentialsError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
    NoDataError,
    MalformedResponseError,
)
from .system_failures import (
    SystemFailureError,
    ConfigurationError,
    SignalDerivationError,
    DeliveryError,
)

__all__ = [
    # Upstream Errors
    "UpstreamError",
    "MissingCredentialsError",
    "UpstreamTimeoutError",
    "UpstreamUnavailableError",
    "NoDataError",
    "MalformedResponseError",
    # System Failures
    "SystemFailureError",
    "ConfigurationError",
    "SignalDerivationError",
    "DeliveryError",
]
