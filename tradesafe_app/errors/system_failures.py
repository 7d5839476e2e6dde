"""
System failure error classifications for unrecoverable errors.

These exceptions represent problems that mock data cannot paper over and
that typically require a fix to configuration or code.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class ConfigurationError(SystemFailureError):
    """Configuration failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []


class SignalDerivationError(SystemFailureError):
    """A quote could not be turned into a signal."""

    def __init__(self, message: str, symbol: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol


class DeliveryError(SystemFailureError):
    """Pushing an event to clients failed."""

    def __init__(self, message: str, delivery_method: Optional[str] = None,
                 event: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.delivery_method = delivery_method
        self.event = event
