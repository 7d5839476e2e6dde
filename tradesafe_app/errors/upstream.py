"""
Upstream market-data error classifications.

Every one of these is handled inside the market data client by substituting
mock data, so they describe why a result is synthetic rather than a failure
the caller has to handle.
"""

from typing import Optional, Dict, Any


class UpstreamError(Exception):
    """Base class for market-data API failures that degrade to mock data."""

    reason = "upstream_error"

    def __init__(self, message: str, symbol: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.symbol = symbol
        self.context = context or {}
        self.recoverable = True


class MissingCredentialsError(UpstreamError):
    """No API key is configured."""

    reason = "missing_credentials"


class UpstreamTimeoutError(UpstreamError):
    """The upstream call did not answer within the configured timeout."""

    reason = "timeout"

    def __init__(self, message: str, timeout_seconds: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timeout_seconds = timeout_seconds


class UpstreamUnavailableError(UpstreamError):
    """Network failure or non-success HTTP status."""

    reason = "unavailable"

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class NoDataError(UpstreamError):
    """The API answered but reported no data for the symbol."""

    reason = "no_data"


class MalformedResponseError(UpstreamError):
    """The response body could not be interpreted."""

    reason = "malformed_response"

    def __init__(self, message: str, raw_data: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
