"""
Clock and timestamp helpers.

Services receive a ``Clock`` (a zero-argument callable returning an aware
UTC datetime) instead of calling ``datetime.now`` directly.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: current wall-clock time in UTC."""
    return datetime.now(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    """
    Format a timestamp for the wire.

    Args:
        ts: Timestamp to format; naive values are assumed to be UTC

    Returns:
        ISO8601 formatted string with millisecond precision
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def time_elapsed_seconds(start_time: datetime, end_time: Optional[datetime] = None) -> float:
    """
    Calculate elapsed time in seconds between two timestamps.

    Args:
        start_time: Start timestamp
        end_time: End timestamp, defaults to now

    Returns:
        Elapsed time in seconds
    """
    if end_time is None:
        end_time = utc_now()

    return (end_time - start_time).total_seconds()
