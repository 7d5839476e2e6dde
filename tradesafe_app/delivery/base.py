"""Base classes for dashboard event delivery mechanisms."""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import structlog

from ..errors import DeliveryError
from ..utils.time import format_timestamp, utc_now

# Event names understood by the dashboard frontend
EVENT_SIGNALS = "signals"
EVENT_PORTFOLIO = "portfolio"
EVENT_NEW_SIGNALS = "new-signals"
EVENT_PORTFOLIO_UPDATE = "portfolio-update"


class DeliveryStatus(Enum):
    """Event delivery status."""
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class DeliveryResult:
    """Result of an event delivery attempt."""
    status: DeliveryStatus
    message: Optional[str] = None
    recipients: int = 0
    failed_recipients: int = 0
    delivery_time_ms: Optional[int] = None
    error: Optional[Exception] = None


def build_message(event: str, data: Any) -> dict[str, Any]:
    """Envelope shared by every delivery mechanism."""
    return {
        "event": event,
        "timestamp": format_timestamp(utc_now()),
        "data": data,
    }


class BaseEventDelivery(ABC):
    """Base class for event delivery mechanisms."""

    def __init__(self, name: str):
        self.name = name
        self.logger = structlog.get_logger(f"tradesafe_app.delivery.{name}")
        self._delivery_count = 0
        self._error_count = 0

    @abstractmethod
    async def deliver(self, event: str, data: Any) -> DeliveryResult:
        """
        Deliver one event to every recipient of this mechanism.

        Args:
            event: Event name
            data: JSON-serialisable payload

        Returns:
            Delivery result for the event
        """

    @abstractmethod
    def health_check(self) -> bool:
        """Check if delivery mechanism is healthy."""

    async def deliver_timed(self, event: str, data: Any) -> DeliveryResult:
        """Deliver an event, recording timing and statistics."""
        start_time = time.monotonic()
        try:
            result = await self.deliver(event, data)
        except Exception as e:
            error = DeliveryError(str(e), delivery_method=self.name, event=event)
            error.__cause__ = e
            self.logger.error(
                "Event delivery raised",
                delivery_name=self.name,
                event=event,
                error=str(e),
                error_type=type(e).__name__
            )
            result = DeliveryResult(
                status=DeliveryStatus.FAILED,
                message=f"Unexpected error: {e}",
                error=error
            )

        result.delivery_time_ms = int((time.monotonic() - start_time) * 1000)

        if result.status is DeliveryStatus.FAILED:
            self._error_count += 1
        else:
            self._delivery_count += 1

        return result

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        return {
            "name": self.name,
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
            "success_rate": (
                self._delivery_count / (self._delivery_count + self._error_count)
                if (self._delivery_count + self._error_count) > 0 else 0.0
            )
        }
