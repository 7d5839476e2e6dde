"""Fan-out of dashboard events to every configured delivery mechanism."""

from typing import Any, Iterable, Optional

import structlog

from .base import BaseEventDelivery, DeliveryResult

logger = structlog.get_logger(__name__)


class EventBroadcaster:
    """Publishes each event to all registered deliveries."""

    def __init__(self, deliveries: Optional[Iterable[BaseEventDelivery]] = None):
        self.deliveries: list[BaseEventDelivery] = list(deliveries or [])

    def add(self, delivery: BaseEventDelivery) -> None:
        self.deliveries.append(delivery)

    async def publish(self, event: str, data: Any) -> list[DeliveryResult]:
        """
        Deliver an event everywhere.

        A failing delivery is logged and does not stop the others.
        """
        results = []
        for delivery in self.deliveries:
            result = await delivery.deliver_timed(event, data)
            results.append(result)

        logger.debug(
            "Event published",
            event=event,
            deliveries=[d.name for d in self.deliveries],
            statuses=[r.status.value for r in results]
        )
        return results

    def get_stats(self) -> list[dict[str, Any]]:
        return [delivery.get_stats() for delivery in self.deliveries]
