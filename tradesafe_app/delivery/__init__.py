"""
Event delivery to dashboard clients and periodic refresh scheduling.
"""
from .base import (
    EVENT_NEW_SIGNALS,
    EVENT_PORTFOLIO,
    EVENT_PORTFOLIO_UPDATE,
    EVENT_SIGNALS,
    BaseEventDelivery,
    DeliveryResult,
    DeliveryStatus,
)
from .broadcaster import EventBroadcaster
from .scheduler import RefreshScheduler, register_dashboard_jobs
from .stdout_delivery import StdoutEventDelivery

__all__ = [
    "EVENT_NEW_SIGNALS",
    "EVENT_PORTFOLIO",
    "EVENT_PORTFOLIO_UPDATE",
    "EVENT_SIGNALS",
    "BaseEventDelivery",
    "DeliveryResult",
    "DeliveryStatus",
    "EventBroadcaster",
    "RefreshScheduler",
    "StdoutEventDelivery",
    "register_dashboard_jobs",
]
