"""
Dashboard orchestration: signal generation, retention and portfolio state.
"""
from .service import DashboardService

__all__ = ["DashboardService"]
