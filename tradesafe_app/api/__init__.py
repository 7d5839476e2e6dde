"""
HTTP and WebSocket surface of the dashboard.
"""
from .app import create_app

__all__ = ["create_app"]
