"""WebSocket broadcast delivery mechanism."""

import asyncio
from typing import Any

from fastapi import WebSocket

from .base import BaseEventDelivery, DeliveryResult, DeliveryStatus, build_message


class WebSocketDelivery(BaseEventDelivery):
    """Tracks connected dashboard clients and broadcasts events to them."""

    def __init__(self, name: str = "websocket"):
        super().__init__(name)
        self.active_connections: list[WebSocket] = []
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self.active_connections.append(websocket)

        self.logger.info(
            "Client connected",
            client=self._client_id(websocket),
            connections=len(self.active_connections)
        )

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            if websocket in self.active_connections:
                self.active_connections.remove(websocket)

        self.logger.info(
            "Client disconnected",
            client=self._client_id(websocket),
            connections=len(self.active_connections)
        )

    async def send(self, websocket: WebSocket, event: str, data: Any) -> None:
        """Send a single event to one client."""
        await websocket.send_json(build_message(event, data))

    async def deliver(self, event: str, data: Any) -> DeliveryResult:
        """Broadcast to every connected client, dropping dead connections."""
        message = build_message(event, data)

        async with self._lock:
            recipients = list(self.active_connections)
            disconnected = []

            for connection in recipients:
                try:
                    await connection.send_json(message)
                except Exception as e:
                    self.logger.warning(
                        "Dropping client after failed send",
                        client=self._client_id(connection),
                        event=event,
                        error=str(e)
                    )
                    disconnected.append(connection)

            for conn in disconnected:
                if conn in self.active_connections:
                    self.active_connections.remove(conn)

        failed = len(disconnected)
        if failed and failed == len(recipients):
            status = DeliveryStatus.FAILED
        elif failed:
            status = DeliveryStatus.PARTIAL
        else:
            status = DeliveryStatus.SUCCESS

        return DeliveryResult(
            status=status,
            message=f"Broadcast {event} to {len(recipients) - failed} clients",
            recipients=len(recipients),
            failed_recipients=failed
        )

    def health_check(self) -> bool:
        return True

    @staticmethod
    def _client_id(websocket: WebSocket) -> str:
        client = getattr(websocket, "client", None)
        if client is None:
            return "unknown"
        return f"{client.host}:{client.port}"
