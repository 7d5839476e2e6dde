"""Standard output event delivery mechanism."""

import json
import sys
from typing import Any, Optional, TextIO

from .base import BaseEventDelivery, DeliveryResult, DeliveryStatus, build_message


class StdoutEventDelivery(BaseEventDelivery):
    """Writes events as JSON lines, or one-line summaries in pretty mode."""

    def __init__(self, name: str = "stdout", format: str = "json", stream: Optional[TextIO] = None):
        super().__init__(name)
        self.format = format
        self.stream = stream or sys.stdout

    async def deliver(self, event: str, data: Any) -> DeliveryResult:
        try:
            print(self._format_event(event, data), file=self.stream, flush=True)
        except (OSError, TypeError, ValueError) as e:
            self.logger.error(
                "Failed to write event to stdout",
                delivery_name=self.name,
                event=event,
                error=str(e)
            )
            return DeliveryResult(
                status=DeliveryStatus.FAILED,
                message=f"Stdout error: {e}",
                error=e
            )

        return DeliveryResult(
            status=DeliveryStatus.SUCCESS,
            message="Printed to stdout",
            recipients=1
        )

    def _format_event(self, event: str, data: Any) -> str:
        if self.format == "pretty":
            if isinstance(data, list):
                lines = [f"[{event}] {len(data)} item(s)"]
                lines.extend(
                    f"  {item.get('asset')} {item.get('trend')} risk={item.get('risk')} "
                    f"entry={item.get('entry')} target={item.get('target')}"
                    for item in data if isinstance(item, dict)
                )
                return "\n".join(lines)
            return f"[{event}] {json.dumps(data)}"

        return json.dumps(build_message(event, data))

    def health_check(self) -> bool:
        """Check if the output stream is available."""
        try:
            return self.stream.writable()
        except (OSError, ValueError):
            return False
