"""Observer interface the bridge emits outbound events through."""

from __future__ import annotations

from .events import OutboundEvent


class EventSink:
    """Receives outbound events in emission order.

    The base implementation discards everything, so a bridge built without a
    consumer still has a valid sink.
    """

    async def emit(self, event: OutboundEvent) -> None:
        return None


__all__ = ["EventSink"]
