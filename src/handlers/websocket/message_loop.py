"""Inbound WebSocket message loop."""

from __future__ import annotations

import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from src.errors import ClientSocketError

from .channel import ClientChannelAdapter

logger = logging.getLogger(__name__)


async def _receive_frame(ws: WebSocket) -> str | bytes | None:
    """Return the next text or binary frame, or None once the client has gone."""
    try:
        message = await ws.receive()
    except RuntimeError as exc:
        # Starlette raises once the socket was closed from our side.
        if ws.application_state == WebSocketState.DISCONNECTED or ws.client_state == WebSocketState.DISCONNECTED:
            return None
        raise ClientSocketError(str(exc)) from exc

    if message.get("type") == "websocket.disconnect":
        return None
    text = message.get("text")
    if text is not None:
        return text
    data = message.get("bytes")
    if data is not None:
        return data
    return None


async def run_message_loop(ws: WebSocket, adapter: ClientChannelAdapter) -> None:
    """Feed client frames to the adapter strictly in arrival order."""
    while True:
        raw = await _receive_frame(ws)
        if raw is None:
            logger.debug("client disconnected connection_id=%s", adapter.connection_id)
            return
        await adapter.on_message(raw)


__all__ = ["run_message_loop"]
