"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import logging

from fastapi import WebSocket

from src.state import RuntimeDeps
from src.errors import ClientSocketError

from .channel import ClientChannelAdapter
from .message_loop import run_message_loop

logger = logging.getLogger(__name__)


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    adapter = ClientChannelAdapter(ws, runtime_deps)
    try:
        if not await adapter.on_open():
            return

        logger.info(
            "WebSocket connection accepted connection_id=%s. Active: %s",
            adapter.connection_id,
            runtime_deps.connections.size(),
        )
        await run_message_loop(ws, adapter)
    except ClientSocketError as exc:
        await adapter.on_error(exc)
    finally:
        await adapter.on_close()
        logger.info(
            "WebSocket connection closed connection_id=%s. Active: %s",
            adapter.connection_id,
            runtime_deps.connections.size(),
        )


__all__ = ["handle_websocket_connection"]
