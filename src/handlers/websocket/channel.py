"""Client channel adapter: one per accepted client socket."""

from __future__ import annotations

import uuid
import asyncio
import logging
import contextlib

from fastapi import WebSocket

from src.errors import ProtocolError
from src.state import RuntimeDeps, ConnectionState
from src.realtime.state import BridgeState
from src.realtime.bridge import LiveSessionBridge
from src.realtime.events import ErrorEvent
from src.config.websocket import (
    WS_CLOSE_BUSY_CODE,
    WS_CLOSE_NORMAL_CODE,
    WS_ERROR_INVALID_MESSAGE,
    WS_ERROR_SERVER_AT_CAPACITY,
    WS_CLOSE_INTERNAL_ERROR_CODE,
    WS_CLOSE_UPSTREAM_FAILED_REASON,
    WS_CLOSE_UPSTREAM_CLOSED_REASON,
)

from .dispatch import dispatch_event
from .parser import parse_client_message
from .outbound import OutboundWriter
from .errors import reject_connection

logger = logging.getLogger(__name__)


class ClientChannelAdapter:
    """Decodes client frames, drives the bridge and writes its events back.

    Teardown (`on_close` / `on_error`) is idempotent and always closes the
    bridge and removes the connection from the registry.
    """

    def __init__(self, ws: WebSocket, runtime_deps: RuntimeDeps, *, connection_id: str | None = None) -> None:
        self._ws = ws
        self._deps = runtime_deps
        self.connection_id = connection_id or uuid.uuid4().hex
        self.state = ConnectionState.OPEN
        self._registered = False
        self._writer = OutboundWriter(
            ws,
            connection_id=self.connection_id,
            maxsize=runtime_deps.settings.websocket.outbound_queue_max,
        )
        self._bridge: LiveSessionBridge = runtime_deps.bridge_factory.new_bridge(
            self._writer,
            connection_id=self.connection_id,
        )
        self._watch_task: asyncio.Task | None = None

    @property
    def bridge(self) -> LiveSessionBridge:
        return self._bridge

    async def on_open(self) -> bool:
        """Register, accept and run the upstream handshake.

        Returns False when the connection was refused; the socket is closed by then.
        """
        if not await self._deps.connections.register(self.connection_id, self._bridge):
            logger.warning("rejecting connection: registry at capacity (%d)", self._deps.connections.max_connections)
            self.state = ConnectionState.CLOSED
            await self._bridge.close()
            await reject_connection(self._ws, message=WS_ERROR_SERVER_AT_CAPACITY, close_code=WS_CLOSE_BUSY_CODE)
            return False
        self._registered = True

        try:
            await self._ws.accept()
        except Exception:
            await self.on_close()
            raise

        self._writer.start()
        state = await self._bridge.connect()
        if state is BridgeState.READY:
            self._watch_task = asyncio.create_task(
                self._close_when_upstream_ends(),
                name=f"upstream-watch-{self.connection_id}",
            )
        elif state is BridgeState.FAILED:
            logger.info("connection %s stays open without an upstream session", self.connection_id)
        return True

    async def on_message(self, raw: str | bytes) -> None:
        if self.state is ConnectionState.CLOSED:
            return
        try:
            event = parse_client_message(raw)
        except ProtocolError as exc:
            logger.warning("invalid client message connection_id=%s: %s", self.connection_id, exc)
            await self._writer.emit(ErrorEvent(message=f"{WS_ERROR_INVALID_MESSAGE}: {exc}"))
            return
        await dispatch_event(self._bridge, event, connection_id=self.connection_id)

    async def on_close(self) -> None:
        if self.state is ConnectionState.CLOSED:
            return
        self.state = ConnectionState.CLOSED

        task, self._watch_task = self._watch_task, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task

        await self._bridge.close()
        if self._registered:
            self._registered = False
            await self._deps.connections.unregister(self.connection_id)
        await self._writer.stop()

    async def on_error(self, exc: BaseException | None = None) -> None:
        if exc is not None:
            logger.info("client socket error connection_id=%s: %s", self.connection_id, exc)
        await self.on_close()

    async def _close_when_upstream_ends(self) -> None:
        state = await self._bridge.wait_terminal()
        if self.state is ConnectionState.CLOSED:
            return
        await self._writer.drain()
        if state is BridgeState.FAILED:
            code, reason = WS_CLOSE_INTERNAL_ERROR_CODE, WS_CLOSE_UPSTREAM_FAILED_REASON
        else:
            code, reason = WS_CLOSE_NORMAL_CODE, WS_CLOSE_UPSTREAM_CLOSED_REASON
        logger.info("closing client after upstream %s connection_id=%s", state.value, self.connection_id)
        with contextlib.suppress(Exception):
            await self._ws.close(code=code, reason=reason)


__all__ = ["ClientChannelAdapter"]
