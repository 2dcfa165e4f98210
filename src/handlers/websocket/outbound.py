"""Ordered outbound event delivery to the client socket."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from fastapi import WebSocket

from src.realtime.sink import EventSink
from src.realtime.events import OutboundEvent

from .errors import safe_send_text
from .encoder import encode_outbound_event

logger = logging.getLogger(__name__)


class OutboundWriter(EventSink):
    """Single writer task draining a FIFO of outbound events.

    Every event for a connection, whether produced by the bridge's upstream
    reader or by the inbound message loop, goes through this queue, so the
    client sees events in emission order.
    """

    def __init__(self, ws: WebSocket, *, connection_id: str, maxsize: int = 0) -> None:
        self._ws = ws
        self._connection_id = connection_id
        self._queue: asyncio.Queue[OutboundEvent | None] = asyncio.Queue(maxsize=max(0, int(maxsize)))
        self._task: asyncio.Task | None = None
        self._closed = False
        self._sent: int = 0

    @property
    def sent(self) -> int:
        return self._sent

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name=f"client-writer-{self._connection_id}")
        return self._task

    async def emit(self, event: OutboundEvent) -> None:
        if self._closed:
            logger.debug("dropping %s after writer closed connection_id=%s", type(event).__name__, self._connection_id)
            return
        await self._queue.put(event)

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            if event is None:
                return
            if not await safe_send_text(self._ws, encode_outbound_event(event)):
                self._closed = True
                logger.info("client socket write failed connection_id=%s", self._connection_id)
                return
            self._sent += 1

    async def drain(self) -> None:
        """Deliver everything queued so far, then stop accepting events."""
        if self._closed:
            return
        self._closed = True
        task = self._task
        if task is None or task.done():
            return
        await self._queue.put(None)
        with contextlib.suppress(Exception):
            await task

    async def stop(self) -> None:
        self._closed = True
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await task


__all__ = ["OutboundWriter"]
