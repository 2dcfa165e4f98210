"""Process-wide registry of live connections and their bridges."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.realtime.bridge import LiveSessionBridge

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Maps connection identifiers to their bridge.

    Inserts and deletes from independent connections are serialized by a lock;
    `size()` reads the table directly, which is a consistent snapshot on the
    event loop thread.
    """

    def __init__(self, *, max_connections: int) -> None:
        self._max = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        self._bridges: dict[str, LiveSessionBridge] = {}

    @property
    def max_connections(self) -> int:
        return self._max

    async def register(self, connection_id: str, bridge: LiveSessionBridge) -> bool:
        """Admit a connection. Returns False when the registry is at capacity."""
        async with self._lock:
            if connection_id in self._bridges:
                raise ValueError(f"connection {connection_id!r} is already registered")
            if len(self._bridges) >= self._max:
                return False
            self._bridges[connection_id] = bridge
            return True

    async def unregister(self, connection_id: str) -> bool:
        async with self._lock:
            return self._bridges.pop(connection_id, None) is not None

    def get(self, connection_id: str) -> LiveSessionBridge | None:
        return self._bridges.get(connection_id)

    def size(self) -> int:
        return len(self._bridges)

    async def close_all(self) -> None:
        async with self._lock:
            bridges = list(self._bridges.values())
        for bridge in bridges:
            with contextlib.suppress(Exception):
                await bridge.close()
        if bridges:
            logger.info("closed %d upstream sessions on shutdown", len(bridges))


__all__ = ["ConnectionRegistry"]
