"""Factory for per-connection live session bridges."""

from __future__ import annotations

from typing import Any

import websockets

from src.state.settings import UpstreamSettings

from .sink import EventSink
from .bridge import LiveSessionBridge, UpstreamConnector


class BridgeFactory:
    def __init__(self, *, settings: UpstreamSettings, connector: UpstreamConnector | None = None) -> None:
        self._settings = settings
        self._connector = connector or self._connect

    @property
    def settings(self) -> UpstreamSettings:
        return self._settings

    async def _connect(self, url: str) -> Any:
        return await websockets.connect(url, open_timeout=self._settings.open_timeout_s)

    def new_bridge(self, sink: EventSink, *, connection_id: str) -> LiveSessionBridge:
        return LiveSessionBridge(
            settings=self._settings,
            connector=self._connector,
            sink=sink,
            connection_id=connection_id,
        )


__all__ = ["BridgeFactory"]
