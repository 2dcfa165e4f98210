"""Connection states of the reference client."""

from __future__ import annotations

from enum import Enum


class ClientConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    READY = "ready"
    STOPPED = "stopped"

    @property
    def is_open(self) -> bool:
        return self in (ClientConnectionState.CONNECTED, ClientConnectionState.READY)


__all__ = ["ClientConnectionState"]
