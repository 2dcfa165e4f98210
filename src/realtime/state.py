"""Upstream session bridge states."""

from __future__ import annotations

from enum import Enum


class BridgeState(str, Enum):
    CONNECTING = "connecting"
    READY = "ready"
    CLOSED = "closed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (BridgeState.CLOSED, BridgeState.FAILED)


__all__ = ["BridgeState"]
