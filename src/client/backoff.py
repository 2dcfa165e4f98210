"""Exponential reconnect backoff bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass

from src.config.client import (
    CLIENT_RECONNECT_MAX_S,
    CLIENT_RECONNECT_INITIAL_S,
    CLIENT_RECONNECT_MULTIPLIER,
)


@dataclass(slots=True)
class ReconnectBackoff:
    initial_s: float = CLIENT_RECONNECT_INITIAL_S
    max_s: float = CLIENT_RECONNECT_MAX_S
    multiplier: float = CLIENT_RECONNECT_MULTIPLIER
    attempts: int = 0

    def next_delay(self) -> float:
        """Delay before the next attempt; grows with every call until `reset()`."""
        delay = min(self.max_s, self.initial_s * (self.multiplier ** self.attempts))
        self.attempts += 1
        return delay

    def reset(self) -> None:
        self.attempts = 0


__all__ = ["ReconnectBackoff"]
