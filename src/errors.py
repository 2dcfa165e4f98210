"""Shared error types for the live voice relay."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ProtocolError(Exception):
    """Raised when an inbound client frame is not a well-formed message."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class UpstreamConnectError(Exception):
    """Raised when the upstream live session cannot complete its handshake."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class UpstreamRuntimeError(Exception):
    """Raised when an established upstream session fails."""

    message: str

    def __str__(self) -> str:
        return self.message


class ClientSocketError(Exception):
    """Raised when the client-facing socket can no longer be written to."""


__all__ = ["ClientSocketError", "ProtocolError", "UpstreamConnectError", "UpstreamRuntimeError"]
