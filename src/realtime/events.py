"""Tagged event types exchanged at the client and upstream boundaries.

Inbound events are decoded from client frames; outbound events are produced by
the bridge (or by the channel adapter for protocol errors) and encoded back to
the client in emission order.
"""

from __future__ import annotations

from typing import Any, Union
from dataclasses import dataclass

from src.config.websocket import WS_DEFAULT_AUDIO_MIME_TYPE


@dataclass(frozen=True, slots=True)
class StartConversation:
    pass


@dataclass(frozen=True, slots=True)
class AudioChunk:
    """One captured audio segment; `final` closes the current turn."""

    audio: str
    mime_type: str = WS_DEFAULT_AUDIO_MIME_TYPE
    final: bool = True


@dataclass(frozen=True, slots=True)
class Interrupt:
    pass


@dataclass(frozen=True, slots=True)
class UnknownMessage:
    type: str


@dataclass(frozen=True, slots=True)
class ConnectionReady:
    pass


@dataclass(frozen=True, slots=True)
class AudioResponse:
    # Normalized to {"inline_data": {"mime_type": ..., "data": ...}}.
    part: dict[str, Any]


@dataclass(frozen=True, slots=True)
class ServerContent:
    content: Any


@dataclass(frozen=True, slots=True)
class ErrorEvent:
    message: str


InboundEvent = Union[StartConversation, AudioChunk, Interrupt, UnknownMessage]
OutboundEvent = Union[ConnectionReady, AudioResponse, ServerContent, ErrorEvent]

__all__ = [
    "AudioChunk",
    "AudioResponse",
    "ConnectionReady",
    "ErrorEvent",
    "InboundEvent",
    "Interrupt",
    "OutboundEvent",
    "ServerContent",
    "StartConversation",
    "UnknownMessage",
]
