"""Dispatch of decoded inbound events to the session bridge."""

from __future__ import annotations

import logging
from collections.abc import Callable, Awaitable

from src.realtime.bridge import LiveSessionBridge
from src.realtime.events import AudioChunk, Interrupt, InboundEvent, UnknownMessage, StartConversation

logger = logging.getLogger(__name__)

HandlerFn = Callable[[LiveSessionBridge, InboundEvent, str], Awaitable[None]]


async def _handle_start_conversation(bridge: LiveSessionBridge, event: InboundEvent, connection_id: str) -> None:
    logger.info("Starting conversation for connection %s", connection_id)


async def _handle_audio_chunk(bridge: LiveSessionBridge, event: InboundEvent, connection_id: str) -> None:
    if not isinstance(event, AudioChunk):
        return
    await bridge.forward_audio_chunk(event)


async def _handle_interrupt(bridge: LiveSessionBridge, event: InboundEvent, connection_id: str) -> None:
    await bridge.forward_interrupt()


async def _handle_unknown(bridge: LiveSessionBridge, event: InboundEvent, connection_id: str) -> None:
    if not isinstance(event, UnknownMessage):
        return
    logger.info("Unknown message type %r connection_id=%s", event.type, connection_id)


HANDLERS: dict[type, HandlerFn] = {
    StartConversation: _handle_start_conversation,
    AudioChunk: _handle_audio_chunk,
    Interrupt: _handle_interrupt,
    UnknownMessage: _handle_unknown,
}


async def dispatch_event(bridge: LiveSessionBridge, event: InboundEvent, *, connection_id: str) -> None:
    handler = HANDLERS[type(event)]
    await handler(bridge, event, connection_id)


__all__ = ["HANDLERS", "dispatch_event"]
