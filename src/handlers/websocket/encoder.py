"""Outbound event encoding for the client protocol."""

from __future__ import annotations

from typing import Any

import orjson

from src.realtime.events import ErrorEvent, AudioResponse, OutboundEvent, ServerContent, ConnectionReady
from src.config.websocket import (
    WS_KEY_DATA,
    WS_KEY_TYPE,
    WS_MSG_ERROR,
    WS_KEY_MESSAGE,
    WS_MSG_AUDIO_RESPONSE,
    WS_MSG_SERVER_CONTENT,
    WS_MSG_CONNECTION_READY,
)


def build_outbound_message(event: OutboundEvent) -> dict[str, Any]:
    if isinstance(event, ConnectionReady):
        return {WS_KEY_TYPE: WS_MSG_CONNECTION_READY}
    if isinstance(event, AudioResponse):
        return {WS_KEY_TYPE: WS_MSG_AUDIO_RESPONSE, WS_KEY_DATA: event.part}
    if isinstance(event, ServerContent):
        return {WS_KEY_TYPE: WS_MSG_SERVER_CONTENT, WS_KEY_DATA: event.content}
    if isinstance(event, ErrorEvent):
        return {WS_KEY_TYPE: WS_MSG_ERROR, WS_KEY_MESSAGE: event.message}
    raise TypeError(f"unsupported outbound event: {type(event).__name__}")


def encode_outbound_event(event: OutboundEvent) -> str:
    return orjson.dumps(build_outbound_message(event)).decode("utf-8")


__all__ = ["build_outbound_message", "encode_outbound_event"]
