"""Client message parsing/validation into inbound events."""

from __future__ import annotations

from typing import Any

import orjson

from src.errors import ProtocolError
from src.realtime.events import AudioChunk, Interrupt, InboundEvent, UnknownMessage, StartConversation
from src.config.websocket import (
    WS_KEY_TYPE,
    WS_KEY_AUDIO,
    WS_KEY_FINAL,
    WS_KEY_MIME_TYPE,
    WS_MSG_INTERRUPT,
    WS_MSG_AUDIO_CHUNK,
    WS_MSG_AUDIO_INPUT,
    WS_MSG_START_CONVERSATION,
    WS_DEFAULT_AUDIO_MIME_TYPE,
)


def _require_audio(msg: dict[str, Any]) -> str:
    audio = msg.get(WS_KEY_AUDIO)
    if not isinstance(audio, str):
        raise ProtocolError("'audio' must be a base64 string")
    return audio


def _parse_audio_chunk(msg: dict[str, Any]) -> AudioChunk:
    audio = _require_audio(msg)

    mime_type = msg.get(WS_KEY_MIME_TYPE)
    if mime_type is None:
        mime_type = ""
    elif not isinstance(mime_type, str):
        raise ProtocolError("'mimeType' must be a string")
    mime_type = mime_type.strip() or WS_DEFAULT_AUDIO_MIME_TYPE

    final = msg.get(WS_KEY_FINAL)
    if final is None:
        final = True
    elif not isinstance(final, bool):
        raise ProtocolError("'final' must be a boolean")

    return AudioChunk(audio=audio, mime_type=mime_type, final=final)


def parse_client_message(raw: str | bytes) -> InboundEvent:
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ProtocolError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ProtocolError("message must be a JSON object")

    msg_type = msg.get(WS_KEY_TYPE)
    if not isinstance(msg_type, str) or not msg_type.strip():
        raise ProtocolError("message missing non-empty 'type'")
    msg_type = msg_type.strip()

    if msg_type == WS_MSG_AUDIO_CHUNK:
        return _parse_audio_chunk(msg)
    if msg_type == WS_MSG_AUDIO_INPUT:
        # Legacy single-shot upload: one complete turn of raw PCM.
        return AudioChunk(audio=_require_audio(msg), mime_type=WS_DEFAULT_AUDIO_MIME_TYPE, final=True)
    if msg_type == WS_MSG_INTERRUPT:
        return Interrupt()
    if msg_type == WS_MSG_START_CONVERSATION:
        return StartConversation()
    return UnknownMessage(type=msg_type)


__all__ = ["parse_client_message"]
