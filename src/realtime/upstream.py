"""Message builders and frame classification for the Gemini Live protocol."""

from __future__ import annotations

from enum import Enum
from typing import Any
from dataclasses import dataclass

import orjson

from src.config.upstream import UPSTREAM_USER_ROLE, UPSTREAM_AUDIO_MIME_PREFIX

from .events import AudioChunk


class UpstreamFrameKind(str, Enum):
    SETUP_COMPLETE = "setupComplete"
    SERVER_CONTENT = "serverContent"
    TOOL_CALL_CANCELLATION = "toolCallCancellation"
    GO_AWAY = "goAway"
    UNKNOWN = "unknown"


# First matching key wins when a frame carries several.
_FRAME_KEYS: tuple[UpstreamFrameKind, ...] = (
    UpstreamFrameKind.SETUP_COMPLETE,
    UpstreamFrameKind.SERVER_CONTENT,
    UpstreamFrameKind.TOOL_CALL_CANCELLATION,
    UpstreamFrameKind.GO_AWAY,
)


@dataclass(frozen=True, slots=True)
class UpstreamFrame:
    kind: UpstreamFrameKind
    payload: Any = None
    keys: tuple[str, ...] = ()


def build_setup_message(
    *,
    model: str,
    voice: str,
    response_modalities: tuple[str, ...],
    system_instruction: str,
) -> dict[str, Any]:
    model_path = model if model.startswith("models/") else f"models/{model}"
    return {
        "setup": {
            "model": model_path,
            "generation_config": {
                "response_modalities": list(response_modalities),
                "speech_config": {
                    "voice_config": {
                        "prebuilt_voice_config": {
                            "voice_name": voice,
                        }
                    }
                },
            },
            "system_instruction": {
                "parts": [{"text": system_instruction}],
            },
        }
    }


def _client_turn(parts: list[dict[str, Any]], *, turn_complete: bool) -> dict[str, Any]:
    return {
        "clientContent": {
            "turns": [{"role": UPSTREAM_USER_ROLE, "parts": parts}],
            "turn_complete": bool(turn_complete),
        }
    }


def build_audio_turn(chunk: AudioChunk) -> dict[str, Any]:
    part = {"inline_data": {"mime_type": chunk.mime_type, "data": chunk.audio}}
    return _client_turn([part], turn_complete=chunk.final)


def build_interrupt_turn() -> dict[str, Any]:
    # Empty content with turn_complete unset is how the live API signals barge-in.
    return _client_turn([{"text": ""}], turn_complete=False)


def encode_upstream_message(message: dict[str, Any]) -> str:
    return orjson.dumps(message).decode("utf-8")


def decode_upstream_frame(raw: str | bytes) -> UpstreamFrame:
    """Parse one upstream frame.

    Raises:
        ValueError: if the frame is not a JSON object.
    """
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError("upstream frame must be a JSON object")

    for kind in _FRAME_KEYS:
        if kind.value in data:
            return UpstreamFrame(kind=kind, payload=data[kind.value])
    return UpstreamFrame(kind=UpstreamFrameKind.UNKNOWN, keys=tuple(data.keys()))


def _iter_parts(content: Any) -> list[Any]:
    if not isinstance(content, dict):
        return []
    parts = content.get("parts")
    if isinstance(parts, list):
        return parts
    model_turn = content.get("modelTurn") or content.get("model_turn")
    if isinstance(model_turn, dict) and isinstance(model_turn.get("parts"), list):
        return model_turn["parts"]
    return []


def find_audio_part(content: Any) -> dict[str, Any] | None:
    """Return the first inline audio part of a serverContent payload, normalized."""
    for part in _iter_parts(content):
        if not isinstance(part, dict):
            continue
        inline = part.get("inline_data")
        if inline is None:
            inline = part.get("inlineData")
        if not isinstance(inline, dict):
            continue
        mime_type = inline.get("mime_type")
        if mime_type is None:
            mime_type = inline.get("mimeType")
        if isinstance(mime_type, str) and mime_type.startswith(UPSTREAM_AUDIO_MIME_PREFIX):
            return {"inline_data": {"mime_type": mime_type, "data": inline.get("data")}}
    return None


__all__ = [
    "UpstreamFrame",
    "UpstreamFrameKind",
    "build_audio_turn",
    "build_interrupt_turn",
    "build_setup_message",
    "decode_upstream_frame",
    "encode_upstream_message",
    "find_audio_part",
]
