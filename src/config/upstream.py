"""Upstream Gemini Live session configuration (env-resolved constants only)."""

from __future__ import annotations

import os

GEMINI_WS_URL: str = (os.getenv("GEMINI_WS_URL") or "").strip() or (
    "wss://generativelanguage.googleapis.com/ws/"
    "google.ai.generativelanguage.v1beta.GenerativeService.BidiGenerateContent"
)

GEMINI_MODEL: str = (os.getenv("GEMINI_MODEL") or "").strip() or "gemini-2.0-flash-live-001"

# Prebuilt voices: Puck, Charon, Kore, Fenrir, Aoede.
GEMINI_VOICE: str = (os.getenv("GEMINI_VOICE") or "").strip() or "Aoede"

GEMINI_RESPONSE_MODALITIES: tuple[str, ...] = ("AUDIO",)

_OPEN_TIMEOUT_RAW = (os.getenv("UPSTREAM_OPEN_TIMEOUT_S") or "").strip()
try:
    UPSTREAM_OPEN_TIMEOUT_S: float = float(_OPEN_TIMEOUT_RAW) if _OPEN_TIMEOUT_RAW else 10.0
except Exception:
    UPSTREAM_OPEN_TIMEOUT_S = 10.0
if UPSTREAM_OPEN_TIMEOUT_S <= 0:
    UPSTREAM_OPEN_TIMEOUT_S = 10.0

# Time allowed between sending setup and receiving setupComplete.
_HANDSHAKE_TIMEOUT_RAW = (os.getenv("UPSTREAM_HANDSHAKE_TIMEOUT_S") or "").strip()
try:
    UPSTREAM_HANDSHAKE_TIMEOUT_S: float = float(_HANDSHAKE_TIMEOUT_RAW) if _HANDSHAKE_TIMEOUT_RAW else 10.0
except Exception:
    UPSTREAM_HANDSHAKE_TIMEOUT_S = 10.0
if UPSTREAM_HANDSHAKE_TIMEOUT_S <= 0:
    UPSTREAM_HANDSHAKE_TIMEOUT_S = 10.0

UPSTREAM_AUDIO_MIME_PREFIX = "audio/"
UPSTREAM_USER_ROLE = "user"

__all__ = [
    "GEMINI_MODEL",
    "GEMINI_RESPONSE_MODALITIES",
    "GEMINI_VOICE",
    "GEMINI_WS_URL",
    "UPSTREAM_AUDIO_MIME_PREFIX",
    "UPSTREAM_HANDSHAKE_TIMEOUT_S",
    "UPSTREAM_OPEN_TIMEOUT_S",
    "UPSTREAM_USER_ROLE",
]
