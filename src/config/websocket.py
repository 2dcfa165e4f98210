"""WebSocket protocol configuration and constants."""

from __future__ import annotations

import os

WS_ENDPOINT_PATH: str = (os.getenv("WS_ENDPOINT_PATH") or "").strip() or "/ws"
# Browser clients connect to the bare host as well.
WS_ROOT_ENDPOINT_PATH = "/"

# Message keys
WS_KEY_TYPE = "type"
WS_KEY_AUDIO = "audio"
WS_KEY_MIME_TYPE = "mimeType"
WS_KEY_FINAL = "final"
WS_KEY_DATA = "data"
WS_KEY_MESSAGE = "message"

# Inbound message types
WS_MSG_START_CONVERSATION = "start_conversation"
WS_MSG_AUDIO_CHUNK = "audio_chunk"
WS_MSG_AUDIO_INPUT = "audio_input"
WS_MSG_INTERRUPT = "interrupt"

# Outbound message types
WS_MSG_CONNECTION_READY = "connection_ready"
WS_MSG_AUDIO_RESPONSE = "audio_response"
WS_MSG_SERVER_CONTENT = "server_content"
WS_MSG_ERROR = "error"

WS_DEFAULT_AUDIO_MIME_TYPE = "audio/pcm"

# Close codes
WS_CLOSE_NORMAL_CODE = 1000
WS_CLOSE_INTERNAL_ERROR_CODE = 1011
WS_CLOSE_BUSY_CODE = 4002

WS_CLOSE_UPSTREAM_CLOSED_REASON = "upstream session closed"
WS_CLOSE_UPSTREAM_FAILED_REASON = "upstream session failed"

# Outbound events buffered per connection before the writer applies backpressure.
_OUTBOUND_QUEUE_MAX_RAW = (os.getenv("WS_OUTBOUND_QUEUE_MAX") or "").strip()
try:
    WS_OUTBOUND_QUEUE_MAX: int = int(_OUTBOUND_QUEUE_MAX_RAW) if _OUTBOUND_QUEUE_MAX_RAW else 0
except Exception:
    WS_OUTBOUND_QUEUE_MAX = 0
WS_OUTBOUND_QUEUE_MAX = max(0, int(WS_OUTBOUND_QUEUE_MAX))

# Client-visible error messages
WS_ERROR_INVALID_MESSAGE = "Invalid message format"
WS_ERROR_UPSTREAM_INIT_FAILED = "Failed to initialize AI connection"
WS_ERROR_UPSTREAM_FAILED = "Connection to AI service failed"
WS_ERROR_SERVER_AT_CAPACITY = "Server cannot accept new connections. Please try again later."

__all__ = [
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_INTERNAL_ERROR_CODE",
    "WS_CLOSE_NORMAL_CODE",
    "WS_CLOSE_UPSTREAM_CLOSED_REASON",
    "WS_CLOSE_UPSTREAM_FAILED_REASON",
    "WS_DEFAULT_AUDIO_MIME_TYPE",
    "WS_ENDPOINT_PATH",
    "WS_ERROR_INVALID_MESSAGE",
    "WS_ERROR_SERVER_AT_CAPACITY",
    "WS_ERROR_UPSTREAM_FAILED",
    "WS_ERROR_UPSTREAM_INIT_FAILED",
    "WS_KEY_AUDIO",
    "WS_KEY_DATA",
    "WS_KEY_FINAL",
    "WS_KEY_MESSAGE",
    "WS_KEY_MIME_TYPE",
    "WS_KEY_TYPE",
    "WS_MSG_AUDIO_CHUNK",
    "WS_MSG_AUDIO_INPUT",
    "WS_MSG_AUDIO_RESPONSE",
    "WS_MSG_CONNECTION_READY",
    "WS_MSG_ERROR",
    "WS_MSG_INTERRUPT",
    "WS_MSG_SERVER_CONTENT",
    "WS_MSG_START_CONVERSATION",
    "WS_OUTBOUND_QUEUE_MAX",
    "WS_ROOT_ENDPOINT_PATH",
]
