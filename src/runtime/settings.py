"""Load runtime settings.

Configuration values are resolved from the environment in `src/config/*` and
exposed here as structured dataclasses for the rest of the server.
"""

from __future__ import annotations

from src.config.limits import MAX_CONCURRENT_CONNECTIONS
from src.config.persona import SYSTEM_INSTRUCTION_TEXT
from src.config.secrets import get_gemini_api_key
from src.config.server import HOST, PORT, PUBLIC_DIR
from src.config.websocket import WS_ENDPOINT_PATH, WS_OUTBOUND_QUEUE_MAX
from src.state.settings import (
    AppSettings,
    LimitsSettings,
    ServerSettings,
    UpstreamSettings,
    WebSocketSettings,
)
from src.config.upstream import (
    GEMINI_MODEL,
    GEMINI_VOICE,
    GEMINI_WS_URL,
    UPSTREAM_OPEN_TIMEOUT_S,
    GEMINI_RESPONSE_MODALITIES,
    UPSTREAM_HANDSHAKE_TIMEOUT_S,
)


def load_settings() -> AppSettings:
    return AppSettings(
        limits=LimitsSettings(
            max_concurrent_connections=MAX_CONCURRENT_CONNECTIONS,
        ),
        websocket=WebSocketSettings(
            endpoint_path=WS_ENDPOINT_PATH,
            outbound_queue_max=WS_OUTBOUND_QUEUE_MAX,
        ),
        upstream=UpstreamSettings(
            url=GEMINI_WS_URL,
            api_key=get_gemini_api_key(),
            model=GEMINI_MODEL,
            voice=GEMINI_VOICE,
            response_modalities=GEMINI_RESPONSE_MODALITIES,
            system_instruction=SYSTEM_INSTRUCTION_TEXT,
            open_timeout_s=UPSTREAM_OPEN_TIMEOUT_S,
            handshake_timeout_s=UPSTREAM_HANDSHAKE_TIMEOUT_S,
        ),
        server=ServerSettings(
            host=HOST,
            port=PORT,
            public_dir=PUBLIC_DIR,
        ),
    )


__all__ = ["load_settings"]
