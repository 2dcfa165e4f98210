"""Reference client configuration (env-resolved constants only)."""

from __future__ import annotations

import os


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    try:
        return float(raw) if raw else default
    except Exception:
        return default


CLIENT_SERVER_URL: str = (os.getenv("CLIENT_SERVER_URL") or "").strip() or "ws://localhost:3001/ws"
CLIENT_OPEN_TIMEOUT_S: float = max(0.1, _env_float("CLIENT_OPEN_TIMEOUT_S", 10.0))

# First retry after 3s, doubling up to the cap.
CLIENT_RECONNECT_INITIAL_S: float = max(0.0, _env_float("CLIENT_RECONNECT_INITIAL_S", 3.0))
CLIENT_RECONNECT_MAX_S: float = max(CLIENT_RECONNECT_INITIAL_S, _env_float("CLIENT_RECONNECT_MAX_S", 30.0))
CLIENT_RECONNECT_MULTIPLIER: float = max(1.0, _env_float("CLIENT_RECONNECT_MULTIPLIER", 2.0))

__all__ = [
    "CLIENT_OPEN_TIMEOUT_S",
    "CLIENT_RECONNECT_INITIAL_S",
    "CLIENT_RECONNECT_MAX_S",
    "CLIENT_RECONNECT_MULTIPLIER",
    "CLIENT_SERVER_URL",
]
