"""Logging configuration (env-resolved constants only)."""

from __future__ import annotations

import os

LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "").strip().upper() or "INFO"
LOG_FORMAT: str = (os.getenv("LOG_FORMAT") or "").strip() or "%(asctime)s %(levelname)s %(name)s: %(message)s"

# websockets logs every frame at DEBUG and uvicorn logs every request; opt in explicitly.
SHOW_TRANSPORT_LOGS: bool = (os.getenv("SHOW_TRANSPORT_LOGS") or "").strip().lower() in {"1", "true", "yes"}

__all__ = ["LOG_FORMAT", "LOG_LEVEL", "SHOW_TRANSPORT_LOGS"]
