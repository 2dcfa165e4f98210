"""HTTP server configuration (env-resolved constants only)."""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "Revolt Motors Voice Assistant API"
APP_VERSION = "1.0.0"
APP_FEATURES: tuple[str, ...] = ("real-time-audio", "interruptions", "multi-language", "chunked-audio")

HOST: str = (os.getenv("HOST") or "").strip() or "0.0.0.0"  # noqa: S104

_PORT_RAW = (os.getenv("PORT") or "").strip()
try:
    PORT: int = int(_PORT_RAW) if _PORT_RAW else 3001
except Exception:
    PORT = 3001

# Static frontend bundle; mounted only when the directory exists.
_PUBLIC_DIR_RAW = (os.getenv("PUBLIC_DIR") or "").strip()
PUBLIC_DIR: Path = Path(_PUBLIC_DIR_RAW).expanduser() if _PUBLIC_DIR_RAW else Path("public")

__all__ = ["APP_FEATURES", "APP_NAME", "APP_VERSION", "HOST", "PORT", "PUBLIC_DIR"]
