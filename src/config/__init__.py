"""Configuration module exports (env-resolved constants only)."""

from .limits import (
    MAX_CONCURRENT_CONNECTIONS,
)
from .upstream import (
    GEMINI_MODEL,
    GEMINI_VOICE,
)

__all__ = [
    "GEMINI_MODEL",
    "GEMINI_VOICE",
    "MAX_CONCURRENT_CONNECTIONS",
]
