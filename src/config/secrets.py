"""Secrets configuration."""

from __future__ import annotations

import os


def get_gemini_api_key() -> str:
    return (os.getenv("GEMINI_API_KEY") or "").strip()


__all__ = ["get_gemini_api_key"]
