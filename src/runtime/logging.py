"""Logging initialization."""

from __future__ import annotations

import logging

from src.config.logging import LOG_LEVEL, LOG_FORMAT, SHOW_TRANSPORT_LOGS


def configure_logging() -> None:
    # websockets and uvicorn are chatty per frame/request. Keep them tame unless explicitly enabled.
    if not SHOW_TRANSPORT_LOGS:
        logging.getLogger("websockets").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
