"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    endpoint_path: str
    outbound_queue_max: int


@dataclass(frozen=True, slots=True)
class UpstreamSettings:
    url: str
    api_key: str
    model: str
    voice: str
    response_modalities: tuple[str, ...]
    system_instruction: str
    open_timeout_s: float
    handshake_timeout_s: float


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int
    public_dir: Path


@dataclass(frozen=True, slots=True)
class AppSettings:
    limits: LimitsSettings
    websocket: WebSocketSettings
    upstream: UpstreamSettings
    server: ServerSettings


__all__ = [
    "AppSettings",
    "LimitsSettings",
    "ServerSettings",
    "UpstreamSettings",
    "WebSocketSettings",
]
