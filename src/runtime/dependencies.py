"""Runtime dependency construction (bridge factory + connection registry)."""

from __future__ import annotations

import logging

from src.state import RuntimeDeps
from src.state.settings import AppSettings
from src.realtime.factory import BridgeFactory
from src.realtime.bridge import UpstreamConnector
from src.handlers.connections import ConnectionRegistry

from .settings import load_settings

logger = logging.getLogger(__name__)


async def build_runtime_deps(
    settings: AppSettings | None = None,
    *,
    connector: UpstreamConnector | None = None,
) -> RuntimeDeps:
    settings = settings or load_settings()

    if not settings.upstream.api_key:
        logger.warning("GEMINI_API_KEY is not set; every upstream handshake will fail")

    bridge_factory = BridgeFactory(settings=settings.upstream, connector=connector)
    connections = ConnectionRegistry(max_connections=settings.limits.max_concurrent_connections)

    return RuntimeDeps(
        connections=connections,
        bridge_factory=bridge_factory,
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
