"""Observer hooks for the reference client."""

from __future__ import annotations

from typing import Any

from .state import ClientConnectionState


class ClientListener:
    """Override the hooks you care about; every default does nothing."""

    async def on_connection_ready(self) -> None:
        return None

    async def on_audio_response(self, part: dict[str, Any]) -> None:
        return None

    async def on_server_content(self, content: Any) -> None:
        return None

    async def on_error(self, message: str) -> None:
        return None

    async def on_connection_change(self, state: ClientConnectionState) -> None:
        return None


__all__ = ["ClientListener"]
