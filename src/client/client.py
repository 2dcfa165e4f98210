"""WebSocket client for the voice relay protocol with automatic reconnect."""

from __future__ import annotations

import base64
import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, Awaitable

import orjson
import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from src.config.client import CLIENT_SERVER_URL, CLIENT_OPEN_TIMEOUT_S
from src.config.websocket import (
    WS_KEY_DATA,
    WS_KEY_TYPE,
    WS_KEY_AUDIO,
    WS_KEY_FINAL,
    WS_MSG_ERROR,
    WS_KEY_MESSAGE,
    WS_KEY_MIME_TYPE,
    WS_MSG_INTERRUPT,
    WS_MSG_AUDIO_CHUNK,
    WS_MSG_AUDIO_RESPONSE,
    WS_MSG_SERVER_CONTENT,
    WS_MSG_CONNECTION_READY,
    WS_MSG_START_CONVERSATION,
    WS_DEFAULT_AUDIO_MIME_TYPE,
)

from .state import ClientConnectionState
from .backoff import ReconnectBackoff
from .listener import ClientListener

logger = logging.getLogger(__name__)

ClientConnector = Callable[[str], Awaitable[Any]]


class VoiceRelayClient:
    """Holds one relay connection open and reconnects when it drops.

    Every reconnect decision reads `state` at the moment it is made. `run()`
    is a single loop, so at most one reconnect is ever pending.
    """

    def __init__(
        self,
        url: str = CLIENT_SERVER_URL,
        listener: ClientListener | None = None,
        *,
        backoff: ReconnectBackoff | None = None,
        connector: ClientConnector | None = None,
    ) -> None:
        self._url = url
        self._listener = listener or ClientListener()
        self._backoff = backoff or ReconnectBackoff()
        self._connector = connector or self._connect
        self._state = ClientConnectionState.DISCONNECTED
        self._ws: Any = None
        self._stopped = asyncio.Event()
        self._running = False

    @property
    def state(self) -> ClientConnectionState:
        return self._state

    @property
    def backoff(self) -> ReconnectBackoff:
        return self._backoff

    @staticmethod
    async def _connect(url: str) -> Any:
        return await websockets.connect(url, open_timeout=CLIENT_OPEN_TIMEOUT_S)

    async def _set_state(self, state: ClientConnectionState) -> None:
        if state is self._state:
            return
        # STOPPED is final.
        if self._state is ClientConnectionState.STOPPED:
            return
        self._state = state
        logger.debug("client state -> %s", state.value)
        await self._listener.on_connection_change(state)

    async def run(self) -> None:
        if self._running:
            raise RuntimeError("VoiceRelayClient.run() is already running")
        self._running = True
        try:
            while self._state is not ClientConnectionState.STOPPED:
                await self._connect_once()
                if self._state is ClientConnectionState.STOPPED:
                    break
                await self._set_state(ClientConnectionState.DISCONNECTED)
                delay = self._backoff.next_delay()
                logger.info("reconnecting in %.1fs (attempt %d)", delay, self._backoff.attempts)
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(self._stopped.wait(), timeout=delay)
        finally:
            self._running = False

    async def _connect_once(self) -> None:
        await self._set_state(ClientConnectionState.CONNECTING)
        try:
            ws = await self._connector(self._url)
        except (OSError, TimeoutError, WebSocketException) as exc:
            logger.warning("connect to %s failed: %s", self._url, exc)
            return

        if self._state is ClientConnectionState.STOPPED:
            with contextlib.suppress(Exception):
                await ws.close()
            return

        self._ws = ws
        await self._set_state(ClientConnectionState.CONNECTED)
        try:
            async for raw in ws:
                await self._handle_message(raw)
        except ConnectionClosed as exc:
            logger.info("connection lost: %s", exc)
        finally:
            self._ws = None
            with contextlib.suppress(Exception):
                await ws.close()

    async def _handle_message(self, raw: str | bytes) -> None:
        try:
            msg = orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.warning("ignoring non-JSON server message")
            return
        if not isinstance(msg, dict):
            logger.warning("ignoring non-object server message")
            return

        msg_type = msg.get(WS_KEY_TYPE)
        if msg_type == WS_MSG_CONNECTION_READY:
            self._backoff.reset()
            await self._set_state(ClientConnectionState.READY)
            await self._listener.on_connection_ready()
        elif msg_type == WS_MSG_AUDIO_RESPONSE:
            await self._listener.on_audio_response(msg.get(WS_KEY_DATA))
        elif msg_type == WS_MSG_SERVER_CONTENT:
            await self._listener.on_server_content(msg.get(WS_KEY_DATA))
        elif msg_type == WS_MSG_ERROR:
            message = msg.get(WS_KEY_MESSAGE)
            logger.warning("server error: %s", message)
            await self._listener.on_error(str(message))
        else:
            logger.debug("unhandled server message type=%r", msg_type)

    async def _send(self, message: dict[str, Any]) -> bool:
        ws = self._ws
        if ws is None or not self._state.is_open:
            logger.warning("not connected; dropping %s", message.get(WS_KEY_TYPE))
            return False
        try:
            await ws.send(orjson.dumps(message).decode("utf-8"))
        except ConnectionClosed:
            logger.warning("connection closed; dropping %s", message.get(WS_KEY_TYPE))
            return False
        return True

    async def send_audio_chunk(
        self,
        audio: bytes,
        *,
        final: bool = True,
        mime_type: str = WS_DEFAULT_AUDIO_MIME_TYPE,
    ) -> bool:
        return await self._send({
            WS_KEY_TYPE: WS_MSG_AUDIO_CHUNK,
            WS_KEY_AUDIO: base64.b64encode(audio).decode("ascii"),
            WS_KEY_MIME_TYPE: mime_type,
            WS_KEY_FINAL: bool(final),
        })

    async def start_conversation(self) -> bool:
        return await self._send({WS_KEY_TYPE: WS_MSG_START_CONVERSATION})

    async def interrupt(self) -> bool:
        return await self._send({WS_KEY_TYPE: WS_MSG_INTERRUPT})

    async def stop(self) -> None:
        await self._set_state(ClientConnectionState.STOPPED)
        self._stopped.set()
        ws, self._ws = self._ws, None
        if ws is not None:
            with contextlib.suppress(Exception):
                await ws.close()


__all__ = ["ClientConnector", "VoiceRelayClient"]
