"""Per-connection bridge between client audio events and a Gemini Live session."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, Awaitable

from websockets.exceptions import ConnectionClosedError

from src.state.settings import UpstreamSettings
from src.errors import UpstreamConnectError, UpstreamRuntimeError
from src.config.websocket import WS_ERROR_UPSTREAM_FAILED, WS_ERROR_UPSTREAM_INIT_FAILED

from .sink import EventSink
from .state import BridgeState
from .events import AudioChunk, ErrorEvent, AudioResponse, ServerContent, ConnectionReady
from .upstream import (
    UpstreamFrame,
    UpstreamFrameKind,
    build_audio_turn,
    find_audio_part,
    build_setup_message,
    build_interrupt_turn,
    decode_upstream_frame,
    encode_upstream_message,
)

logger = logging.getLogger(__name__)

UpstreamConnector = Callable[[str], Awaitable[Any]]


class LiveSessionBridge:
    """Owns one upstream live session for one client connection.

    States move Connecting -> Ready -> Closed/Failed. Forward calls are only
    honored while Ready; in any other state they are dropped and return False.
    Outbound events go to the sink in the order they are produced.
    """

    def __init__(
        self,
        *,
        settings: UpstreamSettings,
        connector: UpstreamConnector,
        sink: EventSink | None = None,
        connection_id: str = "unknown",
    ) -> None:
        self._settings = settings
        self._connector = connector
        self._sink = sink or EventSink()
        self._connection_id = connection_id

        self._state = BridgeState.CONNECTING
        self._ws: Any = None
        self._reader_task: asyncio.Task | None = None
        self._connect_started = False

        self._handshake_done = asyncio.Event()
        self._terminated = asyncio.Event()

        # Turn bookkeeping (logging only).
        self._turn_chunks: int = 0
        self._turns_completed: int = 0
        self._interrupts_sent: int = 0

    @property
    def state(self) -> BridgeState:
        return self._state

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def turns_completed(self) -> int:
        return self._turns_completed

    async def wait_terminal(self) -> BridgeState:
        await self._terminated.wait()
        return self._state

    async def connect(self) -> BridgeState:
        """Open the upstream socket, send setup and wait for setupComplete.

        Returns the state once the handshake has resolved: Ready on success,
        Failed on handshake failure, Closed if `close()` ran meanwhile.
        """
        if self._connect_started or self._state is not BridgeState.CONNECTING:
            return self._state
        self._connect_started = True

        try:
            await self._open_upstream()
        except UpstreamConnectError as exc:
            await self._fail_handshake(str(exc))
            return self._state

        if self._state is not BridgeState.CONNECTING:
            return self._state

        self._reader_task = asyncio.create_task(
            self._reader_loop(),
            name=f"upstream-reader-{self._connection_id}",
        )

        try:
            await asyncio.wait_for(self._handshake_done.wait(), timeout=self._settings.handshake_timeout_s)
        except TimeoutError:
            await self._fail_handshake(
                f"setupComplete not received within {self._settings.handshake_timeout_s:.1f}s"
            )
        return self._state

    async def _open_upstream(self) -> None:
        if not self._settings.api_key:
            raise UpstreamConnectError("GEMINI_API_KEY is not configured")

        url = f"{self._settings.url}?key={self._settings.api_key}"
        try:
            ws = await asyncio.wait_for(self._connector(url), timeout=self._settings.open_timeout_s)
        except TimeoutError as exc:
            raise UpstreamConnectError(
                f"upstream connect timed out after {self._settings.open_timeout_s:.1f}s"
            ) from exc
        except Exception as exc:
            raise UpstreamConnectError(f"upstream connect failed: {self._redact(exc)}") from exc

        if self._state is not BridgeState.CONNECTING:
            # close() ran while the socket was opening.
            with contextlib.suppress(Exception):
                await ws.close()
            return

        self._ws = ws
        setup = build_setup_message(
            model=self._settings.model,
            voice=self._settings.voice,
            response_modalities=self._settings.response_modalities,
            system_instruction=self._settings.system_instruction,
        )
        try:
            await ws.send(encode_upstream_message(setup))
        except Exception as exc:
            raise UpstreamConnectError(f"failed to send setup: {self._redact(exc)}") from exc
        logger.info(
            "upstream setup sent connection_id=%s model=%s voice=%s",
            self._connection_id,
            self._settings.model,
            self._settings.voice,
        )

    async def forward_audio_chunk(self, chunk: AudioChunk) -> bool:
        if self._state is not BridgeState.READY:
            logger.warning(
                "dropping audio chunk connection_id=%s state=%s", self._connection_id, self._state.value
            )
            return False

        if not await self._send(build_audio_turn(chunk)):
            return False

        self._turn_chunks += 1
        if chunk.final:
            self._turns_completed += 1
            logger.debug(
                "turn %d complete connection_id=%s chunks=%d",
                self._turns_completed,
                self._connection_id,
                self._turn_chunks,
            )
            self._turn_chunks = 0
        return True

    async def forward_interrupt(self) -> bool:
        if self._state is not BridgeState.READY:
            logger.warning(
                "dropping interrupt connection_id=%s state=%s", self._connection_id, self._state.value
            )
            return False

        if not await self._send(build_interrupt_turn()):
            return False
        self._interrupts_sent += 1
        logger.info("interrupt sent connection_id=%s count=%d", self._connection_id, self._interrupts_sent)
        return True

    async def close(self) -> None:
        """Close the upstream session. Safe to call in any state, any number of times."""
        if not self._state.is_terminal:
            self._enter_terminal(BridgeState.CLOSED)
            logger.info("upstream session closed connection_id=%s", self._connection_id)
        await self._release()

    async def _send(self, message: dict[str, Any]) -> bool:
        ws = self._ws
        if ws is None:
            return False
        try:
            await ws.send(encode_upstream_message(message))
        except Exception as exc:
            await self._fail_runtime(UpstreamRuntimeError(f"upstream send failed: {self._redact(exc)}"))
            return False
        return True

    async def _reader_loop(self) -> None:
        ws = self._ws
        try:
            async for raw in ws:
                await self._handle_frame(raw)
        except asyncio.CancelledError:
            raise
        except ConnectionClosedError as exc:
            await self._on_upstream_lost(f"upstream closed abnormally: {exc}")
            return
        except Exception as exc:
            await self._on_upstream_lost(f"upstream reader failed: {exc}")
            return

        # Iteration ends cleanly only on a normal close.
        if self._state is BridgeState.CONNECTING:
            await self._fail_handshake("upstream closed before setupComplete")
        elif self._state is BridgeState.READY:
            self._enter_terminal(BridgeState.CLOSED)
            logger.info("upstream closed the session connection_id=%s", self._connection_id)
            await self._release()

    async def _on_upstream_lost(self, reason: str) -> None:
        if self._state is BridgeState.CONNECTING:
            await self._fail_handshake(reason)
        elif self._state is BridgeState.READY:
            await self._fail_runtime(UpstreamRuntimeError(reason))

    async def _handle_frame(self, raw: str | bytes) -> None:
        try:
            frame = decode_upstream_frame(raw)
        except ValueError as exc:
            logger.warning("ignoring undecodable upstream frame connection_id=%s: %s", self._connection_id, exc)
            return

        if frame.kind is UpstreamFrameKind.SETUP_COMPLETE:
            await self._on_setup_complete()
            return

        if self._state is not BridgeState.READY:
            logger.debug(
                "ignoring upstream %s in state %s connection_id=%s",
                frame.kind.value,
                self._state.value,
                self._connection_id,
            )
            return

        await self._dispatch_frame(frame)

    async def _on_setup_complete(self) -> None:
        if self._state is not BridgeState.CONNECTING:
            logger.debug("ignoring repeated setupComplete connection_id=%s", self._connection_id)
            return
        self._state = BridgeState.READY
        logger.info("upstream setup complete connection_id=%s", self._connection_id)
        await self._sink.emit(ConnectionReady())
        self._handshake_done.set()

    async def _dispatch_frame(self, frame: UpstreamFrame) -> None:
        if frame.kind is UpstreamFrameKind.SERVER_CONTENT:
            audio_part = find_audio_part(frame.payload)
            if audio_part is not None:
                await self._sink.emit(AudioResponse(part=audio_part))
            await self._sink.emit(ServerContent(content=frame.payload))
            return

        if frame.kind is UpstreamFrameKind.TOOL_CALL_CANCELLATION:
            logger.info("tool call cancelled connection_id=%s", self._connection_id)
            return

        if frame.kind is UpstreamFrameKind.GO_AWAY:
            logger.warning("upstream goAway connection_id=%s payload=%s", self._connection_id, frame.payload)
            return

        logger.debug("unknown upstream frame connection_id=%s keys=%s", self._connection_id, list(frame.keys))

    async def _fail_handshake(self, reason: str) -> None:
        if self._state.is_terminal:
            return
        self._enter_terminal(BridgeState.FAILED)
        logger.warning("upstream handshake failed connection_id=%s: %s", self._connection_id, self._redact(reason))
        await self._sink.emit(ErrorEvent(message=WS_ERROR_UPSTREAM_INIT_FAILED))
        await self._release()

    async def _fail_runtime(self, exc: UpstreamRuntimeError) -> None:
        if self._state.is_terminal:
            return
        self._enter_terminal(BridgeState.FAILED)
        logger.warning("upstream session failed connection_id=%s: %s", self._connection_id, self._redact(exc))
        await self._sink.emit(ErrorEvent(message=WS_ERROR_UPSTREAM_FAILED))
        await self._release()

    def _redact(self, detail: object) -> str:
        # Transport errors may echo the dial URL, which carries the API key.
        text = str(detail)
        if self._settings.api_key:
            text = text.replace(self._settings.api_key, "***")
        return text

    def _enter_terminal(self, state: BridgeState) -> None:
        self._state = state
        self._handshake_done.set()
        self._terminated.set()

    async def _release(self) -> None:
        task, self._reader_task = self._reader_task, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task

        ws, self._ws = self._ws, None
        if ws is not None:
            with contextlib.suppress(Exception):
                await ws.close()


__all__ = ["LiveSessionBridge", "UpstreamConnector"]
