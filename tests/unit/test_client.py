from __future__ import annotations

import json
import base64
import asyncio
from typing import Any

import pytest
from relay_fakes import eventually

from src.client import ClientListener, ReconnectBackoff, VoiceRelayClient, ClientConnectionState


class _FakeServerSocket:
    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.closed = False
        self._incoming: asyncio.Queue[str | None] = asyncio.Queue()

    def push(self, msg: dict[str, Any]) -> None:
        self._incoming.put_nowait(json.dumps(msg))

    def end(self) -> None:
        self._incoming.put_nowait(None)

    async def send(self, text: str) -> None:
        self.sent.append(json.loads(text))

    async def close(self) -> None:
        self.closed = True
        self._incoming.put_nowait(None)

    def __aiter__(self) -> _FakeServerSocket:
        return self

    async def __anext__(self) -> str:
        item = await self._incoming.get()
        if item is None:
            raise StopAsyncIteration
        return item


class _RecordingListener(ClientListener):
    def __init__(self) -> None:
        self.states: list[ClientConnectionState] = []
        self.ready = 0
        self.audio: list[dict[str, Any]] = []
        self.content: list[Any] = []
        self.errors: list[str] = []

    async def on_connection_ready(self) -> None:
        self.ready += 1

    async def on_audio_response(self, part: dict[str, Any]) -> None:
        self.audio.append(part)

    async def on_server_content(self, content: Any) -> None:
        self.content.append(content)

    async def on_error(self, message: str) -> None:
        self.errors.append(message)

    async def on_connection_change(self, state: ClientConnectionState) -> None:
        self.states.append(state)


def _fast_backoff() -> ReconnectBackoff:
    return ReconnectBackoff(initial_s=0.001, max_s=0.004, multiplier=2.0)


def test_backoff_doubles_up_to_cap_and_resets() -> None:
    backoff = ReconnectBackoff(initial_s=3.0, max_s=20.0, multiplier=2.0)

    assert [backoff.next_delay() for _ in range(5)] == [3.0, 6.0, 12.0, 20.0, 20.0]
    backoff.reset()
    assert backoff.next_delay() == 3.0


@pytest.mark.asyncio
async def test_client_dispatches_server_messages_and_sends_audio() -> None:
    server = _FakeServerSocket()
    server.push({"type": "connection_ready"})
    server.push({"type": "audio_response", "data": {"inline_data": {"mime_type": "audio/pcm", "data": "AA=="}}})
    server.push({"type": "server_content", "data": {"turnComplete": True}})
    server.push({"type": "error", "message": "Invalid message format: invalid JSON"})

    async def connector(url: str) -> _FakeServerSocket:
        return server

    listener = _RecordingListener()
    client = VoiceRelayClient("ws://relay.test/ws", listener, connector=connector)
    task = asyncio.create_task(client.run())
    await eventually(lambda: len(listener.errors) == 1)

    assert client.state is ClientConnectionState.READY
    assert listener.ready == 1
    assert listener.audio == [{"inline_data": {"mime_type": "audio/pcm", "data": "AA=="}}]
    assert listener.content == [{"turnComplete": True}]

    assert await client.start_conversation()
    assert await client.send_audio_chunk(b"\x00\x01", final=False)
    assert await client.interrupt()
    assert server.sent == [
        {"type": "start_conversation"},
        {"type": "audio_chunk", "audio": base64.b64encode(b"\x00\x01").decode("ascii"), "mimeType": "audio/pcm", "final": False},
        {"type": "interrupt"},
    ]

    await client.stop()
    await asyncio.wait_for(task, timeout=1.0)
    assert client.state is ClientConnectionState.STOPPED
    assert server.closed


@pytest.mark.asyncio
async def test_sends_while_disconnected_are_dropped() -> None:
    client = VoiceRelayClient("ws://relay.test/ws")

    assert not await client.send_audio_chunk(b"\x00")
    assert not await client.interrupt()
    assert not await client.start_conversation()


@pytest.mark.asyncio
async def test_reconnects_with_backoff_until_ready() -> None:
    calls = 0

    async def connector(url: str) -> _FakeServerSocket:
        nonlocal calls
        calls += 1
        if calls <= 2:
            raise ConnectionRefusedError("refused")
        server = _FakeServerSocket()
        server.push({"type": "connection_ready"})
        return server

    listener = _RecordingListener()
    client = VoiceRelayClient("ws://relay.test/ws", listener, backoff=_fast_backoff(), connector=connector)
    task = asyncio.create_task(client.run())
    await eventually(lambda: client.state is ClientConnectionState.READY)

    assert calls == 3
    assert client.backoff.attempts == 0
    assert listener.states.count(ClientConnectionState.CONNECTING) == 3

    await client.stop()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_dropped_connection_schedules_a_single_reconnect() -> None:
    servers: list[_FakeServerSocket] = []

    async def connector(url: str) -> _FakeServerSocket:
        server = _FakeServerSocket()
        server.push({"type": "connection_ready"})
        servers.append(server)
        return server

    client = VoiceRelayClient("ws://relay.test/ws", backoff=_fast_backoff(), connector=connector)
    task = asyncio.create_task(client.run())
    await eventually(lambda: client.state is ClientConnectionState.READY)

    servers[0].end()
    await eventually(lambda: len(servers) == 2 and client.state is ClientConnectionState.READY)
    await asyncio.sleep(0.02)

    assert len(servers) == 2
    await client.stop()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_stop_during_backoff_ends_run() -> None:
    async def connector(url: str) -> _FakeServerSocket:
        raise OSError("unreachable")

    backoff = ReconnectBackoff(initial_s=30.0, max_s=30.0)
    client = VoiceRelayClient("ws://relay.test/ws", backoff=backoff, connector=connector)
    task = asyncio.create_task(client.run())
    await eventually(lambda: backoff.attempts == 1)

    await client.stop()
    await asyncio.wait_for(task, timeout=1.0)

    assert client.state is ClientConnectionState.STOPPED
