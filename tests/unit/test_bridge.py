from __future__ import annotations

import asyncio
import logging

import pytest
from relay_fakes import FakeConnector, FakeUpstream, RecordingSink, eventually, upstream_settings

from src.realtime.state import BridgeState
from src.realtime.bridge import LiveSessionBridge
from src.realtime.events import AudioChunk, ErrorEvent, AudioResponse, ServerContent, ConnectionReady
from src.config.websocket import WS_ERROR_UPSTREAM_FAILED, WS_ERROR_UPSTREAM_INIT_FAILED


def _bridge(connector: FakeConnector, sink: RecordingSink, **overrides: object) -> LiveSessionBridge:
    return LiveSessionBridge(
        settings=upstream_settings(**overrides),
        connector=connector,
        sink=sink,
        connection_id="c1",
    )


async def _ready_bridge() -> tuple[LiveSessionBridge, FakeUpstream, RecordingSink]:
    connector = FakeConnector()
    sink = RecordingSink()
    bridge = _bridge(connector, sink)
    assert await bridge.connect() is BridgeState.READY
    return bridge, connector.upstreams[0], sink


def _errors(sink: RecordingSink) -> list[ErrorEvent]:
    return [e for e in sink.events if isinstance(e, ErrorEvent)]


@pytest.mark.asyncio
async def test_connect_sends_setup_and_emits_ready_first() -> None:
    connector = FakeConnector()
    sink = RecordingSink()
    bridge = _bridge(connector, sink)

    state = await bridge.connect()

    assert state is BridgeState.READY
    assert connector.urls == ["wss://upstream.test/live?key=test-key"]
    upstream = connector.upstreams[0]
    assert upstream.sent[0]["setup"]["model"] == "models/gemini-test"
    assert sink.events == [ConnectionReady()]
    await bridge.close()


@pytest.mark.asyncio
async def test_audio_chunks_forward_in_order_and_only_last_completes_turn() -> None:
    bridge, upstream, _ = await _ready_bridge()

    for audio, final in (("AA==", False), ("AQ==", False), ("Ag==", True)):
        assert await bridge.forward_audio_chunk(AudioChunk(audio=audio, final=final))

    turns = upstream.turns
    assert [t["turns"][0]["parts"][0]["inline_data"]["data"] for t in turns] == ["AA==", "AQ==", "Ag=="]
    assert [t["turn_complete"] for t in turns] == [False, False, True]
    assert bridge.turns_completed == 1
    await bridge.close()


@pytest.mark.asyncio
async def test_interrupt_sends_exactly_one_message() -> None:
    bridge, upstream, _ = await _ready_bridge()
    before = len(upstream.sent)

    assert await bridge.forward_interrupt()

    assert len(upstream.sent) == before + 1
    turn = upstream.sent[-1]["clientContent"]
    assert turn["turns"][0]["parts"] == [{"text": ""}]
    assert turn["turn_complete"] is False
    await bridge.close()


@pytest.mark.asyncio
async def test_server_content_with_audio_emits_audio_response_then_content() -> None:
    bridge, upstream, sink = await _ready_bridge()
    content = {"modelTurn": {"parts": [{"inlineData": {"mimeType": "audio/pcm;rate=24000", "data": "QUJD"}}]}}

    upstream.push({"serverContent": content})
    upstream.push({"serverContent": {"turnComplete": True}})
    await eventually(lambda: len(sink.events) == 4)

    assert sink.events == [
        ConnectionReady(),
        AudioResponse(part={"inline_data": {"mime_type": "audio/pcm;rate=24000", "data": "QUJD"}}),
        ServerContent(content=content),
        ServerContent(content={"turnComplete": True}),
    ]
    await bridge.close()


@pytest.mark.asyncio
async def test_unknown_and_undecodable_frames_are_ignored() -> None:
    bridge, upstream, sink = await _ready_bridge()

    upstream.push_raw("not json")
    upstream.push({"usageMetadata": {"totalTokenCount": 3}})
    upstream.push({"goAway": {"timeLeft": "10s"}})
    upstream.push({"serverContent": {"turnComplete": True}})
    await eventually(lambda: len(sink.events) == 2)

    assert sink.events[-1] == ServerContent(content={"turnComplete": True})
    assert bridge.state is BridgeState.READY
    await bridge.close()


@pytest.mark.asyncio
async def test_handshake_timeout_fails_with_one_error() -> None:
    connector = FakeConnector(lambda: FakeUpstream(reply_setup=False))
    sink = RecordingSink()
    bridge = _bridge(connector, sink, handshake_timeout_s=0.05)

    assert await bridge.connect() is BridgeState.FAILED
    assert sink.events == [ErrorEvent(message=WS_ERROR_UPSTREAM_INIT_FAILED)]
    assert connector.upstreams[0].closed


@pytest.mark.asyncio
async def test_connect_error_fails_handshake() -> None:
    async def refuse(url: str) -> FakeUpstream:
        raise ConnectionRefusedError("no route")

    sink = RecordingSink()
    bridge = LiveSessionBridge(settings=upstream_settings(), connector=refuse, sink=sink)

    assert await bridge.connect() is BridgeState.FAILED
    assert sink.events == [ErrorEvent(message=WS_ERROR_UPSTREAM_INIT_FAILED)]


@pytest.mark.asyncio
async def test_missing_api_key_never_dials() -> None:
    connector = FakeConnector()
    sink = RecordingSink()
    bridge = _bridge(connector, sink, api_key="")

    assert await bridge.connect() is BridgeState.FAILED
    assert connector.urls == []
    assert _errors(sink) == [ErrorEvent(message=WS_ERROR_UPSTREAM_INIT_FAILED)]


@pytest.mark.asyncio
async def test_upstream_closing_before_setup_complete_fails_handshake() -> None:
    def closing() -> FakeUpstream:
        upstream = FakeUpstream(reply_setup=False)
        upstream.end()
        return upstream

    sink = RecordingSink()
    bridge = _bridge(FakeConnector(closing), sink, handshake_timeout_s=1.0)

    assert await bridge.connect() is BridgeState.FAILED
    assert _errors(sink) == [ErrorEvent(message=WS_ERROR_UPSTREAM_INIT_FAILED)]


@pytest.mark.asyncio
async def test_runtime_failure_emits_exactly_one_error() -> None:
    bridge, upstream, sink = await _ready_bridge()

    upstream.fail_send = True
    assert not await bridge.forward_audio_chunk(AudioChunk(audio="AA==", final=True))
    upstream.fail(ConnectionResetError("reset by peer"))
    await asyncio.sleep(0.02)

    assert bridge.state is BridgeState.FAILED
    assert _errors(sink) == [ErrorEvent(message=WS_ERROR_UPSTREAM_FAILED)]
    assert await bridge.wait_terminal() is BridgeState.FAILED


@pytest.mark.asyncio
async def test_reader_failure_after_ready_fails_session() -> None:
    bridge, upstream, sink = await _ready_bridge()

    upstream.fail(RuntimeError("socket reset"))

    assert await asyncio.wait_for(bridge.wait_terminal(), timeout=1.0) is BridgeState.FAILED
    assert _errors(sink) == [ErrorEvent(message=WS_ERROR_UPSTREAM_FAILED)]
    assert upstream.closed


@pytest.mark.asyncio
async def test_clean_upstream_close_moves_to_closed_without_error() -> None:
    bridge, upstream, sink = await _ready_bridge()

    upstream.end()

    assert await asyncio.wait_for(bridge.wait_terminal(), timeout=1.0) is BridgeState.CLOSED
    assert _errors(sink) == []


@pytest.mark.asyncio
async def test_close_is_idempotent_and_forwarding_afterwards_is_a_no_op() -> None:
    bridge, upstream, sink = await _ready_bridge()
    sent_before = len(upstream.sent)

    await bridge.close()
    await bridge.close()

    assert bridge.state is BridgeState.CLOSED
    assert upstream.closed
    assert not await bridge.forward_audio_chunk(AudioChunk(audio="AA=="))
    assert not await bridge.forward_interrupt()
    assert len(upstream.sent) == sent_before
    assert _errors(sink) == []


@pytest.mark.asyncio
async def test_forwarding_before_ready_is_dropped() -> None:
    connector = FakeConnector()
    bridge = _bridge(connector, RecordingSink())

    assert not await bridge.forward_audio_chunk(AudioChunk(audio="AA=="))
    assert not await bridge.forward_interrupt()
    assert connector.urls == []


@pytest.mark.asyncio
async def test_close_before_connect_prevents_dialing() -> None:
    connector = FakeConnector()
    bridge = _bridge(connector, RecordingSink())

    await bridge.close()

    assert await bridge.connect() is BridgeState.CLOSED
    assert connector.urls == []


@pytest.mark.asyncio
async def test_connect_failure_log_does_not_leak_api_key(caplog: pytest.LogCaptureFixture) -> None:
    async def reject(url: str) -> FakeUpstream:
        raise OSError(f"cannot reach {url}")

    sink = RecordingSink()
    bridge = LiveSessionBridge(settings=upstream_settings(api_key="secret-key-123"), connector=reject, sink=sink)

    with caplog.at_level(logging.DEBUG, logger="src.realtime.bridge"):
        assert await bridge.connect() is BridgeState.FAILED

    assert "upstream handshake failed" in caplog.text
    assert "secret-key-123" not in caplog.text


@pytest.mark.asyncio
async def test_runtime_failure_log_does_not_leak_api_key(caplog: pytest.LogCaptureFixture) -> None:
    bridge, upstream, _ = await _ready_bridge()

    with caplog.at_level(logging.DEBUG, logger="src.realtime.bridge"):
        upstream.fail(RuntimeError("reset on wss://upstream.test/live?key=test-key"))
        assert await asyncio.wait_for(bridge.wait_terminal(), timeout=1.0) is BridgeState.FAILED

    assert "upstream session failed" in caplog.text
    assert "test-key" not in caplog.text
