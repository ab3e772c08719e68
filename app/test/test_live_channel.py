"""
Test Live Channel

Runs GeminiLiveChannel against a stub websocket installed in place of
websockets.connect, and checks the exact outbound frame shapes.

Author: @kcaparas1630
"""

import asyncio
import json
import pytest
from websockets.exceptions import ConnectionClosed
from app.errors.exceptions import ChannelClosedError
from app.schemas.live.live_messages import build_setup_message, build_turn_message
from app.services.mock_interview.live_channel import GeminiLiveChannel


class StubWebSocket:
    """Records outbound frames and replays queued inbound ones."""

    def __init__(self, inbound=None):
        self.sent = []
        self.inbound = list(inbound or [])
        self.closed = False
        self.send_error = None
        self.send_delay = 0

    async def send(self, data):
        if self.send_delay:
            await asyncio.sleep(self.send_delay)
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(json.loads(data))

    async def close(self):
        self.closed = True

    def __aiter__(self):
        return self._replay()

    async def _replay(self):
        for raw in self.inbound:
            yield raw


@pytest.fixture
def stub_ws(monkeypatch):
    stub = StubWebSocket()
    calls = []

    async def fake_connect(uri, **kwargs):
        calls.append((uri, kwargs))
        return stub

    monkeypatch.setattr("app.services.mock_interview.live_channel.websockets.connect", fake_connect)
    stub.connect_calls = calls
    return stub


class TestFrameBuilders:
    """Outbound wire frames."""

    def test_setup_message_shape(self):
        assert build_setup_message("gemini-2.0-flash-live-001", "Puck") == {
            "setup": {
                "model": "models/gemini-2.0-flash-live-001",
                "generationConfig": {
                    "responseModalities": ["AUDIO"],
                    "speechConfig": {"voiceConfig": {"prebuiltVoiceConfig": {"voiceName": "Puck"}}},
                },
            }
        }

    def test_setup_message_keeps_existing_model_prefix(self):
        setup = build_setup_message("models/custom-live")
        assert setup["setup"]["model"] == "models/custom-live"
        assert setup["setup"]["generationConfig"]["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"]["voiceName"] == "Kore"

    def test_turn_message_shape(self):
        assert build_turn_message("Tell me about yourself.") == {
            "clientContent": {
                "turns": [{"role": "user", "parts": [{"text": "Tell me about yourself."}]}],
                "turnComplete": True,
            }
        }


class TestGeminiLiveChannel:
    """Connection lifecycle over the stub websocket."""

    @pytest.mark.asyncio
    async def test_connect_sends_setup_frame(self, stub_ws):
        channel = GeminiLiveChannel(api_key="secret", voice="Aoede", url="wss://live.test/ws", model="live-model")

        await channel.connect()

        assert channel.is_connected
        uri, kwargs = stub_ws.connect_calls[0]
        assert uri == "wss://live.test/ws?key=secret"
        assert kwargs == {"max_size": None}
        assert stub_ws.sent == [build_setup_message("live-model", "Aoede")]
        assert stub_ws.sent[0]["setup"]["model"] == "models/live-model"

    @pytest.mark.asyncio
    async def test_connect_twice_is_a_no_op(self, stub_ws):
        channel = GeminiLiveChannel(api_key="secret")
        await channel.connect()
        await channel.connect()
        assert len(stub_ws.connect_calls) == 1
        assert len(stub_ws.sent) == 1

    @pytest.mark.asyncio
    async def test_send_serializes_turn_frame(self, stub_ws):
        channel = GeminiLiveChannel(api_key="secret")
        await channel.connect()

        await channel.send(build_turn_message("Hello"))

        assert stub_ws.sent[1] == {
            "clientContent": {"turns": [{"role": "user", "parts": [{"text": "Hello"}]}], "turnComplete": True}
        }

    @pytest.mark.asyncio
    async def test_send_before_connect_raises(self):
        channel = GeminiLiveChannel(api_key="secret")
        with pytest.raises(ChannelClosedError):
            await channel.send(build_turn_message("Hello"))

    @pytest.mark.asyncio
    async def test_send_after_close_raises(self, stub_ws):
        channel = GeminiLiveChannel(api_key="secret")
        await channel.connect()

        await channel.close()

        assert stub_ws.closed is True
        assert channel.is_connected is False
        with pytest.raises(ChannelClosedError):
            await channel.send(build_turn_message("Hello"))
        assert len(stub_ws.sent) == 1

    @pytest.mark.asyncio
    async def test_remote_close_during_send_raises(self, stub_ws):
        channel = GeminiLiveChannel(api_key="secret")
        await channel.connect()
        stub_ws.send_error = ConnectionClosed(None, None)

        with pytest.raises(ChannelClosedError):
            await channel.send(build_turn_message("Hello"))
        assert channel.is_connected is False

        stub_ws.send_error = None
        with pytest.raises(ChannelClosedError):
            await channel.send(build_turn_message("Hello again"))

    @pytest.mark.asyncio
    async def test_send_timeout_closes_channel(self, stub_ws):
        channel = GeminiLiveChannel(api_key="secret", send_timeout=0.01)
        await channel.connect()
        stub_ws.send_delay = 1

        with pytest.raises(ChannelClosedError, match="timed out"):
            await channel.send(build_turn_message("Hello"))

        assert channel.is_connected is False
        assert stub_ws.closed is True

    @pytest.mark.asyncio
    async def test_receive_decodes_frames_and_skips_garbage(self, stub_ws):
        stub_ws.inbound = ['{"setupComplete": {}}', "not json", b'{"serverContent": {"turnComplete": true}}']
        channel = GeminiLiveChannel(api_key="secret")
        await channel.connect()

        received = [message async for message in channel.receive()]

        assert received == [{"setupComplete": {}}, {"serverContent": {"turnComplete": True}}]
        assert channel.is_connected is False
