"""Tests for the WebSocket streaming clients."""

import asyncio
import base64
import json
import threading

import pytest

from elevenlabs_cli.exceptions import WebSocketError
from elevenlabs_cli.main import cli
from elevenlabs_cli.streaming import (
    ConversationEvent,
    ConversationEventType,
    ConversationSession,
    RealtimeTTSClient,
    TTSFrame,
)


class FakeWebSocket:
    """Replays canned server messages and records what the client sends."""

    def __init__(self, incoming):
        self.incoming = list(incoming)
        self.sent = []
        self.closed = False

    async def send(self, message):
        self.sent.append(json.loads(message))

    async def close(self):
        self.closed = True

    def __aiter__(self):
        return self._messages()

    async def _messages(self):
        for message in self.incoming:
            await asyncio.sleep(0)
            yield message


@pytest.fixture
def fake_socket(monkeypatch):
    """Install a FakeWebSocket factory; call it with the server's messages."""
    sockets = []

    def install(incoming):
        websocket = FakeWebSocket(incoming)
        sockets.append(websocket)

        async def fake_open(url, api_key, timeout=30.0):
            websocket.url = url
            return websocket

        monkeypatch.setattr("elevenlabs_cli.streaming.open_websocket", fake_open)
        return websocket

    return install


def _audio_frame(data, final=False):
    return json.dumps({"audio": base64.b64encode(data).decode(), "isFinal": final})


def _conversation_messages(agent_text="Hello! How can I help?"):
    return [
        json.dumps({
            "type": "conversation_initiation_metadata",
            "conversation_initiation_metadata_event": {
                "conversation_id": "conv_1",
                "agent_output_audio_format": "pcm_16000",
            },
        }),
        json.dumps({"type": "ping", "ping_event": {"event_id": 7}}),
        json.dumps({
            "type": "audio",
            "audio_event": {"audio_base_64": base64.b64encode(b"\x00\x01").decode(), "event_id": 8},
        }),
        json.dumps({"type": "agent_response", "agent_response_event": {"agent_response": agent_text}}),
    ]


class TestTTSFrames:
    """Test stream-input frame parsing."""

    def test_audio_frame(self):
        frame = TTSFrame.from_message(_audio_frame(b"abc"))
        assert frame.audio == b"abc"
        assert frame.is_final is False

    def test_final_frame(self):
        frame = TTSFrame.from_message(json.dumps({"isFinal": True}))
        assert frame.audio == b""
        assert frame.is_final is True

    def test_error_frame(self):
        frame = TTSFrame.from_message(json.dumps({"message": "quota exceeded", "code": 1008}))
        assert frame.error == "quota exceeded"

    def test_binary_frame(self):
        assert TTSFrame.from_message(b"\xff\xfb").audio == b"\xff\xfb"


class TestRealtimeTTS:
    """Test the stream-input client."""

    def test_url(self):
        client = RealtimeTTSClient("sk_test", "voice_1", output_format="pcm_16000")
        assert client.url == (
            "wss://api.elevenlabs.io/v1/text-to-speech/voice_1/stream-input"
            "?model_id=eleven_flash_v2_5&output_format=pcm_16000"
        )

    def test_initial_frame_settings(self):
        client = RealtimeTTSClient("sk_test", "voice_1", voice_settings={"stability": 0.4})
        assert client.initial_frame() == {"text": " ", "voice_settings": {"stability": 0.4}}

    @pytest.mark.asyncio
    async def test_synthesize_collects_chunks_in_order(self, fake_socket):
        websocket = fake_socket([_audio_frame(b"one"), _audio_frame(b"two"), _audio_frame(b"", final=True)])
        received = []
        result = await RealtimeTTSClient("sk_test", "voice_1").synthesize("Hello", on_chunk=received.append)

        assert result.audio == b"onetwo"
        assert result.chunks == 2
        assert received == [b"one", b"two"]
        assert websocket.sent == [{"text": " "}, {"text": "Hello ", "flush": True}, {"text": ""}]
        assert websocket.closed

    @pytest.mark.asyncio
    async def test_synthesize_server_error(self, fake_socket):
        websocket = fake_socket([json.dumps({"error": "invalid voice"})])
        with pytest.raises(WebSocketError, match="invalid voice"):
            await RealtimeTTSClient("sk_test", "voice_1").synthesize("Hello")
        assert websocket.closed


class TestConversationEvents:
    """Test conversation event parsing."""

    def test_user_transcript_key(self):
        event = ConversationEvent.from_message({
            "type": "user_transcript",
            "user_transcription_event": {"user_transcript": "hi there"},
        })
        assert event.type is ConversationEventType.USER_TRANSCRIPT
        assert event.text == "hi there"

    def test_unknown_type(self):
        event = ConversationEvent.from_message({"type": "brand_new_event"})
        assert event.type is ConversationEventType.UNKNOWN
        assert event.text is None

    def test_audio_payload(self):
        event = ConversationEvent.from_message({
            "type": "audio",
            "audio_event": {"audio_base_64": base64.b64encode(b"pcm").decode()},
        })
        assert event.audio == b"pcm"


class TestConversationSession:
    """Test the conversation protocol handling."""

    @pytest.mark.asyncio
    async def test_single_message(self, fake_socket):
        websocket = fake_socket(_conversation_messages())
        session = ConversationSession("sk_test", "agent_1")
        replies = []
        session.add_handler(ConversationEventType.AGENT_RESPONSE, lambda event: replies.append(event.text))

        await session.chat(message="What are your hours?")

        assert websocket.url.endswith("/convai/conversation?agent_id=agent_1")
        assert websocket.sent[0] == {"type": "conversation_initiation_client_data"}
        assert {"type": "user_message", "text": "What are your hours?"} in websocket.sent
        assert {"type": "pong", "event_id": 7} in websocket.sent
        assert session.conversation_id == "conv_1"
        assert session.audio_format == "pcm_16000"
        assert session.agent_turns == 1
        assert replies == ["Hello! How can I help?"]
        assert session.transcript == [
            {"role": "user", "message": "What are your hours?"},
            {"role": "agent", "message": "Hello! How can I help?"},
        ]
        assert websocket.closed

    @pytest.mark.asyncio
    async def test_async_handlers_awaited(self, fake_socket):
        fake_socket(_conversation_messages())
        session = ConversationSession("sk_test", "agent_1")
        seen = []

        @session.on("agent_response")
        async def on_agent(event):
            seen.append(event.text)

        await session.chat(message="Hi")
        assert seen == ["Hello! How can I help?"]

    @pytest.mark.asyncio
    async def test_handler_errors_do_not_stop_session(self, fake_socket):
        fake_socket(_conversation_messages())
        session = ConversationSession("sk_test", "agent_1")

        @session.on(ConversationEventType.METADATA)
        def broken(event):
            raise RuntimeError("handler bug")

        await session.chat(message="Hi")
        assert session.agent_turns == 1

    @pytest.mark.asyncio
    async def test_send_requires_connection(self):
        with pytest.raises(WebSocketError, match="Not connected"):
            await ConversationSession("sk_test", "agent_1").send({"type": "user_message"})


class TestStreamingCommands:
    """Test the commands built on the streaming clients."""

    def test_converse_chat_message(self, runner, patched_client, fake_socket):
        patched_client.api_key = "sk_test"
        fake_socket(_conversation_messages("We open at nine."))
        result = runner.invoke(
            cli, ["--api-key", "sk_test", "converse", "chat", "--agent-id", "agent_1", "-m", "Hours?"]
        )
        assert result.exit_code == 0
        assert "We open at nine." in result.output
        assert "Conversation ended after 1 agent turns" in result.output

    def test_converse_chat_json(self, runner, patched_client, fake_socket):
        patched_client.api_key = "sk_test"
        fake_socket(_conversation_messages("We open at nine."))
        result = runner.invoke(
            cli, ["--api-key", "sk_test", "--json", "converse", "chat", "--agent-id", "agent_1", "-m", "Hours?"]
        )
        assert result.exit_code == 0
        assert '"conversation_id": "conv_1"' in result.output

    def test_realtime_tts_saves_audio(self, runner, patched_client, fake_socket, tmp_path):
        patched_client.api_key = "sk_test"
        fake_socket([_audio_frame(b"chunk1"), _audio_frame(b"chunk2", final=True)])
        result = runner.invoke(cli, ["--api-key", "sk_test", "realtime-tts", "Hello", "-o", "rt.mp3"])
        assert result.exit_code == 0
        assert (tmp_path / "rt.mp3").read_bytes() == b"chunk1chunk2"
        assert "Received 2 chunks" in result.output

    def test_converse_chat_keeps_brackets(self, runner, patched_client, fake_socket):
        patched_client.api_key = "sk_test"
        fake_socket(_conversation_messages("Press [/b] to continue"))
        result = runner.invoke(
            cli, ["--api-key", "sk_test", "converse", "chat", "--agent-id", "agent_1", "-m", "Help"]
        )
        assert result.exit_code == 0
        assert "Press [/b] to continue" in result.output


class TestEventLoopHandoff:
    """Test that blocking work stays off the receive loop."""

    @pytest.mark.asyncio
    async def test_chunk_callback_runs_in_worker_thread(self, fake_socket):
        fake_socket([_audio_frame(b"one", final=True)])
        threads = []
        await RealtimeTTSClient("sk_test", "voice_1").synthesize(
            "Hello", on_chunk=lambda chunk: threads.append(threading.get_ident())
        )
        assert threads and threads[0] != threading.get_ident()

    @pytest.mark.asyncio
    async def test_wait_for_cancelled_receiver(self):
        async def forever():
            await asyncio.sleep(3600)

        receiver = asyncio.ensure_future(forever())
        receiver.cancel()
        with pytest.raises(asyncio.CancelledError):
            await receiver
        await ConversationSession._wait_for(asyncio.Event(), receiver, timeout=1.0)
