"""Tests for the HTTP client and API resources."""

import json

import httpx
import pytest
import respx

from elevenlabs_cli.exceptions import (
    APIError,
    AuthenticationError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServerError,
)
from elevenlabs_cli.utils.client import DEFAULT_BASE_URL, ElevenLabsClient

BASE = DEFAULT_BASE_URL


@pytest.fixture
def client():
    with ElevenLabsClient("sk_test") as api:
        yield api


class TestRequests:
    """Test request construction."""

    @respx.mock
    def test_api_key_header(self, client):
        route = respx.get(f"{BASE}/voices").mock(return_value=httpx.Response(200, json={"voices": []}))
        assert client.voices.list() == {"voices": []}
        request = route.calls.last.request
        assert request.headers["xi-api-key"] == "sk_test"
        assert request.headers["User-Agent"].startswith("elevenlabs-cli/")

    @respx.mock
    def test_none_params_dropped(self, client):
        route = respx.get(f"{BASE}/convai/agents").mock(return_value=httpx.Response(200, json={"agents": []}))
        client.agents.list(page_size=10)
        params = route.calls.last.request.url.params
        assert params["page_size"] == "10"
        assert "search" not in params

    @respx.mock
    def test_tts_convert(self, client):
        route = respx.post(f"{BASE}/text-to-speech/voice_1").mock(
            return_value=httpx.Response(200, content=b"ID3audio")
        )
        audio = client.tts.convert(
            "voice_1",
            "Hello",
            model_id="eleven_multilingual_v2",
            output_format="mp3_44100_128",
            voice_settings={"stability": 0.5},
        )
        assert audio == b"ID3audio"
        request = route.calls.last.request
        assert request.url.params["output_format"] == "mp3_44100_128"
        body = json.loads(request.content)
        assert body == {
            "text": "Hello",
            "model_id": "eleven_multilingual_v2",
            "voice_settings": {"stability": 0.5},
        }

    @respx.mock
    def test_tts_stream_chunks(self, client):
        respx.post(f"{BASE}/text-to-speech/voice_1/stream").mock(
            return_value=httpx.Response(200, content=b"a" * 10000)
        )
        with client.tts.stream("voice_1", "Hello", "eleven_flash_v2_5", "mp3_44100_128") as chunks:
            received = b"".join(chunks)
        assert received == b"a" * 10000

    @respx.mock
    def test_conversation_token_branch(self, client):
        route = respx.get(f"{BASE}/convai/conversation/token").mock(
            return_value=httpx.Response(200, json={"token": "tok"})
        )
        assert client.conversations.token("agent_1", branch_id="br_1") == {"token": "tok"}
        params = route.calls.last.request.url.params
        assert params["agent_id"] == "agent_1"
        assert params["branch_id"] == "br_1"

    @respx.mock
    def test_multipart_upload(self, client, tmp_path):
        sample = tmp_path / "meeting.mp3"
        sample.write_bytes(b"ID3data")
        route = respx.post(f"{BASE}/speech-to-text").mock(
            return_value=httpx.Response(200, json={"text": "hello"})
        )
        assert client.stt.transcribe(sample, diarize=True)["text"] == "hello"
        request = route.calls.last.request
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="diarize"' in request.content
        assert b"meeting.mp3" in request.content

    @respx.mock
    def test_empty_response_body(self, client):
        respx.delete(f"{BASE}/voices/voice_1").mock(return_value=httpx.Response(204))
        assert client.voices.delete("voice_1") == {}


class TestErrors:
    """Test HTTP error mapping."""

    @respx.mock
    def test_unauthorized(self, client):
        respx.get(f"{BASE}/user").mock(
            return_value=httpx.Response(401, json={"detail": {"status": "invalid_api_key", "message": "Invalid key"}})
        )
        with pytest.raises(AuthenticationError) as exc:
            client.user.get()
        assert exc.value.message == "Invalid key"

    @respx.mock
    def test_not_found_plain_text(self, client):
        respx.get(f"{BASE}/voices/nope").mock(return_value=httpx.Response(404, text="Not Found"))
        with pytest.raises(NotFoundError) as exc:
            client.voices.get("nope")
        assert exc.value.message == "Not Found"

    @respx.mock
    def test_validation_detail_list(self, client):
        respx.post(f"{BASE}/convai/agents/create").mock(
            return_value=httpx.Response(422, json={"detail": [{"msg": "field required", "loc": ["name"]}]})
        )
        with pytest.raises(APIError) as exc:
            client.agents.create(conversation_config={})
        assert exc.value.status_code == 422
        assert exc.value.message == "field required"

    @respx.mock
    def test_rate_limit(self, client):
        respx.get(f"{BASE}/voices").mock(
            return_value=httpx.Response(429, json={"detail": "Too many requests"}, headers={"Retry-After": "3"})
        )
        with pytest.raises(RateLimitError) as exc:
            client.voices.list()
        assert exc.value.retry_after == 3.0

    @respx.mock
    def test_server_error(self, client):
        respx.get(f"{BASE}/models").mock(return_value=httpx.Response(503, json={"message": "maintenance"}))
        with pytest.raises(ServerError) as exc:
            client.models.list()
        assert exc.value.status_code == 503

    @respx.mock
    def test_connection_error(self, client):
        respx.get(f"{BASE}/voices").mock(side_effect=httpx.ConnectError)
        with pytest.raises(NetworkError):
            client.voices.list()

    @respx.mock
    def test_stream_error_status(self, client):
        respx.post(f"{BASE}/text-to-speech/voice_1/stream").mock(
            return_value=httpx.Response(401, json={"detail": "bad key"})
        )
        with pytest.raises(AuthenticationError):
            with client.tts.stream("voice_1", "Hi", "eleven_flash_v2_5", "mp3_44100_128") as chunks:
                list(chunks)


class TestEndToEnd:
    """Run commands against mocked HTTP responses."""

    @respx.mock
    def test_tts_writes_response_bytes(self, runner, tmp_path):
        from elevenlabs_cli.main import cli

        respx.post(f"{BASE}/text-to-speech/Brian").mock(return_value=httpx.Response(200, content=b"ID3hello"))
        result = runner.invoke(
            cli, ["--api-key", "sk_test", "tts", "Hello", "--voice", "Brian", "--output", "out.mp3"]
        )
        assert result.exit_code == 0
        assert (tmp_path / "out.mp3").read_bytes() == b"ID3hello"

    @respx.mock
    def test_tts_invalid_key(self, runner, tmp_path):
        from elevenlabs_cli.main import cli

        respx.post(f"{BASE}/text-to-speech/Brian").mock(
            return_value=httpx.Response(401, json={"detail": {"status": "invalid_api_key", "message": "Invalid key"}})
        )
        result = runner.invoke(
            cli, ["--api-key", "sk_bad", "tts", "Hello", "--voice", "Brian", "--output", "out.mp3"]
        )
        assert result.exit_code == 1
        assert "Invalid API key" in result.output
        assert not (tmp_path / "out.mp3").exists()
