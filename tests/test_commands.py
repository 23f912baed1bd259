"""Tests for command helpers and command behaviour."""

import json
from unittest.mock import MagicMock

import click
import pytest

from elevenlabs_cli.commands.account import default_usage_window, usage_rows
from elevenlabs_cli.commands.agents import build_agent_config
from elevenlabs_cli.commands.dialogue import parse_dialogue_inputs
from elevenlabs_cli.commands.interactive import run_line
from elevenlabs_cli.commands.library import load_rules
from elevenlabs_cli.commands.phone import build_import_body
from elevenlabs_cli.commands.stt import render_transcript
from elevenlabs_cli.commands.tools import build_tool_config, parse_schema
from elevenlabs_cli.commands.voice import parse_labels
from elevenlabs_cli.exceptions import ValidationError
from elevenlabs_cli.main import cli
from elevenlabs_cli.utils.output import OutputMode


class TestDialogueInputs:
    """Test text:voice_id parsing."""

    def test_comma_separated(self):
        assert parse_dialogue_inputs("Hello:voice1,World:voice2") == [
            {"text": "Hello", "voice_id": "voice1"},
            {"text": "World", "voice_id": "voice2"},
        ]

    def test_repeated_values(self):
        parsed = parse_dialogue_inputs(["Hi there:v1", "Bye:v2,Again:v1"])
        assert [p["voice_id"] for p in parsed] == ["v1", "v2", "v1"]

    def test_missing_separator(self):
        with pytest.raises(ValidationError, match="index 1"):
            parse_dialogue_inputs("Hello:voice1,World")

    def test_empty_voice(self):
        with pytest.raises(ValidationError, match="Empty voice_id"):
            parse_dialogue_inputs("Hello:")

    def test_nothing(self):
        with pytest.raises(ValidationError, match="No dialogue inputs"):
            parse_dialogue_inputs(" , ")


class TestPhoneImport:
    """Test phone import request bodies."""

    def test_twilio(self):
        body = build_import_body("+15551234567", "twilio", sid="AC123", token="secret")
        assert body == {
            "phone_number": "+15551234567",
            "label": "+15551234567",
            "provider": {"type": "twilio", "twilio_sid": "AC123", "twilio_token": "secret"},
        }

    def test_twilio_requires_sid(self):
        with pytest.raises(ValidationError, match="Twilio Account SID is required"):
            build_import_body("+15551234567", "twilio", token="secret")

    def test_twilio_requires_token(self):
        with pytest.raises(ValidationError, match="Twilio Auth Token is required"):
            build_import_body("+15551234567", "twilio", sid="AC123")

    def test_sip(self):
        body = build_import_body("+15551234567", "sip", label="Office", sip_uri="sip:pbx.example.com")
        assert body["label"] == "Office"
        assert body["provider"] == {"type": "sip_trunk", "sip_uri": "sip:pbx.example.com"}

    def test_sip_requires_uri(self):
        with pytest.raises(ValidationError, match="SIP URI is required"):
            build_import_body("+15551234567", "sip")

    def test_unknown_provider(self):
        with pytest.raises(ValidationError, match="Unknown provider 'vonage'"):
            build_import_body("+15551234567", "vonage")

    def test_import_command(self, runner, patched_client):
        patched_client.phone_numbers.create.return_value = {"phone_number_id": "ph_1"}
        result = runner.invoke(
            cli,
            ["--api-key", "sk_test", "phone", "import", "+15551234567", "--sid", "AC1", "--token", "t"],
        )
        assert result.exit_code == 0
        assert "ph_1" in result.output
        assert patched_client.phone_numbers.create.call_args.kwargs["provider"]["type"] == "twilio"

    def test_import_missing_credentials_makes_no_request(self, runner, patched_client):
        result = runner.invoke(cli, ["--api-key", "sk_test", "phone", "import", "+15551234567"])
        assert result.exit_code == 1
        assert "--sid" in result.output
        patched_client.phone_numbers.create.assert_not_called()


class TestToolSchemas:
    """Test tool config parsing."""

    def test_inline(self):
        assert parse_schema('{"type": "webhook", "api_schema": {"url": "https://x"}}')["type"] == "webhook"

    def test_from_file(self, tmp_path):
        schema_file = tmp_path / "tool.json"
        schema_file.write_text(json.dumps({"api_schema": {"url": "https://x"}}), encoding="utf-8")
        assert parse_schema(f"@{schema_file}") == {"api_schema": {"url": "https://x"}}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError, match="Schema file not found"):
            parse_schema(f"@{tmp_path / 'nope.json'}")

    def test_invalid_json(self):
        with pytest.raises(ValidationError, match="Invalid JSON schema"):
            parse_schema("{not json")

    def test_not_an_object(self):
        with pytest.raises(ValidationError, match="must be a JSON object"):
            parse_schema("[1, 2]")

    def test_build_config_defaults_type(self):
        config = build_tool_config({"api_schema": {}}, name="lookup", description="Look up")
        assert config == {"api_schema": {}, "name": "lookup", "description": "Look up", "type": "webhook"}

    def test_update_without_schema_reuses_existing(self, runner, patched_client):
        patched_client.tools.get.return_value = {"tool_config": {"type": "client", "name": "old"}}
        result = runner.invoke(cli, ["--api-key", "sk_test", "tools", "update", "tool_1", "-n", "new"])
        assert result.exit_code == 0
        patched_client.tools.update.assert_called_once_with("tool_1", {"type": "client", "name": "new"})


class TestAgents:
    """Test agent commands."""

    def test_agent_config(self):
        assert build_agent_config("Hi!", "Be helpful", "voice_1") == {
            "agent": {"first_message": "Hi!", "prompt": {"prompt": "Be helpful"}},
            "tts": {"voice_id": "voice_1"},
        }

    def test_agent_config_minimal(self):
        assert build_agent_config() == {"agent": {}}

    def test_create(self, runner, patched_client):
        result = runner.invoke(
            cli,
            ["--api-key", "sk_test", "agent", "create", "--name", "Support Bot", "-s", "Be helpful"],
        )
        assert result.exit_code == 0
        assert "agent_new" in result.output
        kwargs = patched_client.agents.create.call_args.kwargs
        assert kwargs["name"] == "Support Bot"
        assert kwargs["conversation_config"]["agent"]["prompt"]["prompt"] == "Be helpful"

    def test_list(self, runner, patched_client):
        result = runner.invoke(cli, ["--api-key", "sk_test", "agent", "list", "--limit", "5"])
        assert result.exit_code == 0
        assert "agent_1" in result.output
        patched_client.agents.list.assert_called_once_with(page_size=5, search=None)

    def test_delete_cancelled(self, runner, patched_client):
        result = runner.invoke(cli, ["--api-key", "sk_test", "agent", "delete", "agent_1"], input="n\n")
        assert result.exit_code == 0
        assert "Cancelled" in result.output
        patched_client.agents.delete.assert_not_called()

    def test_delete_with_yes(self, runner, patched_client):
        result = runner.invoke(cli, ["--api-key", "sk_test", "-y", "agent", "delete", "agent_1"])
        assert result.exit_code == 0
        patched_client.agents.delete.assert_called_once_with("agent_1")

    def test_simulate_turn_limit(self, runner, patched_client):
        result = runner.invoke(
            cli, ["--api-key", "sk_test", "agent", "simulate", "agent_1", "-m", "Hi", "--max-turns", "99"]
        )
        assert result.exit_code == 2
        patched_client.agents.simulate.assert_not_called()


class TestAudioCommands:
    """Test audio generation commands."""

    def test_tts_writes_file(self, runner, patched_client, tmp_path):
        result = runner.invoke(cli, ["--api-key", "sk_test", "tts", "Hello world", "-o", "hello.mp3"])
        assert result.exit_code == 0
        assert (tmp_path / "hello.mp3").read_bytes() == b"ID3fake-mp3-audio"
        args, kwargs = patched_client.tts.convert.call_args
        assert args == ("Brian", "Hello world")
        assert kwargs["model_id"] == "eleven_multilingual_v2"
        assert kwargs["output_format"] == "mp3_44100_128"

    def test_tts_global_format(self, runner, patched_client, tmp_path):
        result = runner.invoke(cli, ["--api-key", "sk_test", "--format", "pcm_16000", "tts", "Hi"])
        assert result.exit_code == 0
        assert patched_client.tts.convert.call_args.kwargs["output_format"] == "pcm_16000"
        assert list(tmp_path.glob("speech_*.wav"))

    def test_tts_invalid_stability(self, runner, patched_client):
        result = runner.invoke(cli, ["--api-key", "sk_test", "tts", "Hi", "--stability", "2"])
        assert result.exit_code == 1
        assert "Stability must be between 0.0 and 1.0" in result.output
        patched_client.tts.convert.assert_not_called()

    def test_tts_play_without_audio_extra(self, runner, patched_client):
        result = runner.invoke(cli, ["--api-key", "sk_test", "tts", "Hi", "-o", "hi.mp3", "--play"])
        assert result.exit_code == 0
        assert "audio" in result.output

    def test_music_duration_range(self, runner, patched_client):
        result = runner.invoke(cli, ["--api-key", "sk_test", "music", "generate", "-p", "synthwave", "-d", "2"])
        assert result.exit_code == 1
        assert "Duration must be between 5 and 300 seconds" in result.output
        patched_client.music.generate.assert_not_called()

    def test_sfx_influence_range(self, runner, patched_client):
        result = runner.invoke(cli, ["--api-key", "sk_test", "sfx", "Thunder", "-i", "1.5"])
        assert result.exit_code == 1
        patched_client.sound_effects.generate.assert_not_called()

    def test_stt_writes_srt(self, runner, patched_client, tmp_path):
        audio = tmp_path / "meeting.mp3"
        audio.write_bytes(b"ID3data")
        patched_client.stt.transcribe.return_value = {
            "text": "Hello",
            "words": [{"text": "Hello", "start": 0.0, "end": 0.4, "type": "word"}],
        }
        result = runner.invoke(
            cli, ["--api-key", "sk_test", "stt", str(audio), "-f", "srt", "-o", "meeting.srt"]
        )
        assert result.exit_code == 0
        assert "00:00:00,000 --> 00:00:00,400" in (tmp_path / "meeting.srt").read_text(encoding="utf-8")

    def test_stt_requires_input(self, runner, patched_client):
        result = runner.invoke(cli, ["--api-key", "sk_test", "stt"])
        assert result.exit_code == 2


class TestTranscripts:
    """Test transcript rendering."""

    def test_plain_text(self):
        assert render_transcript({"text": "Hello there"}, "txt") == "Hello there"

    def test_diarized_paragraphs(self):
        result = {
            "text": "Hi. Hello.",
            "words": [
                {"text": "Hi.", "speaker_id": "speaker_0"},
                {"text": " ", "speaker_id": "speaker_0"},
                {"text": "Hello.", "speaker_id": "speaker_1"},
            ],
        }
        assert render_transcript(result, "txt", diarize=True) == "[speaker_0] Hi.\n[speaker_1] Hello."

    def test_json(self):
        assert json.loads(render_transcript({"text": "x"}, "json")) == {"text": "x"}


class TestUsageWindow:
    """Test usage query windows."""

    def test_defaults_to_thirty_days(self, monkeypatch):
        monkeypatch.setattr("elevenlabs_cli.commands.account.time.time", lambda: 1_700_000_000)
        start, end = default_usage_window()
        assert end == 1_700_000_000_000
        assert end - start == 30 * 24 * 60 * 60 * 1000

    def test_explicit_seconds(self):
        assert default_usage_window(100, 200) == (100_000, 200_000)

    def test_milliseconds_accepted(self):
        assert default_usage_window(1_700_000_000_000, 1_700_000_100_000) == (1_700_000_000_000, 1_700_000_100_000)

    def test_start_after_end(self):
        with pytest.raises(ValidationError, match="Start time must be before end time"):
            default_usage_window(200, 100)

    def test_invalid_timestamp(self):
        with pytest.raises(ValidationError, match="Invalid start timestamp"):
            default_usage_window("yesterday", None)

    def test_usage_rows(self):
        rows = usage_rows({"time": [1_700_000_000_000], "usage": {"All": [1234]}})
        assert rows == [{"time": "2023-11-14", "usage_type": "All", "characters": 1234}]


class TestSmallParsers:
    """Test label and pronunciation rule parsing."""

    def test_labels(self):
        assert parse_labels(["accent=british", " age = young "]) == {"accent": "british", "age": "young"}

    def test_bad_label(self):
        with pytest.raises(ValidationError, match="Expected KEY=VALUE"):
            parse_labels(["accent"])

    def test_rules_file(self, tmp_path):
        rules_file = tmp_path / "rules.json"
        rules_file.write_text(
            json.dumps({"rules": [{"string_to_replace": "AI", "type": "alias", "alias": "A I"}]}),
            encoding="utf-8",
        )
        assert load_rules(str(rules_file))[0]["alias"] == "A I"

    def test_rules_missing_key(self, tmp_path):
        rules_file = tmp_path / "rules.json"
        rules_file.write_text(json.dumps([{"type": "alias"}]), encoding="utf-8")
        with pytest.raises(ValidationError, match="missing 'string_to_replace'"):
            load_rules(str(rules_file))


class TestInteractive:
    """Test the interactive shell dispatcher."""

    @pytest.fixture
    def ctx(self, patched_client):
        context = click.Context(cli, obj={
            "api_key": "sk_test",
            "output": OutputMode.TABLE,
            "format": "mp3_44100_128",
        })
        with context:
            yield context

    def test_exit(self, ctx, capsys):
        assert run_line(ctx, "exit") is False
        assert "Goodbye!" in capsys.readouterr().out

    def test_blank_line(self, ctx):
        assert run_line(ctx, "   ") is True

    def test_help(self, ctx, capsys):
        assert run_line(ctx, "help") is True
        assert "Available commands" in capsys.readouterr().out

    def test_unknown(self, ctx, capsys):
        assert run_line(ctx, "dance") is True
        assert "Unknown command: dance" in capsys.readouterr().out

    def test_tts_usage(self, ctx, capsys):
        run_line(ctx, "tts")
        assert "Usage: tts <text>" in capsys.readouterr().out

    def test_voices(self, ctx, patched_client, capsys):
        assert run_line(ctx, "voices") is True
        patched_client.voices.list.assert_called_once()
        assert "Brian" in capsys.readouterr().out

    def test_failure_keeps_session(self, ctx, patched_client, capsys):
        patched_client.models.list.side_effect = ValidationError("boom")
        assert run_line(ctx, "models") is True
        assert "Failed to list models: boom" in capsys.readouterr().err

    def test_stt_missing_file(self, ctx, capsys):
        assert run_line(ctx, "stt missing.mp3") is True
        assert "File not found" in capsys.readouterr().err


def test_interactive_session(runner, patched_client):
    result = runner.invoke(cli, ["--api-key", "sk_test", "interactive"], input="help\nuser\nexit\n")
    assert result.exit_code == 0
    assert "ElevenLabs Interactive Mode" in result.output
    assert "user_123" in result.output
    assert "Goodbye!" in result.output


def test_mcp_command_passes_selection(runner, monkeypatch):
    run_server = MagicMock()
    monkeypatch.setattr("elevenlabs_cli.mcp.server.run_server", run_server)
    result = runner.invoke(
        cli, ["--api-key", "sk_test", "mcp", "--disable-tools", "delete_voice,delete_agent", "--disable-admin"]
    )
    assert result.exit_code == 0
    args, kwargs = run_server.call_args
    assert args[0] == "sk_test"
    assert kwargs["disable_tools"] == ["delete_voice", "delete_agent"]
    assert kwargs["enable_tools"] is None
    assert kwargs["disable_admin"] is True
