"""Shared pytest fixtures for testing."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from elevenlabs_cli.audio import NullAudioBackend, set_audio_backend


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point the CLI at a throwaway config file and strip credentials from the environment."""
    config_path = tmp_path / "config.toml"
    monkeypatch.setenv("ELEVENLABS_CONFIG_PATH", str(config_path))
    monkeypatch.delenv("ELEVENLABS_API_KEY", raising=False)
    monkeypatch.delenv("ELEVENLABS_BASE_URL", raising=False)
    monkeypatch.chdir(tmp_path)
    set_audio_backend(NullAudioBackend())
    yield config_path
    set_audio_backend(None)


@pytest.fixture
def config_path(isolated_environment):
    return isolated_environment


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def mock_client():
    """Create mock API client."""
    client = MagicMock()

    client.voices.list.return_value = {
        "voices": [
            {"voice_id": "voice_1", "name": "Brian", "category": "premade"},
            {"voice_id": "voice_2", "name": "Alice", "category": "cloned"},
        ]
    }
    client.voices.get.return_value = {
        "voice_id": "voice_1",
        "name": "Brian",
        "category": "premade",
        "labels": {"accent": "american"},
        "settings": {"stability": 0.5, "similarity_boost": 0.75},
    }

    client.agents.list.return_value = {
        "agents": [
            {"agent_id": "agent_1", "name": "Support Bot", "created_at_unix_secs": 1700000000},
        ],
        "has_more": False,
    }
    client.agents.get.return_value = {
        "agent_id": "agent_1",
        "name": "Support Bot",
        "conversation_config": {"agent": {"first_message": "Hi!"}},
    }
    client.agents.create.return_value = {"agent_id": "agent_new"}

    client.user.get.return_value = {
        "user_id": "user_123",
        "first_name": "Test",
        "subscription": {"tier": "creator", "character_count": 1200, "character_limit": 100000},
    }

    client.models.list.return_value = [
        {"model_id": "eleven_multilingual_v2", "name": "Multilingual v2", "can_do_text_to_speech": True},
    ]

    client.tts.convert.return_value = b"ID3fake-mp3-audio"

    return client


@pytest.fixture
def patched_client(mock_client):
    """Install ``mock_client`` as the client every command receives."""
    with patch("elevenlabs_cli.utils.client.get_client", return_value=mock_client):
        yield mock_client
