"""Tests for configuration handling."""

import json
import os
import stat
import sys

import pytest

from elevenlabs_cli.exceptions import ConfigError
from elevenlabs_cli.main import cli
from elevenlabs_cli.utils.config import (
    Config,
    McpConfig,
    get_config_path,
    load_config,
    mask_secret,
    save_config,
    set_value,
    unset_value,
)


class TestConfigFile:
    """Test loading and saving the TOML file."""

    def test_missing_file_gives_defaults(self, config_path):
        assert not config_path.exists()
        assert load_config() == Config()

    def test_env_override_path(self, config_path):
        assert get_config_path() == config_path

    def test_round_trip_with_mcp_table(self, config_path):
        cfg = Config(
            api_key="sk_abc",
            default_voice="Rachel",
            mcp=McpConfig(disable_tools=["delete_voice"], read_only=True),
        )
        save_config(cfg)
        loaded = load_config()
        assert loaded.api_key == "sk_abc"
        assert loaded.default_voice == "Rachel"
        assert loaded.default_model is None
        assert loaded.mcp.disable_tools == ["delete_voice"]
        assert loaded.mcp.read_only is True

    def test_unset_values_not_written(self, config_path):
        save_config(Config(default_model="eleven_v3"))
        text = config_path.read_text(encoding="utf-8")
        assert 'default_model = "eleven_v3"' in text
        assert "api_key" not in text

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_existing_file_made_private(self, config_path):
        config_path.write_text("", encoding="utf-8")
        os.chmod(config_path, 0o644)
        save_config(Config(api_key="sk_abc"))
        assert stat.S_IMODE(config_path.stat().st_mode) == 0o600

    def test_invalid_toml(self, config_path):
        config_path.write_text("api_key = ", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid config file"):
            load_config()

    def test_mcp_must_be_table(self, config_path):
        config_path.write_text('mcp = "yes"\n', encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config()


class TestConfigValues:
    """Test the settable key allowlist and masking."""

    def test_set_and_unset(self):
        cfg = set_value(Config(), "default_voice", "Rachel")
        assert cfg.default_voice == "Rachel"
        assert unset_value(cfg, "default_voice").default_voice is None

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="Unknown configuration key: color"):
            set_value(Config(), "color", "blue")

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, "Not set"),
            ("", "Not set"),
            ("sk_short", "sk..."),
            ("sk_1234567890abcdef", "sk_12345...cdef"),
        ],
    )
    def test_mask_secret(self, value, expected):
        assert mask_secret(value) == expected


class TestConfigCommands:
    """Test the config command group."""

    def test_set_then_show(self, runner):
        result = runner.invoke(cli, ["config", "set", "default_voice", "Rachel"])
        assert result.exit_code == 0
        assert "default_voice = Rachel" in result.output

        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 0
        assert "Rachel" in result.output

    def test_api_key_masked(self, runner):
        result = runner.invoke(cli, ["config", "set", "api_key", "sk_1234567890abcdef"])
        assert result.exit_code == 0
        assert "sk_1234567890abcdef" not in result.output

        result = runner.invoke(cli, ["--json", "config", "show"])
        assert json.loads(result.output)["api_key"] == "sk_12345...cdef"

        result = runner.invoke(cli, ["--json", "config", "show", "--all"])
        assert json.loads(result.output)["api_key"] == "sk_1234567890abcdef"

    def test_set_validates_output_format(self, runner, config_path):
        result = runner.invoke(cli, ["config", "set", "default_output_format", "flac"])
        assert result.exit_code == 1
        assert "Invalid output format" in result.output
        assert not config_path.exists()

    def test_set_unknown_key(self, runner):
        result = runner.invoke(cli, ["config", "set", "color", "blue"])
        assert result.exit_code == 1
        assert "Unknown configuration key" in result.output

    def test_unset(self, runner):
        runner.invoke(cli, ["config", "set", "default_model", "eleven_v3"])
        result = runner.invoke(cli, ["config", "unset", "default_model"])
        assert result.exit_code == 0
        assert load_config().default_model is None

    def test_path(self, runner, config_path):
        result = runner.invoke(cli, ["config", "path"])
        assert result.exit_code == 0
        assert result.output.strip() == str(config_path)

    def test_default_voice_used_by_tts(self, runner, patched_client):
        runner.invoke(cli, ["config", "set", "default_voice", "Rachel"])
        result = runner.invoke(cli, ["--api-key", "sk_test", "tts", "Hello", "-o", "out.mp3"])
        assert result.exit_code == 0
        assert patched_client.tts.convert.call_args[0][0] == "Rachel"
