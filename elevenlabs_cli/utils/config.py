"""Configuration management for the CLI."""

import os
import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli_w
from platformdirs import user_config_dir

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from ..exceptions import ConfigError

CONFIG_APP_NAME = "com.elevenlabs.cli"
CONFIG_FILE_NAME = "config.toml"
CONFIG_PATH_ENV = "ELEVENLABS_CONFIG_PATH"

# Keys `config set` / `config unset` accept.
SETTABLE_KEYS = ("api_key", "default_voice", "default_model", "default_output_format")


@dataclass
class McpConfig:
    """MCP server tool filtering."""

    enable_tools: Optional[List[str]] = None
    disable_tools: Optional[List[str]] = None
    disable_admin: bool = False
    disable_destructive: bool = False
    read_only: bool = False


@dataclass
class Config:
    """CLI configuration."""

    api_key: Optional[str] = None
    default_voice: Optional[str] = None
    default_model: Optional[str] = None
    default_output_format: Optional[str] = None
    mcp: McpConfig = field(default_factory=McpConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict without unset values, suitable for TOML."""
        return _drop_none(asdict(self))

    def to_toml(self) -> str:
        return tomli_w.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        mcp_data = data.get("mcp") or {}
        if not isinstance(mcp_data, dict):
            raise ConfigError("Invalid config: [mcp] must be a table")
        return cls(
            api_key=data.get("api_key"),
            default_voice=data.get("default_voice"),
            default_model=data.get("default_model"),
            default_output_format=data.get("default_output_format"),
            mcp=McpConfig(
                enable_tools=mcp_data.get("enable_tools"),
                disable_tools=mcp_data.get("disable_tools"),
                disable_admin=bool(mcp_data.get("disable_admin", False)),
                disable_destructive=bool(mcp_data.get("disable_destructive", False)),
                read_only=bool(mcp_data.get("read_only", False)),
            ),
        )

    @classmethod
    def from_toml(cls, text: str) -> "Config":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file: {e}")
        return cls.from_dict(data)


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, dict):
            value = _drop_none(value)
        result[key] = value
    return result


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    return Path(user_config_dir(CONFIG_APP_NAME, appauthor=False))


def get_config_path() -> Path:
    """Get the configuration file path."""
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return Path(override)
    return get_config_dir() / CONFIG_FILE_NAME


def load_config(path: Optional[Path] = None) -> Config:
    """Load configuration from file. A missing file yields the defaults."""
    config_path = path or get_config_path()

    if not config_path.exists():
        return Config()

    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Could not read {config_path}: {e}")
    return Config.from_toml(text)


def save_config(config: Config, path: Optional[Path] = None) -> Path:
    """Rewrite the whole configuration file."""
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    config_path.touch(mode=0o600, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        f.write(config.to_toml())
    # touch() leaves the mode of an existing file alone
    os.chmod(config_path, 0o600)
    return config_path


def _check_key(key: str) -> None:
    if key not in SETTABLE_KEYS:
        raise ConfigError(
            f"Unknown configuration key: {key}. Valid keys: {', '.join(SETTABLE_KEYS)}"
        )


def set_value(config: Config, key: str, value: str) -> Config:
    """Set an allowlisted key on ``config`` and return it."""
    _check_key(key)
    setattr(config, key, value)
    return config


def unset_value(config: Config, key: str) -> Config:
    """Clear an allowlisted key on ``config`` and return it."""
    _check_key(key)
    setattr(config, key, None)
    return config


def mask_secret(value: Optional[str]) -> str:
    """Mask an API key for display."""
    if not value:
        return "Not set"
    if len(value) <= 12:
        return value[:2] + "..."
    return value[:8] + "..." + value[-4:]
