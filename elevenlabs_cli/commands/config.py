"""Configuration management commands."""

import click

from ..utils.config import (
    SETTABLE_KEYS,
    get_config_path,
    load_config,
    mask_secret,
    save_config,
    set_value,
    unset_value,
)
from ..utils.files import validate_output_format
from ..utils.output import format_output, print_kv, print_success
from .common import output_mode


@click.group()
def config():
    """Manage CLI configuration.

    \b
    Examples:
      elevenlabs config show
      elevenlabs config set api_key sk_...
      elevenlabs config set default_voice Rachel
      elevenlabs config unset default_model
    """
    pass


@config.command("show")
@click.option("--all", "-a", "show_all", is_flag=True, help="Show the API key unmasked")
@click.pass_context
def show_config(ctx: click.Context, show_all: bool):
    """Show current configuration."""
    mode = output_mode(ctx)
    cfg = load_config()
    api_key = cfg.api_key if show_all else (mask_secret(cfg.api_key) if cfg.api_key else None)

    if mode.machine_readable:
        data = cfg.to_dict()
        if api_key:
            data["api_key"] = api_key
        format_output(data, mode)
        return

    print_kv(
        [
            ("Config Path", str(get_config_path())),
            ("API Key", api_key or "Not set"),
            ("Default Voice", cfg.default_voice or "Not set"),
            ("Default Model", cfg.default_model or "Not set"),
            ("Default Output Format", cfg.default_output_format or "Not set"),
            ("MCP Enabled Tools", ", ".join(cfg.mcp.enable_tools or []) or "all"),
            ("MCP Disabled Tools", ", ".join(cfg.mcp.disable_tools or []) or "none"),
            ("MCP Admin Tools", "disabled" if cfg.mcp.disable_admin or cfg.mcp.read_only else "enabled"),
        ],
        mode,
        title="CLI Configuration",
    )


@config.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value")
@click.pass_context
def set_config(ctx: click.Context, key: str, value: str):
    """Set a configuration value.

    \b
    Available keys:
      api_key               - ElevenLabs API key
      default_voice         - Voice used when --voice is omitted
      default_model         - Model used when --model is omitted
      default_output_format - Audio format, e.g. mp3_44100_128
    """
    if key == "default_output_format":
        value = validate_output_format(value)
    cfg = set_value(load_config(), key, value)
    path = save_config(cfg)
    shown = mask_secret(value) if key == "api_key" else value
    print_success(f"Configuration updated: {key} = {shown} ({path})", output_mode(ctx))


@config.command("unset")
@click.argument("key", type=click.Choice(SETTABLE_KEYS))
@click.pass_context
def unset_config(ctx: click.Context, key: str):
    """Remove a configuration value."""
    cfg = unset_value(load_config(), key)
    save_config(cfg)
    print_success(f"Configuration key removed: {key}", output_mode(ctx))


@config.command("path")
def config_path():
    """Print the configuration file path."""
    click.echo(str(get_config_path()))
