"""MCP server command."""

from typing import Optional

import click

from ..utils.config import load_config
from ..utils.output import err_console
from .common import split_csv


@click.command("mcp")
@click.option("--enable-tools", help="Comma-separated tools to expose (all others hidden)")
@click.option("--disable-tools", help="Comma-separated tools to hide")
@click.option("--disable-admin", is_flag=True, help="Expose read-only tools only")
@click.pass_context
def mcp(
    ctx: click.Context,
    enable_tools: Optional[str],
    disable_tools: Optional[str],
    disable_admin: bool,
):
    """Run a Model Context Protocol server on stdio.

    Tool selection from the [mcp] table of the config file applies unless
    overridden here.

    \b
    Examples:
      elevenlabs mcp
      elevenlabs mcp --disable-admin
      elevenlabs mcp --enable-tools text_to_speech,list_voices
    """
    # Imported lazily so the rest of the CLI works without the mcp package loaded
    from ..mcp.server import run_server

    config = ctx.obj.get("config") or load_config()
    api_key = ctx.obj.get("api_key")
    if not api_key:
        # stdout carries the protocol; warnings go to stderr
        err_console.print(
            "[yellow]![/yellow] No API key configured. Tools will describe themselves "
            "but not call the API. Set ELEVENLABS_API_KEY or run 'elevenlabs config set api_key ...'"
        )
    run_server(
        api_key,
        config.mcp,
        enable_tools=split_csv(enable_tools) or None,
        disable_tools=split_csv(disable_tools) or None,
        disable_admin=disable_admin,
    )
