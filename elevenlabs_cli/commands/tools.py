"""Agent tool management commands."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import click

from ..exceptions import ValidationError
from ..utils.client import client_from_context
from ..utils.output import OutputMode, format_output, print_success
from .common import confirm_action, output_mode


def parse_schema(schema: str) -> Dict[str, Any]:
    """
    Parse a tool configuration given inline or as ``@path`` to a JSON file.

    Raises:
        ValidationError: If the text is not a JSON object.
    """
    if schema.startswith("@"):
        path = Path(schema[1:])
        if not path.is_file():
            raise ValidationError(f"Schema file not found: {path}")
        schema = path.read_text(encoding="utf-8")
    try:
        config = json.loads(schema)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON schema: {e}")
    if not isinstance(config, dict):
        raise ValidationError("Tool schema must be a JSON object")
    return config


def build_tool_config(
    base: Dict[str, Any],
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    config = dict(base)
    if name:
        config["name"] = name
    if description:
        config["description"] = description
    config.setdefault("type", "webhook")
    return config


@click.group()
def tools():
    """Manage tools that agents can call.

    \b
    Examples:
      elevenlabs tools list
      elevenlabs tools create -n lookup_order -d "Look up an order" -s @order_tool.json
      elevenlabs tools update <tool_id> -d "New description"
    """
    pass


@tools.command("list")
@click.option("--search", "-s", help="Filter by name")
@click.option("--limit", "-l", type=int, help="Maximum results")
@click.pass_context
def list_tools(ctx: click.Context, search: Optional[str], limit: Optional[int]):
    """List tools."""
    client = client_from_context(ctx)
    result = client.tools.list(search=search, page_size=limit)
    mode = output_mode(ctx)
    if mode.machine_readable:
        format_output(result, mode)
        return
    rows = [
        {
            "id": t.get("id"),
            "name": (t.get("tool_config") or {}).get("name"),
            "type": (t.get("tool_config") or {}).get("type"),
            "description": ((t.get("tool_config") or {}).get("description") or "")[:60],
        }
        for t in result.get("tools") or []
    ]
    format_output(rows, mode, title="Tools")


@tools.command("get")
@click.argument("tool_id")
@click.pass_context
def get_tool(ctx: click.Context, tool_id: str):
    """Show a tool's configuration."""
    client = client_from_context(ctx)
    result = client.tools.get(tool_id)
    mode = output_mode(ctx)
    # Tool configs are nested; tables would hide them
    format_output(result, mode if mode.machine_readable else OutputMode.JSON)


@tools.command("create")
@click.option("--name", "-n", required=True, help="Tool name")
@click.option("--description", "-d", required=True, help="What the tool does")
@click.option("--schema", "-s", required=True, help="Tool config JSON, or @file.json")
@click.pass_context
def create_tool(ctx: click.Context, name: str, description: str, schema: str):
    """Create a tool."""
    config = build_tool_config(parse_schema(schema), name, description)
    client = client_from_context(ctx)
    result = client.tools.create(config)
    print_success(f"Tool created: {result.get('id')}", output_mode(ctx))


@tools.command("update")
@click.argument("tool_id")
@click.option("--name", "-n", help="New name")
@click.option("--description", "-d", help="New description")
@click.option("--schema", "-s", help="Replacement tool config JSON, or @file.json")
@click.pass_context
def update_tool(
    ctx: click.Context,
    tool_id: str,
    name: Optional[str],
    description: Optional[str],
    schema: Optional[str],
):
    """Update a tool."""
    if not (name or description or schema):
        raise ValidationError("No updates specified. Use --name, --description or --schema")
    client = client_from_context(ctx)
    if schema:
        base = parse_schema(schema)
    else:
        base = client.tools.get(tool_id).get("tool_config") or {}
    client.tools.update(tool_id, build_tool_config(base, name, description))
    print_success(f"Tool {tool_id} updated", output_mode(ctx))


@tools.command("delete")
@click.argument("tool_id")
@click.pass_context
def delete_tool(ctx: click.Context, tool_id: str):
    """Delete a tool."""
    if not confirm_action(ctx, f"Delete tool {tool_id}?"):
        return
    client = client_from_context(ctx)
    client.tools.delete(tool_id)
    print_success(f"Tool {tool_id} deleted", output_mode(ctx))
