"""
ElevenLabs CLI - MCP Server

Exposes the tool catalogue over MCP stdio using FastMCP.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Sequence

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from elevenlabs_cli import __version__
from elevenlabs_cli.mcp.backend import DescriptiveToolBackend, HttpToolBackend, ToolBackend
from elevenlabs_cli.mcp.tools import TOOLS, ToolCategory, ToolSpec, filter_tools
from elevenlabs_cli.utils.client import get_client
from elevenlabs_cli.utils.config import McpConfig

logger = logging.getLogger(__name__)

SERVER_NAME = "ElevenLabs"


def _tool_function(spec: ToolSpec, backend: ToolBackend) -> Any:
    async def tool(**arguments: Any) -> str:
        # Handlers are blocking (httpx, nested asyncio.run), keep them off the server loop
        return await asyncio.to_thread(backend.call, spec.name, arguments)

    tool.__name__ = spec.name
    tool.__doc__ = spec.describe()
    tool.__signature__ = spec.signature()  # type: ignore[attr-defined]
    return tool


def build_server(tools: Sequence[ToolSpec], backend: ToolBackend) -> FastMCP:
    """Create a FastMCP server with one MCP tool per catalogue entry."""
    server = FastMCP(SERVER_NAME)
    for spec in tools:
        server.add_tool(
            _tool_function(spec, backend),
            name=spec.name,
            description=spec.describe(),
            annotations=ToolAnnotations(
                readOnlyHint=spec.category is ToolCategory.READ,
                destructiveHint=spec.category is ToolCategory.DESTRUCTIVE,
            ),
        )
    return server


def select_tools(
    settings: McpConfig,
    enable_tools: Optional[Sequence[str]] = None,
    disable_tools: Optional[Sequence[str]] = None,
    disable_admin: bool = False,
) -> list:
    """Apply command-line selections on top of the ``[mcp]`` config table."""
    return filter_tools(
        TOOLS,
        enable=enable_tools or settings.enable_tools,
        disable=disable_tools or settings.disable_tools,
        disable_admin=disable_admin or settings.disable_admin,
        disable_destructive=settings.disable_destructive,
        read_only=settings.read_only,
    )


def create_backend(tools: Sequence[ToolSpec], api_key: Optional[str]) -> ToolBackend:
    if api_key:
        return HttpToolBackend(get_client(api_key), tools)
    logger.warning("No API key configured; MCP tools will only describe themselves")
    return DescriptiveToolBackend(tools)


def run_server(
    api_key: Optional[str],
    settings: McpConfig,
    enable_tools: Optional[Sequence[str]] = None,
    disable_tools: Optional[Sequence[str]] = None,
    disable_admin: bool = False,
) -> None:
    """Serve the selected tools over stdio until the client disconnects."""
    tools = select_tools(settings, enable_tools, disable_tools, disable_admin)
    backend = create_backend(tools, api_key)
    logger.info(f"Starting elevenlabs-cli {__version__} MCP server with {len(tools)} tools")
    build_server(tools, backend).run(transport="stdio")
