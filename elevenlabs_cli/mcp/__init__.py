"""
ElevenLabs CLI - MCP

Model Context Protocol server exposing CLI operations as tools.
"""

from elevenlabs_cli.mcp.backend import DescriptiveToolBackend, HttpToolBackend, ToolBackend
from elevenlabs_cli.mcp.tools import TOOLS, ToolCategory, ToolParam, ToolSpec, filter_tools, get_tool

__all__ = [
    "TOOLS",
    "ToolBackend",
    "ToolCategory",
    "ToolParam",
    "ToolSpec",
    "HttpToolBackend",
    "DescriptiveToolBackend",
    "filter_tools",
    "get_tool",
]
