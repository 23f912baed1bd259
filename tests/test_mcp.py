"""Tests for the MCP tool catalogue, backends and server."""

import json
from unittest.mock import MagicMock

import httpx
import pytest
import respx

from elevenlabs_cli.exceptions import NotFoundError, ServerError, ValidationError
from elevenlabs_cli.mcp.backend import DescriptiveToolBackend, HttpToolBackend
from elevenlabs_cli.mcp.server import build_server, create_backend, select_tools
from elevenlabs_cli.mcp.tools import TOOLS, ToolCategory, filter_tools, get_tool, tool_names
from elevenlabs_cli.utils.client import DEFAULT_BASE_URL, ElevenLabsClient
from elevenlabs_cli.utils.config import McpConfig


class TestCatalogue:
    """Test the tool definitions."""

    def test_names_unique(self):
        names = tool_names()
        assert len(names) == len(set(names))

    def test_core_tools_present(self):
        names = set(tool_names())
        for name in ("text_to_speech", "speech_to_text", "list_voices", "create_agent",
                     "list_conversations", "generate_music", "import_phone"):
            assert name in names

    def test_describe(self):
        assert get_tool("get_voice").describe() == "Get voice details. Parameters: voice_id (required)"
        assert get_tool("list_models").describe() == "List models"

    def test_unknown_tool(self):
        with pytest.raises(ValidationError, match="Unknown tool: nope"):
            get_tool("nope")

    def test_signature_required_first(self):
        params = list(get_tool("text_to_speech").signature().parameters.values())
        required = [p.name for p in params if p.default is p.empty]
        assert params[0].name in required

    def test_check_arguments_missing(self):
        with pytest.raises(ValidationError, match="missing required parameter"):
            get_tool("get_voice").check_arguments({})

    def test_check_arguments_unknown(self):
        with pytest.raises(ValidationError, match="unknown parameter"):
            get_tool("get_voice").check_arguments({"voice_id": "v1", "colour": "red"})

    def test_check_arguments_defaults(self):
        args = get_tool("list_voices").check_arguments({})
        assert args == {"detailed": False}


class TestFiltering:
    """Test tool selection."""

    def test_no_filters(self):
        assert filter_tools(TOOLS) == list(TOOLS)

    def test_enable_list_wins(self):
        selected = filter_tools(TOOLS, enable=["list_voices", "get_voice"], disable=["list_voices"])
        assert tool_names(selected) == ["list_voices", "get_voice"]

    def test_disable_list(self):
        selected = filter_tools(TOOLS, disable=["delete_voice"])
        assert "delete_voice" not in tool_names(selected)
        assert len(selected) == len(TOOLS) - 1

    def test_disable_admin_keeps_read_only(self):
        selected = filter_tools(TOOLS, disable_admin=True)
        assert selected
        assert all(t.category is ToolCategory.READ for t in selected)

    def test_disable_destructive(self):
        selected = filter_tools(TOOLS, disable_destructive=True)
        assert "delete_agent" not in tool_names(selected)
        assert "create_agent" in tool_names(selected)

    def test_config_and_flags(self):
        settings = McpConfig(disable_tools=["list_models"], disable_destructive=True)
        selected = tool_names(select_tools(settings))
        assert "list_models" not in selected
        assert "delete_voice" not in selected

        selected = tool_names(select_tools(settings, enable_tools=["list_models"]))
        assert selected == ["list_models"]


class TestBackends:
    """Test tool execution."""

    def test_descriptive_backend(self):
        backend = DescriptiveToolBackend(TOOLS)
        assert backend.call("get_voice", {"voice_id": "v1"}).startswith("Get voice details")

    def test_disabled_tool(self):
        backend = DescriptiveToolBackend(filter_tools(TOOLS, enable=["list_voices"]))
        with pytest.raises(ValidationError, match="Tool 'get_voice' is not enabled"):
            backend.call("get_voice", {"voice_id": "v1"})

    def test_create_backend_without_key(self):
        assert isinstance(create_backend(TOOLS, None), DescriptiveToolBackend)

    def test_create_backend_with_key(self):
        assert isinstance(create_backend(TOOLS, "sk_test"), HttpToolBackend)

    def test_http_backend_returns_json(self):
        client = MagicMock()
        client.voices.get.return_value = {"voice_id": "v1", "name": "Brian"}
        backend = HttpToolBackend(client, TOOLS)
        result = json.loads(backend.call("get_voice", {"voice_id": "v1"}))
        assert result["name"] == "Brian"
        client.voices.get.assert_called_once_with("v1")

    def test_http_backend_validates_before_calling(self):
        client = MagicMock()
        backend = HttpToolBackend(client, TOOLS)
        with pytest.raises(ValidationError):
            backend.call("get_voice", {})
        client.voices.get.assert_not_called()

    def test_http_backend_retries_transient(self, monkeypatch):
        monkeypatch.setattr("elevenlabs_cli.utils.retry.time.sleep", lambda seconds: None)
        client = MagicMock()
        client.models.list.side_effect = [ServerError("busy"), [{"model_id": "eleven_v3"}]]
        backend = HttpToolBackend(client, TOOLS)
        assert json.loads(backend.call("list_models")) == [{"model_id": "eleven_v3"}]
        assert client.models.list.call_count == 2

    def test_http_backend_does_not_retry_not_found(self):
        client = MagicMock()
        client.agents.get.side_effect = NotFoundError("no agent")
        backend = HttpToolBackend(client, TOOLS)
        with pytest.raises(NotFoundError):
            backend.call("get_agent", {"agent_id": "a1"})
        assert client.agents.get.call_count == 1

    @respx.mock
    def test_write_tool_not_retried(self, monkeypatch):
        monkeypatch.setattr("elevenlabs_cli.utils.retry.time.sleep", lambda seconds: None)
        route = respx.post(f"{DEFAULT_BASE_URL}/convai/agents/create").mock(
            return_value=httpx.Response(502, json={"detail": "bad gateway"})
        )
        with ElevenLabsClient("sk_test") as client:
            backend = HttpToolBackend(client, TOOLS)
            with pytest.raises(ServerError):
                backend.call("create_agent", {"name": "Bot"})
        assert route.call_count == 1

    @respx.mock
    def test_read_tool_retried_over_http(self, monkeypatch):
        monkeypatch.setattr("elevenlabs_cli.utils.retry.time.sleep", lambda seconds: None)
        route = respx.get(f"{DEFAULT_BASE_URL}/convai/agents/a1").mock(
            side_effect=[httpx.Response(502), httpx.Response(200, json={"agent_id": "a1"})]
        )
        with ElevenLabsClient("sk_test") as client:
            result = json.loads(HttpToolBackend(client, TOOLS).call("get_agent", {"agent_id": "a1"}))
        assert result == {"agent_id": "a1"}
        assert route.call_count == 2

    def test_text_to_speech_saves_file(self, tmp_path):
        client = MagicMock()
        client.tts.convert.return_value = b"ID3audio"
        backend = HttpToolBackend(client, TOOLS)
        output = tmp_path / "out.mp3"
        result = json.loads(backend.call("text_to_speech", {"text": "Hello", "output_file": str(output)}))
        assert output.read_bytes() == b"ID3audio"
        assert result["bytes"] == len(b"ID3audio")


class TestServer:
    """Test FastMCP registration."""

    @pytest.mark.asyncio
    async def test_registers_selected_tools(self):
        tools = filter_tools(TOOLS, enable=["get_voice", "delete_voice"])
        server = build_server(tools, DescriptiveToolBackend(tools))
        listed = {tool.name: tool for tool in await server.list_tools()}
        assert set(listed) == {"get_voice", "delete_voice"}
        assert listed["get_voice"].inputSchema["required"] == ["voice_id"]
        assert listed["get_voice"].annotations.readOnlyHint is True
        assert listed["delete_voice"].annotations.destructiveHint is True
