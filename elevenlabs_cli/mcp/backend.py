"""
ElevenLabs CLI - MCP Tool Backends

A ``ToolBackend`` turns a tool call into the text returned to the assistant.
``HttpToolBackend`` performs the call against the API; ``DescriptiveToolBackend``
only describes the tool and is used when no API key is configured.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

from elevenlabs_cli.exceptions import ValidationError
from elevenlabs_cli.mcp.tools import ToolCategory, ToolSpec
from elevenlabs_cli.utils.client import ElevenLabsClient
from elevenlabs_cli.utils.retry import DEFAULT_MAX_ATTEMPTS, with_retry

logger = logging.getLogger(__name__)


class ToolBackend(ABC):
    """Executes tool calls by name."""

    def __init__(self, tools: Iterable[ToolSpec]) -> None:
        self._tools: Dict[str, ToolSpec] = {tool.name: tool for tool in tools}

    @property
    def tools(self) -> Dict[str, ToolSpec]:
        return self._tools

    def get(self, name: str) -> ToolSpec:
        try:
            return self._tools[name]
        except KeyError:
            raise ValidationError(f"Tool '{name}' is not enabled")

    @abstractmethod
    def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        """Run tool ``name`` and return its text result."""


class DescriptiveToolBackend(ToolBackend):
    """Answers every call with the tool's description; makes no requests."""

    def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        return self.get(name).describe()


class HttpToolBackend(ToolBackend):
    """
    Runs tool handlers against the ElevenLabs API.

    Transient failures (rate limits, 5xx, network errors, timeouts) of read
    tools are retried with backoff. Write and destructive tools run once.
    Results are returned as pretty-printed JSON.
    """

    def __init__(
        self,
        client: ElevenLabsClient,
        tools: Iterable[ToolSpec],
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        super().__init__(tools)
        self.client = client
        self.max_attempts = max_attempts

    def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        tool = self.get(name)
        args = tool.check_arguments(arguments or {})
        logger.debug(f"Calling tool {name} with {sorted(k for k, v in args.items() if v is not None)}")

        # Writes are not idempotent
        attempts = self.max_attempts if tool.category is ToolCategory.READ else 1
        result = with_retry(
            lambda: tool.handler(self.client, args),
            max_attempts=attempts,
            description=name,
        )
        if isinstance(result, str):
            return result
        return json.dumps(result, indent=2, default=str)
