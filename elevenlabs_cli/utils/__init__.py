"""CLI utilities."""

from .client import ElevenLabsClient, client_from_context, get_client
from .config import Config, load_config, save_config
from .output import OutputMode, format_output, print_api_error
from .retry import with_retry

__all__ = [
    "Config",
    "load_config",
    "save_config",
    "ElevenLabsClient",
    "get_client",
    "client_from_context",
    "OutputMode",
    "format_output",
    "print_api_error",
    "with_retry",
]
