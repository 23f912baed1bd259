"""ElevenLabs CLI - Command-line interface for the ElevenLabs audio AI platform."""

__version__ = "0.1.0"
__author__ = "ElevenLabs CLI Contributors"

__all__ = ["__version__"]
