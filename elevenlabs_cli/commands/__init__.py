"""CLI command modules."""

from .account import models, usage, user
from .agents import agent
from .config import config
from .conversations import converse
from .dialogue import dialogue, voice_design
from .history import history
from .interactive import interactive
from .knowledge import knowledge, rag
from .library import library, pronunciation, samples
from .mcp import mcp
from .music import music
from .phone import phone
from .sound import isolate, sfx, voice_changer
from .stt import stt
from .studio import audio_native, dub, projects
from .tools import tools
from .tts import realtime_tts, tts, tts_stream, tts_timestamps
from .voice import voice
from .webhooks import webhook
from .workspace import workspace

__all__ = [
    "tts",
    "tts_timestamps",
    "tts_stream",
    "realtime_tts",
    "stt",
    "voice_changer",
    "isolate",
    "sfx",
    "dialogue",
    "voice_design",
    "music",
    "voice",
    "library",
    "samples",
    "pronunciation",
    "agent",
    "converse",
    "knowledge",
    "rag",
    "tools",
    "phone",
    "webhook",
    "user",
    "models",
    "usage",
    "history",
    "dub",
    "projects",
    "audio_native",
    "workspace",
    "config",
    "interactive",
    "mcp",
]
