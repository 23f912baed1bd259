"""
ElevenLabs CLI - Resources

This module contains all API resource classes.
"""

from elevenlabs_cli.resources.base import BaseResource
from elevenlabs_cli.resources.speech import (
    AudioIsolationResource,
    MusicResource,
    SoundEffectsResource,
    SpeechToSpeechResource,
    SpeechToTextResource,
    TextToDialogueResource,
    TextToSpeechResource,
    TextToVoiceResource,
)
from elevenlabs_cli.resources.voices import (
    PronunciationResource,
    SamplesResource,
    VoiceLibraryResource,
    VoicesResource,
)
from elevenlabs_cli.resources.agents import (
    AgentsResource,
    BatchCallsResource,
    ConversationsResource,
    KnowledgeBaseResource,
    PhoneNumbersResource,
    RagResource,
    ToolsResource,
)
from elevenlabs_cli.resources.account import (
    HistoryResource,
    ModelsResource,
    UsageResource,
    UserResource,
    WebhooksResource,
    WorkspaceResource,
)
from elevenlabs_cli.resources.studio import (
    AudioNativeResource,
    DubbingResource,
    ProjectsResource,
)

__all__ = [
    "BaseResource",
    "TextToSpeechResource",
    "SpeechToTextResource",
    "SpeechToSpeechResource",
    "AudioIsolationResource",
    "SoundEffectsResource",
    "TextToDialogueResource",
    "TextToVoiceResource",
    "MusicResource",
    "VoicesResource",
    "SamplesResource",
    "VoiceLibraryResource",
    "PronunciationResource",
    "AgentsResource",
    "BatchCallsResource",
    "ConversationsResource",
    "KnowledgeBaseResource",
    "RagResource",
    "ToolsResource",
    "PhoneNumbersResource",
    "UserResource",
    "ModelsResource",
    "UsageResource",
    "HistoryResource",
    "WorkspaceResource",
    "WebhooksResource",
    "DubbingResource",
    "ProjectsResource",
    "AudioNativeResource",
]
