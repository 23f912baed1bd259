"""
ElevenLabs CLI - MCP Tool Catalogue

Every tool the MCP server can expose: its name, description, parameters,
safety category and the handler that performs it through the API client.
"""

from __future__ import annotations

import base64
import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from elevenlabs_cli.exceptions import ValidationError
from elevenlabs_cli.utils.files import format_to_extension, generate_output_filename, write_bytes_to_file
from elevenlabs_cli.utils.validation import build_voice_settings

if TYPE_CHECKING:
    from elevenlabs_cli.utils.client import ElevenLabsClient

DEFAULT_TTS_MODEL = "eleven_multilingual_v2"
DEFAULT_OUTPUT_FORMAT = "mp3_44100_128"


class ToolCategory(str, Enum):
    """Safety class used by the admin/read-only/destructive filters."""

    READ = "read"
    WRITE = "write"
    DESTRUCTIVE = "destructive"


_TYPES = {"str": str, "int": int, "float": float, "bool": bool, "list": List[str]}


@dataclass(frozen=True)
class ToolParam:
    name: str
    type: str = "str"
    required: bool = False
    default: Any = None

    @property
    def annotation(self) -> Any:
        python_type = _TYPES[self.type]
        return python_type if self.required else Optional[python_type]


Handler = Callable[["ElevenLabsClient", Dict[str, Any]], Any]


@dataclass(frozen=True)
class ToolSpec:
    """A tool definition: metadata plus the handler that performs it."""

    name: str
    description: str
    category: ToolCategory
    handler: Handler
    params: Tuple[ToolParam, ...] = field(default_factory=tuple)

    def describe(self) -> str:
        """Human readable summary, e.g. ``Get voice details. Parameters: voice_id (required)``."""
        if not self.params:
            return self.description
        parts = [f"{p.name} (required)" if p.required else p.name for p in self.params]
        return f"{self.description}. Parameters: {', '.join(parts)}"

    def signature(self) -> inspect.Signature:
        """Call signature from which MCP derives the tool's input schema."""
        ordered = sorted(self.params, key=lambda p: not p.required)
        parameters = [
            inspect.Parameter(
                p.name,
                inspect.Parameter.KEYWORD_ONLY,
                default=inspect.Parameter.empty if p.required else p.default,
                annotation=p.annotation,
            )
            for p in ordered
        ]
        return inspect.Signature(parameters, return_annotation=str)

    def check_arguments(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        missing = [p.name for p in self.params if p.required and arguments.get(p.name) in (None, "")]
        if missing:
            raise ValidationError(f"{self.name}: missing required parameter(s): {', '.join(missing)}")
        known = {p.name: p.default for p in self.params}
        unknown = set(arguments) - set(known)
        if unknown:
            raise ValidationError(f"{self.name}: unknown parameter(s): {', '.join(sorted(unknown))}")
        merged = dict(known)
        merged.update({k: v for k, v in arguments.items() if v is not None})
        return merged


def _p(name: str, type: str = "str", required: bool = False, default: Any = None) -> ToolParam:
    return ToolParam(name=name, type=type, required=required, default=default)


def _req(name: str, type: str = "str") -> ToolParam:
    return ToolParam(name=name, type=type, required=True)


# =============================================================================
# Handler helpers
# =============================================================================


def _save_audio(data: bytes, output_file: Optional[str], prefix: str, output_format: str = DEFAULT_OUTPUT_FORMAT) -> Dict[str, Any]:
    """Write generated audio to disk and describe where it went."""
    path = output_file or generate_output_filename(prefix, format_to_extension(output_format))
    written = write_bytes_to_file(data, path)
    return {"success": True, "output_file": str(written.resolve()), "bytes": len(data)}


def _split(value: Optional[Any]) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return list(value)


def _text_to_speech(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    settings = build_voice_settings(a["stability"], a["similarity_boost"], a["style"], a["speaker_boost"])
    audio = client.tts.convert(a["voice"], a["text"], a["model"], a["output_format"], voice_settings=settings)
    return _save_audio(audio, a["output_file"], "speech", a["output_format"])


def _speech_to_text(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    return client.stt.transcribe(
        a["file"],
        model_id=a["model"],
        language_code=a["language"],
        num_speakers=a["num_speakers"],
        timestamps_granularity=a["timestamps"],
        diarize=a["diarize"],
    )


def _generate_sfx(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    audio = client.sound_effects.generate(a["text"], a["duration"], a["influence"])
    return _save_audio(audio, a["output_file"], "sfx")


def _audio_isolation(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    return _save_audio(client.audio_isolation.isolate(a["file"]), a["output_file"], "isolated")


def _voice_changer(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    audio = client.speech_to_speech.convert(a["voice"], a["file"], a["model"], DEFAULT_OUTPUT_FORMAT)
    return _save_audio(audio, a["output_file"], "voice_changed")


def _list_voices(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    voices = client.voices.list().get("voices", [])
    if a["detailed"]:
        return voices
    return [{"voice_id": v.get("voice_id"), "name": v.get("name"), "category": v.get("category")} for v in voices]


def _clone_voice(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    return client.voices.add(a["name"], _split(a["samples"]), description=a["description"])


def _edit_voice_settings(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    current = client.voices.settings(a["voice_id"])
    update = build_voice_settings(a["stability"], a["similarity_boost"], a["style"]) or {}
    current.update(update)
    return client.voices.edit_settings(a["voice_id"], current)


def _create_voice_design(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    return client.voice_design.create_previews(a["description"], a["text"])


def _create_dubbing(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    return client.dubbing.create(a["file"], a["target_lang"], source_lang=a["source_lang"])


def _download_history(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    return _save_audio(client.history.audio(a["history_item_id"]), a["output_file"], "history")


def _create_agent(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    agent: Dict[str, Any] = {}
    if a["first_message"]:
        agent["first_message"] = a["first_message"]
    if a["system_prompt"]:
        agent["prompt"] = {"prompt": a["system_prompt"]}
    config: Dict[str, Any] = {"agent": agent}
    if a["voice_id"]:
        config["tts"] = {"voice_id": a["voice_id"]}
    return client.agents.create(name=a["name"], conversation_config=config)


def _update_agent(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    data = {k: a[k] for k in ("name", "description") if a[k]}
    if not data:
        raise ValidationError("No updates specified. Use name or description")
    return client.agents.update(a["agent_id"], **data)


def _get_model_rates(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    for model in client.models.list():
        if model.get("model_id") == a["model_id"]:
            return {"model_id": a["model_id"], "model_rates": model.get("model_rates", {})}
    raise ValidationError(f"Unknown model: {a['model_id']}")


def _get_usage(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    from elevenlabs_cli.commands.account import default_usage_window

    start, end = default_usage_window(a["start"], a["end"])
    return client.usage.character_stats(start, end)


def _add_knowledge(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    source = a["source_type"]
    if source == "url":
        return client.knowledge_base.add_from_url(a["url"], name=a["name"])
    if source == "text":
        return client.knowledge_base.add_from_text(a["content"], name=a["name"])
    if source == "file":
        return client.knowledge_base.add_from_file(a["file"], name=a["name"])
    raise ValidationError("source_type must be one of: url, text, file")


def _create_dialogue(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    from elevenlabs_cli.commands.dialogue import parse_dialogue_inputs

    result = client.dialogue.convert_with_timestamps(
        parse_dialogue_inputs(a["inputs"]), a["model"], DEFAULT_OUTPUT_FORMAT
    )
    audio = base64.b64decode(result.get("audio_base64", ""))
    return _save_audio(audio, a["output_file"], "dialogue")


def _add_pronunciation(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    rule: Dict[str, Any] = {"string_to_replace": a["word"]}
    if a["phoneme"]:
        rule.update(type="phoneme", phoneme=a["phoneme"], alphabet=a["alphabet"])
    else:
        rule.update(type="alias", alias=a["alias"] or a["word"])
    return client.pronunciation.add_rules(a["dictionary_id"], [rule])


def _rules_from_file(path: str) -> List[Dict[str, Any]]:
    from elevenlabs_cli.commands.library import load_rules

    return load_rules(path)


def _get_pronunciation_pls(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    version = a["version_id"] or client.pronunciation.get(a["dictionary_id"]).get("latest_version_id")
    return {"pls": client.pronunciation.pls(a["dictionary_id"], version).decode("utf-8", errors="replace")}


def _import_phone(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    from elevenlabs_cli.commands.phone import build_import_body

    return client.phone_numbers.create(**build_import_body(a["number"], a["provider"], a["label"], a["sid"], a["token"], a["sip_uri"]))


def _converse_chat(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    import asyncio

    from elevenlabs_cli.streaming import ConversationSession

    session = ConversationSession(client.api_key, a["agent_id"], max_turns=1)
    asyncio.run(session.chat(message=a["message"]))
    return {"conversation_id": session.conversation_id, "transcript": session.transcript}


def _get_project_audio(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    snapshots = client.projects.snapshots(a["project_id"]).get("snapshots", [])
    if not snapshots:
        raise ValidationError(f"Project {a['project_id']} has no snapshots yet")
    latest = max(snapshots, key=lambda s: s.get("created_at_unix", 0))
    audio = client.projects.snapshot_audio(a["project_id"], latest["project_snapshot_id"])
    return _save_audio(audio, a["output_file"], "project")


def _generate_music(client: "ElevenLabsClient", a: Dict[str, Any]) -> Any:
    return _save_audio(client.music.generate(a["prompt"], a["duration"]), a["output_file"], "music")


# =============================================================================
# Catalogue
# =============================================================================

R, W, D = ToolCategory.READ, ToolCategory.WRITE, ToolCategory.DESTRUCTIVE

TOOLS: List[ToolSpec] = [
    # Speech
    ToolSpec("text_to_speech", "Convert text to natural speech", W, _text_to_speech, (
        _req("text"), _p("voice", default="Brian"), _p("model", default=DEFAULT_TTS_MODEL),
        _p("output_format", default=DEFAULT_OUTPUT_FORMAT), _p("stability", "float"),
        _p("similarity_boost", "float"), _p("style", "float"), _p("speaker_boost", "bool", default=False),
        _p("output_file"),
    )),
    ToolSpec("speech_to_text", "Transcribe audio to text", W, _speech_to_text, (
        _req("file"), _p("model", default="scribe_v1"), _p("language"), _p("diarize", "bool", default=False),
        _p("num_speakers", "int"), _p("timestamps", default="word"),
    )),
    ToolSpec("generate_sfx", "Generate sound effects from text", W, _generate_sfx, (
        _req("text"), _p("duration", "float"), _p("influence", "float"), _p("output_file"),
    )),
    ToolSpec("audio_isolation", "Remove background noise from audio", W, _audio_isolation, (
        _req("file"), _p("output_file"),
    )),
    ToolSpec("voice_changer", "Transform voice in audio", W, _voice_changer, (
        _req("file"), _req("voice"), _p("model", default="eleven_multilingual_sts_v2"), _p("output_file"),
    )),
    ToolSpec("create_dialogue", "Create dialogue", W, _create_dialogue, (
        _req("inputs"), _p("model", default="eleven_v3"), _p("output_file"),
    )),
    # Voices
    ToolSpec("list_voices", "List all available voices", R, _list_voices, (_p("detailed", "bool", default=False),)),
    ToolSpec("get_voice", "Get voice details", R, lambda c, a: c.voices.get(a["voice_id"]), (_req("voice_id"),)),
    ToolSpec("delete_voice", "Delete a voice", D, lambda c, a: c.voices.delete(a["voice_id"]), (_req("voice_id"),)),
    ToolSpec("clone_voice", "Clone a voice from samples", W, _clone_voice, (
        _req("name"), _req("samples", "list"), _p("description"),
    )),
    ToolSpec("voice_settings", "Get voice settings", R, lambda c, a: c.voices.settings(a["voice_id"]), (_req("voice_id"),)),
    ToolSpec("edit_voice_settings", "Edit voice settings", W, _edit_voice_settings, (
        _req("voice_id"), _p("stability", "float"), _p("similarity_boost", "float"), _p("style", "float"),
    )),
    ToolSpec("create_voice_design", "Create voice design from text", W, _create_voice_design, (
        _req("description"), _req("text"),
    )),
    ToolSpec("start_voice_fine_tune", "Start voice fine-tuning", W,
             lambda c, a: c.voices.start_fine_tune(a["voice_id"]), (_req("voice_id"),)),
    ToolSpec("get_voice_fine_tune_status", "Get fine-tune status", R,
             lambda c, a: c.voices.fine_tune_status(a["voice_id"]), (_req("voice_id"),)),
    ToolSpec("cancel_voice_fine_tune", "Cancel fine-tune", D,
             lambda c, a: c.voices.cancel_fine_tune(a["voice_id"]), (_req("voice_id"),)),
    ToolSpec("share_voice", "Share voice publicly", W, lambda c, a: c.voices.share(a["voice_id"]), (_req("voice_id"),)),
    ToolSpec("get_similar_voices", "Get similar voices", R,
             lambda c, a: c.voices.similar(voice_id=a["voice_id"]), (_req("voice_id"),)),
    ToolSpec("list_samples", "List samples", R, lambda c, a: c.samples.list(a["voice_id"]), (_req("voice_id"),)),
    ToolSpec("delete_sample", "Delete sample", D,
             lambda c, a: c.samples.delete(a["voice_id"], a["sample_id"]), (_req("voice_id"), _req("sample_id"))),
    ToolSpec("list_library_voices", "List library voices", R,
             lambda c, a: c.library.shared(page_size=a["page_size"]), (_p("page_size", "int", default=30),)),
    ToolSpec("list_library_collections", "List library collections", R, lambda c, a: c.library.collections()),
    # Pronunciation
    ToolSpec("list_pronunciations", "List pronunciations", R, lambda c, a: c.pronunciation.list()),
    ToolSpec("add_pronunciation", "Add pronunciation", W, _add_pronunciation, (
        _req("dictionary_id"), _req("word"), _p("phoneme"), _p("alias"), _p("alphabet", default="ipa"),
    )),
    ToolSpec("delete_pronunciation", "Delete pronunciation", D,
             lambda c, a: c.pronunciation.remove_rules(a["dictionary_id"], [a["word"]]),
             (_req("dictionary_id"), _req("word"))),
    ToolSpec("list_pronunciation_rules", "List pronunciation rules", R,
             lambda c, a: c.pronunciation.get(a["dictionary_id"]), (_req("dictionary_id"),)),
    ToolSpec("add_pronunciation_rules", "Add pronunciation rules", W,
             lambda c, a: c.pronunciation.add_rules(a["dictionary_id"], _rules_from_file(a["rules_file"])),
             (_req("dictionary_id"), _req("rules_file"))),
    ToolSpec("remove_pronunciation_rules", "Remove pronunciation rules", D,
             lambda c, a: c.pronunciation.remove_rules(
                 a["dictionary_id"], [r["string_to_replace"] for r in _rules_from_file(a["rules_file"])]),
             (_req("dictionary_id"), _req("rules_file"))),
    ToolSpec("get_pronunciation_pls", "Get pronunciation PLS", R, _get_pronunciation_pls, (
        _req("dictionary_id"), _p("version_id"),
    )),
    # Dubbing
    ToolSpec("create_dubbing", "Create dubbing project", W, _create_dubbing, (
        _req("file"), _req("target_lang"), _p("source_lang"),
    )),
    ToolSpec("get_dubbing_status", "Get dubbing status", R, lambda c, a: c.dubbing.get(a["dubbing_id"]), (_req("dubbing_id"),)),
    ToolSpec("delete_dubbing", "Delete dubbing", D, lambda c, a: c.dubbing.delete(a["dubbing_id"]), (_req("dubbing_id"),)),
    # History
    ToolSpec("list_history", "List generation history", R,
             lambda c, a: c.history.list(page_size=a["limit"]), (_p("limit", "int", default=10),)),
    ToolSpec("get_history_item", "Get history item", R,
             lambda c, a: c.history.get(a["history_item_id"]), (_req("history_item_id"),)),
    ToolSpec("delete_history_item", "Delete history item", D,
             lambda c, a: c.history.delete(a["history_item_id"]), (_req("history_item_id"),)),
    ToolSpec("history_feedback", "Submit history feedback", W,
             lambda c, a: c.history.feedback(a["history_item_id"], a["thumbs_up"], a["feedback"]),
             (_req("history_item_id"), _req("thumbs_up", "bool"), _p("feedback"))),
    ToolSpec("download_history", "Download history audio", R, _download_history, (
        _req("history_item_id"), _p("output_file"),
    )),
    # Agents
    ToolSpec("list_agents", "List agents", R, lambda c, a: c.agents.list(page_size=a["limit"]), (_p("limit", "int"),)),
    ToolSpec("get_agent_summaries", "Get agent summaries", R, lambda c, a: c.agents.summaries()),
    ToolSpec("create_agent", "Create agent", W, _create_agent, (
        _req("name"), _p("first_message"), _p("system_prompt"), _p("voice_id"),
    )),
    ToolSpec("get_agent", "Get agent", R, lambda c, a: c.agents.get(a["agent_id"]), (_req("agent_id"),)),
    ToolSpec("update_agent", "Update agent", W, _update_agent, (_req("agent_id"), _p("name"), _p("description"))),
    ToolSpec("delete_agent", "Delete agent", D, lambda c, a: c.agents.delete(a["agent_id"]), (_req("agent_id"),)),
    ToolSpec("agent_branches", "List agent branches", R, lambda c, a: c.agents.branches(a["agent_id"]), (_req("agent_id"),)),
    ToolSpec("batch_list", "List batch jobs", R, lambda c, a: c.batch_calls.list()),
    # Conversations
    ToolSpec("converse_chat", "Conversation chat", W, _converse_chat, (_req("agent_id"), _req("message"))),
    ToolSpec("list_conversations", "List conversations", R,
             lambda c, a: c.conversations.list(agent_id=a["agent_id"]), (_p("agent_id"),)),
    ToolSpec("get_conversation", "Get conversation", R,
             lambda c, a: c.conversations.get(a["conversation_id"]), (_req("conversation_id"),)),
    ToolSpec("get_signed_url", "Get signed URL", R, lambda c, a: c.conversations.signed_url(a["agent_id"]), (_req("agent_id"),)),
    ToolSpec("get_conversation_token", "Get conversation token", R,
             lambda c, a: c.conversations.token(a["agent_id"]), (_req("agent_id"),)),
    ToolSpec("delete_conversation", "Delete conversation", D,
             lambda c, a: c.conversations.delete(a["conversation_id"]), (_req("conversation_id"),)),
    ToolSpec("get_conversation_audio", "Get conversation audio", R,
             lambda c, a: _save_audio(c.conversations.audio(a["conversation_id"]), a["output_file"], "conversation"),
             (_req("conversation_id"), _p("output_file"))),
    # Account
    ToolSpec("get_user_info", "Get user info", R, lambda c, a: c.user.get()),
    ToolSpec("get_user_subscription", "Get user subscription", R, lambda c, a: c.user.subscription()),
    ToolSpec("list_models", "List models", R, lambda c, a: c.models.list()),
    ToolSpec("get_model_rates", "Get model rates", R, _get_model_rates, (_req("model_id"),)),
    ToolSpec("get_usage", "Get usage", R, _get_usage, (_p("start"), _p("end"))),
    # Knowledge base and RAG
    ToolSpec("list_knowledge", "List knowledge", R,
             lambda c, a: c.knowledge_base.list(page_size=a["limit"]), (_p("limit", "int"),)),
    ToolSpec("add_knowledge", "Add knowledge", W, _add_knowledge, (
        _req("source_type"), _req("name"), _p("content"), _p("url"), _p("file"),
    )),
    ToolSpec("delete_knowledge", "Delete knowledge", D,
             lambda c, a: c.knowledge_base.delete(a["document_id"]), (_req("document_id"),)),
    ToolSpec("create_rag", "Create RAG index", W,
             lambda c, a: c.rag.create(a["document_id"], a["model"]),
             (_req("document_id"), _p("model", default="e5_mistral_7b_instruct"))),
    ToolSpec("get_rag_status", "Get RAG status", R,
             lambda c, a: c.rag.status(a["document_id"], a["rag_index_id"]), (_req("document_id"), _req("rag_index_id"))),
    ToolSpec("delete_rag", "Delete RAG", D,
             lambda c, a: c.rag.delete(a["document_id"], a["rag_index_id"]), (_req("document_id"), _req("rag_index_id"))),
    ToolSpec("rebuild_rag", "Rebuild RAG", W, lambda c, a: c.rag.rebuild(a["document_id"]), (_req("document_id"),)),
    ToolSpec("get_rag_index_status", "Get RAG index status", R,
             lambda c, a: c.rag.index_status(a["document_id"]), (_req("document_id"),)),
    # Webhooks
    ToolSpec("list_webhooks", "List webhooks", R, lambda c, a: c.webhooks.list()),
    ToolSpec("create_webhook", "Create webhook", W,
             lambda c, a: c.webhooks.create(a["name"], a["url"], _split(a["events"])),
             (_req("name"), _req("url"), _p("events", "list"))),
    ToolSpec("delete_webhook", "Delete webhook", D, lambda c, a: c.webhooks.delete(a["webhook_id"]), (_req("webhook_id"),)),
    # Workspace
    ToolSpec("workspace_info", "Get workspace info", R, lambda c, a: c.workspace.info()),
    ToolSpec("list_workspace_members", "List workspace members", R, lambda c, a: c.workspace.members()),
    ToolSpec("list_workspace_invites", "List workspace invites", R, lambda c, a: c.workspace.invites()),
    ToolSpec("invite_workspace_member", "Invite member", W,
             lambda c, a: c.workspace.invite(a["email"], a["role"]), (_req("email"), _p("role", default="viewer"))),
    ToolSpec("revoke_workspace_invite", "Revoke invite", D,
             lambda c, a: c.workspace.revoke_invite(a["email"]), (_req("email"),)),
    ToolSpec("list_workspace_api_keys", "List workspace API keys", R, lambda c, a: c.workspace.api_keys()),
    ToolSpec("list_secrets", "List secrets", R, lambda c, a: c.workspace.secrets()),
    ToolSpec("add_secret", "Add secret", W,
             lambda c, a: c.workspace.add_secret(a["name"], a["value"]), (_req("name"), _req("value"))),
    ToolSpec("delete_secret", "Delete secret", D,
             lambda c, a: c.workspace.delete_secret(a["secret_id"]), (_req("secret_id"),)),
    ToolSpec("share_workspace", "Share a resource with the workspace", W,
             lambda c, a: c.workspace.share(a["resource_type"], a["resource_id"], a["role"]),
             (_req("resource_type"), _req("resource_id"), _p("role", default="viewer"))),
    # Phone numbers
    ToolSpec("list_phones", "List phones", R, lambda c, a: c.phone_numbers.list()),
    ToolSpec("get_phone", "Get phone", R, lambda c, a: c.phone_numbers.get(a["phone_id"]), (_req("phone_id"),)),
    ToolSpec("import_phone", "Import phone", W, _import_phone, (
        _req("number"), _p("provider", default="twilio"), _p("label"), _p("sid"), _p("token"), _p("sip_uri"),
    )),
    ToolSpec("update_phone", "Update phone", W,
             lambda c, a: c.phone_numbers.update(a["phone_id"], **{k: a[k] for k in ("label", "agent_id") if a[k]}),
             (_req("phone_id"), _p("label"), _p("agent_id"))),
    ToolSpec("delete_phone", "Delete phone", D, lambda c, a: c.phone_numbers.delete(a["phone_id"]), (_req("phone_id"),)),
    ToolSpec("test_phone_call", "Test phone call", W,
             lambda c, a: c.phone_numbers.test_call(a["phone_id"], a["agent_id"]), (_req("phone_id"), _p("agent_id"))),
    # Studio projects
    ToolSpec("list_projects", "List projects", R, lambda c, a: c.projects.list()),
    ToolSpec("get_project", "Get project", R, lambda c, a: c.projects.get(a["project_id"]), (_req("project_id"),)),
    ToolSpec("delete_project", "Delete project", D, lambda c, a: c.projects.delete(a["project_id"]), (_req("project_id"),)),
    ToolSpec("convert_project", "Convert project", W, lambda c, a: c.projects.convert(a["project_id"]), (_req("project_id"),)),
    ToolSpec("list_project_snapshots", "List project snapshots", R,
             lambda c, a: c.projects.snapshots(a["project_id"]), (_req("project_id"),)),
    ToolSpec("get_project_audio", "Get project audio", R, _get_project_audio, (_req("project_id"), _p("output_file"))),
    # Music
    ToolSpec("generate_music", "Generate music", W, _generate_music, (
        _req("prompt"), _p("duration", "int"), _p("output_file"),
    )),
    ToolSpec("list_music", "List music", R, lambda c, a: c.music.list(limit=a["limit"]), (_p("limit", "int"),)),
    ToolSpec("get_music", "Get music", R, lambda c, a: c.music.get(a["music_id"]), (_req("music_id"),)),
    ToolSpec("download_music", "Download music", R,
             lambda c, a: _save_audio(c.music.download(a["music_id"]), a["output_file"], "music"),
             (_req("music_id"), _p("output_file"))),
    ToolSpec("delete_music", "Delete music", D, lambda c, a: c.music.delete(a["music_id"]), (_req("music_id"),)),
    # Agent tools
    ToolSpec("list_tools", "List agent tools", R, lambda c, a: c.tools.list()),
    ToolSpec("get_tool", "Get tool", R, lambda c, a: c.tools.get(a["tool_id"]), (_req("tool_id"),)),
    ToolSpec("delete_tool", "Delete tool", D, lambda c, a: c.tools.delete(a["tool_id"]), (_req("tool_id"),)),
    # Audio Native
    ToolSpec("list_audio_native", "List audio native", R,
             lambda c, a: c.audio_native.list(page_size=a["limit"]), (_p("limit", "int", default=10),)),
    ToolSpec("get_audio_native", "Get audio native", R,
             lambda c, a: c.audio_native.get(a["project_id"]), (_req("project_id"),)),
    ToolSpec("create_audio_native", "Create audio native", W,
             lambda c, a: c.audio_native.create(a["name"], a["file"]), (_req("name"), _p("file"))),
]


def tool_names(tools: Optional[Iterable[ToolSpec]] = None) -> List[str]:
    return [tool.name for tool in (TOOLS if tools is None else tools)]


def get_tool(name: str) -> ToolSpec:
    for tool in TOOLS:
        if tool.name == name:
            return tool
    raise ValidationError(f"Unknown tool: {name}")


def filter_tools(
    tools: Sequence[ToolSpec],
    enable: Optional[Sequence[str]] = None,
    disable: Optional[Sequence[str]] = None,
    disable_admin: bool = False,
    disable_destructive: bool = False,
    read_only: bool = False,
) -> List[ToolSpec]:
    """
    Select the tools to expose.

    A non-empty ``enable`` list keeps only the named tools; otherwise names in
    ``disable`` are removed. ``disable_admin`` and ``read_only`` then keep only
    read tools, and ``disable_destructive`` drops destructive ones.
    """
    if enable:
        wanted = set(enable)
        selected = [t for t in tools if t.name in wanted]
    elif disable:
        unwanted = set(disable)
        selected = [t for t in tools if t.name not in unwanted]
    else:
        selected = list(tools)

    if disable_admin or read_only:
        selected = [t for t in selected if t.category is ToolCategory.READ]
    if disable_destructive:
        selected = [t for t in selected if t.category is not ToolCategory.DESTRUCTIVE]
    return selected
