"""Helpers shared by the command modules."""

from pathlib import Path
from typing import List, Optional

import click

from ..audio import StreamingPlayer, get_audio_backend
from ..utils.files import (
    DEFAULT_OUTPUT_FORMAT,
    confirm_overwrite,
    format_size,
    format_to_extension,
    generate_output_filename,
    validate_output_format,
    write_bytes_to_file,
)
from ..utils.output import OutputMode, confirm, print_info, print_success, print_warning

DEFAULT_VOICE = "Brian"
DEFAULT_MODEL = "eleven_multilingual_v2"
AUDIO_EXTRA_HINT = "Audio playback requires the 'audio' extra: pip install 'elevenlabs-cli[audio]'"


def output_mode(ctx: click.Context) -> OutputMode:
    return ctx.obj.get("output", OutputMode.TABLE)


def assume_yes(ctx: click.Context) -> bool:
    return bool(ctx.obj.get("yes"))


def audio_format(ctx: click.Context) -> str:
    """Audio format chosen by --format, the config default, or the built-in default."""
    return ctx.obj.get("format") or DEFAULT_OUTPUT_FORMAT


def voice_or_default(ctx: click.Context, voice: Optional[str]) -> str:
    config = ctx.obj.get("config")
    return voice or (config.default_voice if config else None) or DEFAULT_VOICE


def model_or_default(ctx: click.Context, model: Optional[str]) -> str:
    config = ctx.obj.get("config")
    return model or (config.default_model if config else None) or DEFAULT_MODEL


def confirm_action(ctx: click.Context, message: str) -> bool:
    """Confirm a destructive action; --yes answers for the user."""
    if confirm(message, assume_yes=assume_yes(ctx)):
        return True
    print_info("Cancelled", output_mode(ctx))
    return False


def save_audio(
    ctx: click.Context,
    data: bytes,
    output: Optional[str],
    prefix: str,
    output_format: Optional[str] = None,
    extension: Optional[str] = None,
) -> Optional[Path]:
    """Write audio to ``output`` (or ``{prefix}_{unix}.{ext}``) after the overwrite check."""
    mode = output_mode(ctx)
    ext = extension or format_to_extension(output_format or audio_format(ctx))
    path = output or generate_output_filename(prefix, ext)
    if not confirm_overwrite(path, assume_yes(ctx), output_mode(ctx)):
        print_info("Cancelled", mode)
        return None
    written = write_bytes_to_file(data, path)
    print_success(f"Saved -> {written} ({format_size(len(data))})", mode)
    return written


def play_audio(ctx: click.Context, data: bytes, output_format: Optional[str] = None) -> None:
    mode = output_mode(ctx)
    backend = get_audio_backend()
    if not backend.available:
        print_warning(AUDIO_EXTRA_HINT, mode)
        return
    print_info("Playing audio...", mode)
    backend.play(data, output_format or audio_format(ctx))


def split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def resolve_format(ctx: click.Context, output_format: Optional[str]) -> str:
    """A per-command ``--output-format`` wins over the global audio format."""
    return validate_output_format(output_format) if output_format else audio_format(ctx)


def open_player(ctx: click.Context, output_format: str) -> Optional[StreamingPlayer]:
    """Started StreamingPlayer, or None (with a hint) when playback is unavailable."""
    backend = get_audio_backend()
    if not backend.available:
        print_warning(AUDIO_EXTRA_HINT, output_mode(ctx))
        return None
    return StreamingPlayer(backend, output_format=output_format).start()
