"""Voice management commands."""

from pathlib import Path
from typing import Dict, List, Optional, Sequence

import click

from ..exceptions import ValidationError
from ..utils.client import client_from_context
from ..utils.files import AUDIO_EXTENSIONS, validate_file_size
from ..utils.output import format_output, print_kv, print_success
from ..utils.retry import with_retry
from ..utils.validation import build_voice_settings
from .common import confirm_action, output_mode, split_csv


def collect_samples(samples: Sequence[str], samples_dir: Optional[str]) -> List[str]:
    """Sample paths from ``--samples`` plus every audio file in ``--samples-dir``."""
    paths = [path for value in samples for path in split_csv(value)]
    if samples_dir:
        directory = Path(samples_dir)
        if not directory.is_dir():
            raise ValidationError(f"Samples directory not found: {samples_dir}")
        paths.extend(
            str(p) for p in sorted(directory.iterdir())
            if p.is_file() and p.suffix.lower() in AUDIO_EXTENSIONS
        )
    if not paths:
        raise ValidationError("No samples provided. Use --samples or --samples-dir")
    for path in paths:
        validate_file_size(path)
    return paths


def parse_labels(labels: Sequence[str]) -> Dict[str, str]:
    result = {}
    for label in labels:
        key, sep, value = label.partition("=")
        if not sep or not key.strip():
            raise ValidationError(f"Invalid label '{label}'. Expected KEY=VALUE")
        result[key.strip()] = value.strip()
    return result


@click.group()
def voice():
    """Manage voices.

    \b
    Examples:
      elevenlabs voice list
      elevenlabs voice get JBFqnCBsd6RMkjVDRZzb
      elevenlabs voice clone --name "My Voice" --samples a.mp3,b.mp3
    """
    pass


@voice.command("list")
@click.option("--detailed", "-d", is_flag=True, help="Show description and labels")
@click.pass_context
def list_voices(ctx: click.Context, detailed: bool):
    """List all available voices."""
    client = client_from_context(ctx)
    result = with_retry(client.voices.list, description="list voices")
    columns = ["voice_id", "name", "category"]
    if detailed:
        columns += ["description", "labels"]
    format_output(result, output_mode(ctx), columns=columns, title="Voices", key="voices")


@voice.command("get")
@click.argument("voice_id")
@click.pass_context
def get_voice(ctx: click.Context, voice_id: str):
    """Get details for a voice."""
    client = client_from_context(ctx)
    result = client.voices.get(voice_id)
    mode = output_mode(ctx)
    if mode.machine_readable:
        format_output(result, mode)
        return
    settings = result.get("settings") or {}
    print_kv(
        [
            ("Voice ID", result.get("voice_id")),
            ("Name", result.get("name")),
            ("Category", result.get("category")),
            ("Description", result.get("description")),
            ("Labels", ", ".join(f"{k}: {v}" for k, v in (result.get("labels") or {}).items())),
            ("Samples", len(result.get("samples") or [])),
            ("Stability", settings.get("stability")),
            ("Similarity Boost", settings.get("similarity_boost")),
            ("Preview URL", result.get("preview_url")),
        ],
        mode,
        title="Voice",
    )


@voice.command("delete")
@click.argument("voice_id")
@click.pass_context
def delete_voice(ctx: click.Context, voice_id: str):
    """Delete a voice."""
    if not confirm_action(ctx, f"Delete voice {voice_id}?"):
        return
    client = client_from_context(ctx)
    client.voices.delete(voice_id)
    print_success(f"Voice {voice_id} deleted", output_mode(ctx))


@voice.command("clone")
@click.option("--name", "-n", required=True, help="Name for the new voice")
@click.option("--description", "-d", help="Voice description")
@click.option("--samples", "-s", multiple=True, metavar="FILES", help="Sample files (comma separated or repeated)")
@click.option("--samples-dir", type=click.Path(file_okay=False), help="Directory of sample files")
@click.option("--labels", "-l", multiple=True, metavar="KEY=VALUE", help="Voice labels")
@click.pass_context
def clone_voice(
    ctx: click.Context,
    name: str,
    description: Optional[str],
    samples: Sequence[str],
    samples_dir: Optional[str],
    labels: Sequence[str],
):
    """Clone a voice from audio samples."""
    paths = collect_samples(samples, samples_dir)
    client = client_from_context(ctx)
    result = client.voices.add(name, paths, description=description, labels=parse_labels(labels) or None)
    mode = output_mode(ctx)
    print_success(f"Voice cloned: {result.get('voice_id')} ({len(paths)} samples)", mode)
    if mode.machine_readable:
        format_output(result, mode)


@voice.command("settings")
@click.argument("voice_id")
@click.pass_context
def voice_settings(ctx: click.Context, voice_id: str):
    """Show a voice's settings."""
    client = client_from_context(ctx)
    result = client.voices.settings(voice_id)
    print_kv(sorted(result.items()), output_mode(ctx), title=f"Settings for {voice_id}")


@voice.command("edit-settings")
@click.argument("voice_id")
@click.option("--stability", type=float, metavar="0.0-1.0", help="Voice stability")
@click.option("--similarity-boost", type=float, metavar="0.0-1.0", help="Similarity boost")
@click.option("--style", type=float, metavar="0.0-1.0", help="Style exaggeration")
@click.option("--speaker-boost", is_flag=True, help="Use speaker boost")
@click.pass_context
def edit_settings(
    ctx: click.Context,
    voice_id: str,
    stability: Optional[float],
    similarity_boost: Optional[float],
    style: Optional[float],
    speaker_boost: bool,
):
    """Update a voice's settings; unspecified values are kept."""
    update = build_voice_settings(stability, similarity_boost, style, speaker_boost)
    if not update:
        raise ValidationError("No settings specified. Use --stability, --similarity-boost, --style or --speaker-boost")
    client = client_from_context(ctx)
    settings = client.voices.settings(voice_id)
    settings.update(update)
    client.voices.edit_settings(voice_id, settings)
    print_success(f"Settings updated for voice {voice_id}", output_mode(ctx))


@voice.command("edit")
@click.argument("voice_id")
@click.option("--name", "-n", help="New name")
@click.option("--description", "-d", help="New description")
@click.pass_context
def edit_voice(ctx: click.Context, voice_id: str, name: Optional[str], description: Optional[str]):
    """Rename a voice or change its description."""
    if not name and not description:
        raise ValidationError("No updates specified. Use --name or --description")
    client = client_from_context(ctx)
    client.voices.edit(voice_id, name=name, description=description)
    print_success(f"Voice {voice_id} updated", output_mode(ctx))


@voice.command("share")
@click.argument("voice_id")
@click.pass_context
def share_voice(ctx: click.Context, voice_id: str):
    """Share a voice publicly."""
    client = client_from_context(ctx)
    result = client.voices.share(voice_id)
    mode = output_mode(ctx)
    print_success(f"Voice {voice_id} shared", mode)
    if result and mode.machine_readable:
        format_output(result, mode)


@voice.command("similar")
@click.option("--voice-id", help="Find voices similar to this voice")
@click.option("--text", help="Find voices matching a description")
@click.pass_context
def similar_voices(ctx: click.Context, voice_id: Optional[str], text: Optional[str]):
    """Find similar voices in the library."""
    if not voice_id and not text:
        raise ValidationError("Specify --voice-id or --text")
    client = client_from_context(ctx)
    result = client.voices.similar(voice_id=voice_id, text=text)
    format_output(result, output_mode(ctx), columns=["voice_id", "name", "category", "accent", "gender"],
                  title="Similar Voices", key="voices")


@voice.group("fine-tune")
def fine_tune():
    """Professional voice fine-tuning."""
    pass


@fine_tune.command("start")
@click.argument("voice_id")
@click.pass_context
def fine_tune_start(ctx: click.Context, voice_id: str):
    """Start fine-tuning a voice."""
    client = client_from_context(ctx)
    client.voices.start_fine_tune(voice_id)
    print_success(f"Fine-tuning started for voice {voice_id}", output_mode(ctx))


@fine_tune.command("status")
@click.argument("voice_id")
@click.pass_context
def fine_tune_status(ctx: click.Context, voice_id: str):
    """Show fine-tuning status."""
    client = client_from_context(ctx)
    result = client.voices.fine_tune_status(voice_id)
    format_output(result, output_mode(ctx))


@fine_tune.command("cancel")
@click.argument("voice_id")
@click.pass_context
def fine_tune_cancel(ctx: click.Context, voice_id: str):
    """Cancel fine-tuning."""
    if not confirm_action(ctx, f"Cancel fine-tuning for voice {voice_id}?"):
        return
    client = client_from_context(ctx)
    client.voices.cancel_fine_tune(voice_id)
    print_success(f"Fine-tuning cancelled for voice {voice_id}", output_mode(ctx))
