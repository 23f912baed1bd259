"""Music generation commands."""

from typing import Optional

import click

from ..exceptions import ValidationError
from ..utils.client import client_from_context
from ..utils.output import format_output, print_info, print_success
from .common import confirm_action, output_mode, save_audio

MUSIC_MIN_DURATION = 5.0
MUSIC_MAX_DURATION = 300.0


@click.group()
def music():
    """Generate and manage music.

    \b
    Examples:
      elevenlabs music generate -p "Upbeat synthwave intro" -d 30
      elevenlabs music list
    """
    pass


@music.command("generate")
@click.option("--prompt", "-p", required=True, help="Text description of the music")
@click.option("--duration", "-d", type=float, help="Duration in seconds (5-300)")
@click.option("--influence", type=float, help="Audio influence (0-1)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.pass_context
def generate_music(
    ctx: click.Context,
    prompt: str,
    duration: Optional[float],
    influence: Optional[float],
    output: Optional[str],
):
    """Generate music from a text prompt."""
    mode = output_mode(ctx)
    if duration is not None and not MUSIC_MIN_DURATION <= duration <= MUSIC_MAX_DURATION:
        raise ValidationError(
            f"Duration must be between {MUSIC_MIN_DURATION:g} and {MUSIC_MAX_DURATION:g} seconds"
        )
    if influence is not None and not 0.0 <= influence <= 1.0:
        raise ValidationError("Influence must be between 0.0 and 1.0")

    client = client_from_context(ctx)
    print_info(f'Generating music: "{prompt}"', mode)
    audio = client.music.generate(prompt, duration, influence)
    save_audio(ctx, audio, output, "music", extension="mp3")


@music.command("list")
@click.option("--limit", "-l", type=int, help="Page size")
@click.pass_context
def list_music(ctx: click.Context, limit: Optional[int]):
    """List generated music."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.music.list(limit=limit)
    tracks = result.get("music") or []
    if not tracks and not mode.machine_readable:
        print_info("No music found", mode)
        return
    format_output(result, mode, columns=["music_id", "title", "duration_seconds", "status", "created_at"],
                  title="Music", key="music")
    print_success(f"Found {len(tracks)} music tracks", mode)


@music.command("get")
@click.argument("music_id")
@click.pass_context
def get_music(ctx: click.Context, music_id: str):
    """Show a generated track."""
    client = client_from_context(ctx)
    result = client.music.get(music_id)
    format_output(result, output_mode(ctx), columns=["music_id", "title", "duration_seconds", "status", "prompt"])


@music.command("download")
@click.argument("music_id")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.pass_context
def download_music(ctx: click.Context, music_id: str, output: Optional[str]):
    """Download a generated track."""
    client = client_from_context(ctx)
    audio = client.music.download(music_id)
    save_audio(ctx, audio, output or f"music_{music_id}.mp3", "music", extension="mp3")


@music.command("delete")
@click.argument("music_id")
@click.pass_context
def delete_music(ctx: click.Context, music_id: str):
    """Delete a generated track."""
    if not confirm_action(ctx, f"Delete music {music_id}?"):
        return
    client = client_from_context(ctx)
    client.music.delete(music_id)
    print_success(f"Music {music_id} deleted", output_mode(ctx))
