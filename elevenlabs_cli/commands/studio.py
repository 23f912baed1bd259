"""Dubbing, Studio project and Audio Native commands."""

from typing import Optional

import click

from ..exceptions import ValidationError
from ..utils.client import client_from_context
from ..utils.files import validate_file_size
from ..utils.output import format_output, print_info, print_kv, print_success
from ..utils.retry import with_retry
from .common import confirm_action, output_mode, save_audio

# =============================================================================
# Dubbing
# =============================================================================


@click.group()
def dub():
    """Dub audio or video into other languages.

    \b
    Examples:
      elevenlabs dub create -f video.mp4 -s en -t es
      elevenlabs dub status <dubbing_id>
      elevenlabs dub download <dubbing_id> -o video_es.mp4
    """
    pass


@dub.command("create")
@click.option("--file", "-f", "file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="Audio or video file to dub")
@click.option("--source-lang", "-s", default="auto", show_default=True, help="Source language code")
@click.option("--target-lang", "-t", required=True, help="Target language code")
@click.option("--num-speakers", type=click.IntRange(min=0), help="Number of speakers (0 = detect)")
@click.option("--watermark", is_flag=True, help="Add a watermark to the output")
@click.option("--name", "-n", help="Project name")
@click.pass_context
def create_dub(
    ctx: click.Context,
    file: str,
    source_lang: str,
    target_lang: str,
    num_speakers: Optional[int],
    watermark: bool,
    name: Optional[str],
):
    """Start a dubbing job."""
    mode = output_mode(ctx)
    validate_file_size(file, max_size=1024 * 1024 * 1024)
    client = client_from_context(ctx)
    print_info(f"Dubbing '{file}' from {source_lang} to {target_lang}...", mode)
    result = client.dubbing.create(
        file,
        target_lang,
        source_lang=source_lang,
        num_speakers=num_speakers,
        watermark=watermark,
        name=name,
    )
    print_success(f"Dubbing started: {result.get('dubbing_id')}", mode)
    if result.get("expected_duration_sec"):
        print_info(f"Expected duration: {float(result['expected_duration_sec']):.0f}s", mode)
    if mode.machine_readable:
        format_output(result, mode)


@dub.command("status")
@click.argument("dubbing_id")
@click.pass_context
def dub_status(ctx: click.Context, dubbing_id: str):
    """Show the status of a dubbing job."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.dubbing.get(dubbing_id)
    if mode.machine_readable:
        format_output(result, mode)
        return
    print_kv(
        [
            ("Dubbing ID", result.get("dubbing_id")),
            ("Name", result.get("name")),
            ("Status", result.get("status")),
            ("Target languages", ", ".join(result.get("target_languages") or [])),
            ("Error", result.get("error")),
        ],
        mode,
        title="Dubbing",
    )


@dub.command("download")
@click.argument("dubbing_id")
@click.option("--language", "-l", help="Language to download (default: first target language)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.pass_context
def download_dub(ctx: click.Context, dubbing_id: str, language: Optional[str], output: Optional[str]):
    """Download dubbed media."""
    client = client_from_context(ctx)
    if not language:
        status = client.dubbing.get(dubbing_id)
        languages = status.get("target_languages") or []
        if not languages:
            raise ValidationError(f"Dubbing {dubbing_id} has no target languages yet")
        language = languages[0]
    media = client.dubbing.audio(dubbing_id, language)
    save_audio(ctx, media, output or f"{dubbing_id}_{language}.mp4", "dub", extension="mp4")


@dub.command("delete")
@click.argument("dubbing_id")
@click.pass_context
def delete_dub(ctx: click.Context, dubbing_id: str):
    """Delete a dubbing job."""
    if not confirm_action(ctx, f"Delete dubbing project {dubbing_id}?"):
        return
    client = client_from_context(ctx)
    client.dubbing.delete(dubbing_id)
    print_success(f"Deleted dubbing project '{dubbing_id}'", output_mode(ctx))


# =============================================================================
# Studio projects
# =============================================================================


@click.group()
def projects():
    """Manage Studio projects."""
    pass


@projects.command("list")
@click.option("--limit", "-l", type=int, help="Maximum results")
@click.pass_context
def list_projects(ctx: click.Context, limit: Optional[int]):
    """List projects."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = with_retry(client.projects.list, description="list projects")
    items = result.get("projects") or []
    if limit:
        items = items[:limit]
    format_output(
        {"projects": items},
        mode,
        columns=["project_id", "name", "state", "default_model_id", "create_date_unix"],
        title="Projects",
        key="projects",
    )


@projects.command("get")
@click.argument("project_id")
@click.pass_context
def get_project(ctx: click.Context, project_id: str):
    """Show a project."""
    client = client_from_context(ctx)
    result = client.projects.get(project_id)
    format_output(result, output_mode(ctx), columns=["project_id", "name", "state", "default_model_id"])


@projects.command("delete")
@click.argument("project_id")
@click.pass_context
def delete_project(ctx: click.Context, project_id: str):
    """Delete a project."""
    if not confirm_action(ctx, f"Delete project {project_id}?"):
        return
    client = client_from_context(ctx)
    client.projects.delete(project_id)
    print_success(f"Project {project_id} deleted", output_mode(ctx))


@projects.command("convert")
@click.argument("project_id")
@click.pass_context
def convert_project(ctx: click.Context, project_id: str):
    """Start converting a project to audio."""
    client = client_from_context(ctx)
    client.projects.convert(project_id)
    print_success(f"Conversion started for project {project_id}", output_mode(ctx))


@projects.command("snapshots")
@click.argument("project_id")
@click.pass_context
def project_snapshots(ctx: click.Context, project_id: str):
    """List a project's audio snapshots."""
    client = client_from_context(ctx)
    result = client.projects.snapshots(project_id)
    format_output(result, output_mode(ctx), columns=["project_snapshot_id", "name", "created_at_unix"],
                  title="Snapshots", key="snapshots")


@projects.command("audio")
@click.argument("project_id")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.pass_context
def project_audio(ctx: click.Context, project_id: str, output: Optional[str]):
    """Download the audio of the latest snapshot."""
    client = client_from_context(ctx)
    snapshots = client.projects.snapshots(project_id).get("snapshots") or []
    if not snapshots:
        raise ValidationError(f"Project {project_id} has no snapshots yet. Run 'projects convert' first")
    latest = max(snapshots, key=lambda s: s.get("created_at_unix") or 0)
    audio = client.projects.snapshot_audio(project_id, latest["project_snapshot_id"])
    save_audio(ctx, audio, output or f"{project_id}.mp3", "project", extension="mp3")


# =============================================================================
# Audio Native
# =============================================================================


@click.group("audio-native")
def audio_native():
    """Manage Audio Native embedded players."""
    pass


@audio_native.command("list")
@click.option("--limit", "-l", type=int, default=10, show_default=True, help="Items per page")
@click.option("--page", "-p", type=int, default=1, show_default=True, help="Page number")
@click.pass_context
def list_audio_native(ctx: click.Context, limit: int, page: int):
    """List Audio Native projects."""
    client = client_from_context(ctx)
    result = client.audio_native.list(page_size=limit, page=page)
    format_output(result, output_mode(ctx), columns=["project_id", "name", "status"], key="projects")


@audio_native.command("get")
@click.argument("project_id")
@click.pass_context
def get_audio_native(ctx: click.Context, project_id: str):
    """Show an Audio Native project's settings."""
    client = client_from_context(ctx)
    result = client.audio_native.get(project_id)
    format_output(result, output_mode(ctx))


@audio_native.command("create")
@click.option("--name", "-n", required=True, help="Project name")
@click.option("--author", help="Author shown in the player")
@click.option("--title", help="Title shown in the player")
@click.option("--voice-id", help="Voice ID")
@click.option("--model-id", help="Model ID")
@click.option("--file", "file", type=click.Path(exists=True, dir_okay=False), help="Content file to convert")
@click.option("--small", is_flag=True, help="Use the small player")
@click.option("--text-color", help="Text colour (hex)")
@click.option("--background-color", help="Background colour (hex)")
@click.option("--auto-convert", is_flag=True, help="Convert the content immediately")
@click.pass_context
def create_audio_native(
    ctx: click.Context,
    name: str,
    file: Optional[str],
    **options,
):
    """Create an Audio Native project."""
    client = client_from_context(ctx)
    result = client.audio_native.create(name, file, **options)
    mode = output_mode(ctx)
    print_success(f"Audio Native project created: {result.get('project_id')}", mode)
    if result.get("html_snippet") and not mode.machine_readable:
        print_info("Embed snippet:", mode)
        click.echo(result["html_snippet"])
    elif mode.machine_readable:
        format_output(result, mode)
