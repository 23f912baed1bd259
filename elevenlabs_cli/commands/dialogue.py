"""Dialogue and voice design commands."""

import base64
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import click
from rich.markup import escape

from ..exceptions import ValidationError
from ..utils.client import client_from_context
from ..utils.output import console, print_info, print_success
from .common import output_mode, resolve_format, save_audio

DIALOGUE_MODEL = "eleven_v3"
DESIGN_MIN_TEXT = 100
DESIGN_MAX_TEXT = 1000


def parse_dialogue_inputs(inputs: Union[str, Sequence[str]]) -> List[Dict[str, str]]:
    """
    Parse ``text:voice_id`` pairs into dialogue request inputs.

    Accepts a comma separated string or a sequence of strings (each of which
    may itself contain several comma separated pairs).
    """
    if isinstance(inputs, str):
        inputs = [inputs]
    items = [item for value in inputs for item in value.split(",") if item.strip()]
    if not items:
        raise ValidationError("No dialogue inputs provided. Use --inputs 'text:voice_id,text:voice_id'")

    parsed = []
    for index, item in enumerate(items):
        text, sep, voice_id = item.partition(":")
        if not sep:
            raise ValidationError(
                f"Invalid input format at index {index}: '{item}'. Expected 'text:voice_id' format. "
                "Example: --inputs 'Hello:voice1,World:voice2'"
            )
        text, voice_id = text.strip(), voice_id.strip()
        if not text:
            raise ValidationError(f"Empty text in input at index {index}")
        if not voice_id:
            raise ValidationError(f"Empty voice_id in input at index {index}")
        parsed.append({"text": text, "voice_id": voice_id})
    return parsed


@click.command("dialogue")
@click.option("--inputs", "-i", multiple=True, required=True, metavar="TEXT:VOICE_ID,...",
              help="Dialogue lines as text:voice_id pairs (comma separated or repeated)")
@click.option("--model", "-m", default=DIALOGUE_MODEL, show_default=True, help="Model ID")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.option("--output-format", help="Audio format (overrides --format)")
@click.pass_context
def dialogue(
    ctx: click.Context,
    inputs: Sequence[str],
    model: str,
    output: Optional[str],
    output_format: Optional[str],
):
    """Generate a multi-speaker dialogue.

    \b
    Examples:
      elevenlabs dialogue --inputs "Hi there!:JBFqnCBsd6RMkjVDRZzb,Hello!:Aw4FAjKCGjjNkVhN1Xmq"
      elevenlabs dialogue -i "Line one:voice1" -i "Line two:voice2" -o scene.mp3
    """
    mode = output_mode(ctx)
    lines = parse_dialogue_inputs(inputs)
    fmt = resolve_format(ctx, output_format)

    client = client_from_context(ctx)
    print_info(f"Creating dialogue with {len(lines)} input(s)...", mode)
    result = client.dialogue.convert_with_timestamps(lines, model, fmt)

    audio = base64.b64decode(result.get("audio_base64") or "")
    if not audio:
        raise ValidationError("No audio data received")
    save_audio(ctx, audio, output, "dialogue", fmt)

    segments = result.get("voice_segments") or []
    if segments and not mode.machine_readable:
        print_info(f"Voice segments: {len(segments)}", mode)
        for i, segment in enumerate(segments, start=1):
            console.print(
                f"  {i}: Voice [yellow]{segment.get('voice_id')}[/yellow] "
                f"[{segment.get('start_time_seconds', 0):.1f}s - {segment.get('end_time_seconds', 0):.1f}s]",
                highlight=False,
            )


@click.command("voice-design")
@click.option("--description", "-d", required=True, help="Description of the voice to design")
@click.option("--text", "-t", required=True, help="Preview text (100-1000 characters)")
@click.option("--output", "-o", type=click.Path(dir_okay=False),
              help="Base output path; previews are saved as <stem>_<n>_<voice_id>.<ext>")
@click.pass_context
def voice_design(ctx: click.Context, description: str, text: str, output: Optional[str]):
    """Design new voices from a text description.

    Saves one audio preview per generated voice.

    \b
    Examples:
      elevenlabs voice-design -d "Warm elderly narrator with a slight rasp" -t "$(cat sample.txt)"
    """
    mode = output_mode(ctx)
    if len(text) < DESIGN_MIN_TEXT:
        raise ValidationError(
            f"Text must be at least {DESIGN_MIN_TEXT} characters long for voice design (current: {len(text)})"
        )
    if len(text) > DESIGN_MAX_TEXT:
        raise ValidationError(
            f"Text must be at most {DESIGN_MAX_TEXT} characters long for voice design (current: {len(text)})"
        )

    client = client_from_context(ctx)
    print_info(f"Designing voice: {description}", mode)
    result = client.voice_design.create_previews(description, text)
    previews = result.get("previews") or []
    print_success(f"Generated {len(previews)} voice preview(s)", mode)

    for i, preview in enumerate(previews):
        voice_id = preview.get("generated_voice_id", "unknown")
        audio = base64.b64decode(preview.get("audio_base_64") or "")
        if output:
            base = Path(output)
            ext = base.suffix.lstrip(".") or "mp3"
            path = str(base.with_name(f"{base.stem}_{i}_{voice_id}.{ext}"))
        else:
            path = f"voice_design_{i}_{voice_id}.mp3"
        if save_audio(ctx, audio, path, "voice_design", extension="mp3") is not None and not mode.machine_readable:
            console.print(f"     Voice ID: [cyan]{escape(voice_id)}[/cyan]")
            if preview.get("duration_secs") is not None:
                console.print(f"     Duration: {float(preview['duration_secs']):.2f}s")
