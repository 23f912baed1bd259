"""Audio processing commands: isolation, sound effects and voice changer."""

from pathlib import Path
from typing import Optional

import click

from ..audio import get_audio_backend
from ..exceptions import ValidationError
from ..utils.client import client_from_context
from ..utils.files import check_media_extension, format_to_extension, validate_file_size
from ..utils.output import print_info
from ..utils.validation import build_voice_settings
from .common import audio_format, output_mode, play_audio, save_audio, voice_or_default
from .stt import resolve_input_device

SFX_MIN_DURATION = 0.5
SFX_MAX_DURATION = 22.0


@click.command("isolate")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.pass_context
def isolate(ctx: click.Context, file: str, output: Optional[str]):
    """Remove background noise from an audio file.

    \b
    Examples:
      elevenlabs isolate noisy.mp3 -o clean.mp3
    """
    mode = output_mode(ctx)
    validate_file_size(file)
    check_media_extension(file, mode=output_mode(ctx))

    client = client_from_context(ctx)
    print_info(f"Isolating voice in '{file}'...", mode)
    audio = client.audio_isolation.isolate(file)
    save_audio(ctx, audio, output or _derived_name(file, "isolated", "mp3"), "isolated", extension="mp3")


@click.command("sfx")
@click.argument("text")
@click.option("--duration", "-d", type=float, metavar="SECONDS",
              help=f"Duration in seconds ({SFX_MIN_DURATION:g}-{SFX_MAX_DURATION:g}, auto if omitted)")
@click.option("--influence", "-i", type=float, metavar="0.0-1.0", help="Prompt influence (default 0.3)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.pass_context
def sfx(
    ctx: click.Context,
    text: str,
    duration: Optional[float],
    influence: Optional[float],
    output: Optional[str],
):
    """Generate a sound effect from a text description.

    \b
    Examples:
      elevenlabs sfx "Thunder rolling over hills" --duration 5
      elevenlabs sfx "Door creak" -i 0.8 -o door.mp3
    """
    mode = output_mode(ctx)
    if not text.strip():
        raise ValidationError("Text description cannot be empty")
    if duration is not None and not SFX_MIN_DURATION <= duration <= SFX_MAX_DURATION:
        raise ValidationError(
            f"Duration must be between {SFX_MIN_DURATION:g} and {SFX_MAX_DURATION:g} seconds"
        )
    if influence is not None and not 0.0 <= influence <= 1.0:
        raise ValidationError("Influence must be between 0 and 1")

    client = client_from_context(ctx)
    print_info(f"Generating sound effect (duration: {f'{duration:g}s' if duration else 'auto'})...", mode)
    audio = client.sound_effects.generate(text, duration, influence)
    save_audio(ctx, audio, output, "sfx", extension="mp3")


@click.command("voice-changer")
@click.argument("file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--record", is_flag=True, help="Record from the microphone instead of a file")
@click.option("--duration", type=click.FloatRange(min=0.5), default=10.0, show_default=True,
              help="Recording duration in seconds")
@click.option("--input-device", metavar="DEVICE", help="Input device index or name")
@click.option("--voice", help="Target voice ID or name")
@click.option("--model", "-m", default="eleven_multilingual_sts_v2", show_default=True, help="Model ID")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.option("--play", is_flag=True, help="Play the result")
@click.option("--stability", type=float, metavar="0.0-1.0", help="Voice stability")
@click.option("--similarity-boost", type=float, metavar="0.0-1.0", help="Similarity boost")
@click.option("--style", type=float, metavar="0.0-1.0", help="Style exaggeration")
@click.pass_context
def voice_changer(
    ctx: click.Context,
    file: Optional[str],
    record: bool,
    duration: float,
    input_device: Optional[str],
    voice: Optional[str],
    model: str,
    output: Optional[str],
    play: bool,
    stability: Optional[float],
    similarity_boost: Optional[float],
    style: Optional[float],
):
    """Transform the voice in a recording into another voice.

    \b
    Examples:
      elevenlabs voice-changer speech.mp3 --voice Rachel
      elevenlabs vc --record --duration 5 --play
    """
    mode = output_mode(ctx)
    settings = build_voice_settings(stability, similarity_boost, style)
    fmt = audio_format(ctx)

    if record:
        backend = get_audio_backend()
        device_index = resolve_input_device(backend, input_device)
        print_info(f"Recording for {duration:g} seconds...", mode)
        source = ("recording.wav", backend.record(duration, device_index), "audio/wav")
        default_output = None
    elif file:
        validate_file_size(file)
        check_media_extension(file, mode=output_mode(ctx))
        source = file
        default_output = _derived_name(file, "transformed", format_to_extension(fmt))
    else:
        raise click.UsageError("Provide an audio FILE or use --record")

    voice_id = voice_or_default(ctx, voice)
    client = client_from_context(ctx)
    print_info(f"Transforming voice with '{voice_id}' ({model})...", mode)
    audio = client.speech_to_speech.convert(voice_id, source, model, fmt, voice_settings=settings)

    save_audio(ctx, audio, output or default_output, "voice_changed", fmt)
    if play:
        play_audio(ctx, audio, fmt)


def _derived_name(path: str, suffix: str, extension: str) -> str:
    source = Path(path)
    return str(source.with_name(f"{source.stem}_{suffix}.{extension}"))
