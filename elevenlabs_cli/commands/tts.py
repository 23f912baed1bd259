"""Text-to-speech commands."""

import asyncio
import base64
from pathlib import Path
from typing import Optional

import click

from ..exceptions import ValidationError
from ..streaming import DEFAULT_REALTIME_MODEL, RealtimeTTSClient
from ..utils.client import client_from_context
from ..utils.files import (
    confirm_overwrite,
    format_size,
    format_to_extension,
    generate_output_filename,
    get_input_text,
    validate_text_length,
)
from ..utils.output import print_info, print_success, print_warning
from ..utils.subtitles import render_alignment, subtitle_format_for
from ..utils.validation import build_voice_settings
from .common import (
    assume_yes,
    audio_format,
    model_or_default,
    open_player,
    output_mode,
    play_audio,
    resolve_format,
    save_audio,
    voice_or_default,
)

STREAMING_MODELS = (
    "eleven_multilingual_v2",
    "eleven_flash_v2_5",
    "eleven_turbo_v2",
    "eleven_turbo_v2_5",
    "eleven_v3",
)


@click.command("tts")
@click.argument("text", required=False)
@click.option("--file", "-i", "input_file", type=click.Path(exists=True, dir_okay=False), help="Read text from file")
@click.option("--voice", help="Voice ID or name (default: Brian)")
@click.option("--model", "-m", help="Model ID (default: eleven_multilingual_v2)")
@click.option("--output", "-o", "output", type=click.Path(dir_okay=False), help="Output file path")
@click.option("--play", is_flag=True, help="Play audio after generation")
@click.option("--stability", type=float, metavar="0.0-1.0", help="Voice stability")
@click.option("--similarity-boost", type=float, metavar="0.0-1.0", help="Similarity boost")
@click.option("--style", type=float, metavar="0.0-1.0", help="Style exaggeration")
@click.option("--speaker-boost", is_flag=True, help="Use speaker boost")
@click.option("--language", metavar="CODE", help="Language code (e.g. en, es, fr)")
@click.option("--seed", type=int, help="Seed for deterministic generation")
@click.pass_context
def tts(
    ctx: click.Context,
    text: Optional[str],
    input_file: Optional[str],
    voice: Optional[str],
    model: Optional[str],
    output: Optional[str],
    play: bool,
    stability: Optional[float],
    similarity_boost: Optional[float],
    style: Optional[float],
    speaker_boost: bool,
    language: Optional[str],
    seed: Optional[int],
):
    """Convert text to speech.

    \b
    Examples:
      elevenlabs tts "Hello world" --voice Brian -o hello.mp3
      elevenlabs tts -i script.txt --stability 0.4 --play
      elevenlabs --format pcm_16000 tts "Raw PCM please"
    """
    mode = output_mode(ctx)
    content = get_input_text(text, input_file)
    validate_text_length(content)
    settings = build_voice_settings(stability, similarity_boost, style, speaker_boost)

    voice_id = voice_or_default(ctx, voice)
    model_id = model_or_default(ctx, model)
    fmt = audio_format(ctx)

    client = client_from_context(ctx)
    print_info(f"Generating speech with voice '{voice_id}' ({len(content)} characters)...", mode)
    audio = client.tts.convert(
        voice_id,
        content,
        model_id=model_id,
        output_format=fmt,
        voice_settings=settings,
        language_code=language,
        seed=seed,
    )

    save_audio(ctx, audio, output, "speech", fmt)
    if play:
        play_audio(ctx, audio, fmt)


@click.command("tts-timestamps")
@click.argument("text", required=False)
@click.option("--file", "-i", "input_file", type=click.Path(exists=True, dir_okay=False), help="Read text from file")
@click.option("--voice", help="Voice ID or name")
@click.option("--model", "-m", help="Model ID")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output audio file path")
@click.option("--output-format", help="Audio format (overrides --format)")
@click.option("--subtitles", type=click.Path(dir_okay=False), help="Write SRT/VTT subtitles (by extension)")
@click.option("--enable-logging/--no-enable-logging", default=True, show_default=True,
              help="Allow the request to be logged by ElevenLabs")
@click.option("--latency", type=click.IntRange(0, 4), metavar="0-4", help="Latency optimization")
@click.pass_context
def tts_timestamps(
    ctx: click.Context,
    text: Optional[str],
    input_file: Optional[str],
    voice: Optional[str],
    model: Optional[str],
    output: Optional[str],
    output_format: Optional[str],
    subtitles: Optional[str],
    enable_logging: bool,
    latency: Optional[int],
):
    """Generate speech with character-level timing.

    \b
    Examples:
      elevenlabs tts-timestamps "Hello world" --subtitles hello.srt
      elevenlabs tts-ts -i chapter.txt --subtitles chapter.vtt
    """
    mode = output_mode(ctx)
    content = get_input_text(text, input_file)
    validate_text_length(content)
    fmt = resolve_format(ctx, output_format)

    client = client_from_context(ctx)
    print_info("Generating speech with timestamps...", mode)
    result = client.tts.convert_with_timestamps(
        voice_or_default(ctx, voice),
        content,
        model_id=model_or_default(ctx, model),
        output_format=fmt,
        latency=latency,
        enable_logging=enable_logging,
    )

    audio = base64.b64decode(result.get("audio_base64") or "")
    if not audio:
        raise ValidationError("No audio data received")
    save_audio(ctx, audio, output, "speech_timestamps", fmt)

    alignment = result.get("alignment") or result.get("normalized_alignment")
    if alignment:
        print_info(f"Alignment: {len(alignment.get('characters', []))} characters with timing data", mode)
        if subtitles:
            fmt_name = subtitle_format_for(subtitles)
            Path(subtitles).write_text(render_alignment(alignment, fmt_name), encoding="utf-8")
            print_success(f"Subtitles saved -> {subtitles} ({fmt_name.upper()})", mode)
    elif subtitles:
        print_warning("Response contained no alignment data; subtitles not written", mode)


@click.command("tts-stream")
@click.argument("text")
@click.option("--voice", help="Voice ID or name")
@click.option("--model", "-m", type=click.Choice(STREAMING_MODELS), help="Streaming model")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.option("--output-format", help="Audio format (overrides --format)")
@click.option("--latency", type=click.IntRange(0, 4), metavar="0-4", help="Latency optimization")
@click.option("--stability", type=float, metavar="0.0-1.0", help="Voice stability")
@click.option("--similarity-boost", type=float, metavar="0.0-1.0", help="Similarity boost")
@click.option("--play", is_flag=True, help="Play audio while it streams")
@click.pass_context
def tts_stream(
    ctx: click.Context,
    text: str,
    voice: Optional[str],
    model: Optional[str],
    output: Optional[str],
    output_format: Optional[str],
    latency: Optional[int],
    stability: Optional[float],
    similarity_boost: Optional[float],
    play: bool,
):
    """Stream speech as it is generated.

    \b
    Examples:
      elevenlabs tts-stream "Streaming is fast" --play
      elevenlabs tts-stream "Hello" --model eleven_flash_v2_5 --latency 3 -o hi.mp3
    """
    mode = output_mode(ctx)
    validate_text_length(text)
    settings = build_voice_settings(stability, similarity_boost)
    fmt = resolve_format(ctx, output_format)
    path = Path(output or generate_output_filename("speech_stream", format_to_extension(fmt)))
    if not confirm_overwrite(path, assume_yes(ctx), output_mode(ctx)):
        print_info("Cancelled", mode)
        return

    player = open_player(ctx, fmt) if play else None
    client = client_from_context(ctx)
    total = 0
    path.parent.mkdir(parents=True, exist_ok=True)
    print_info("Streaming audio...", mode)
    try:
        with client.tts.stream(
            voice_or_default(ctx, voice),
            text,
            model_id=model_or_default(ctx, model),
            output_format=fmt,
            latency=latency,
            voice_settings=settings,
        ) as chunks, path.open("wb") as handle:
            for chunk in chunks:
                handle.write(chunk)
                total += len(chunk)
                if player is not None:
                    player.feed(chunk)
    finally:
        if player is not None:
            player.close()

    print_success(f"Saved -> {path} ({format_size(total)})", mode)
    if player is not None and player.error is not None:
        print_warning(f"Playback failed: {player.error}", mode)


@click.command("realtime-tts")
@click.argument("text")
@click.option("--voice", help="Voice ID or name")
@click.option("--model", "-m", default=DEFAULT_REALTIME_MODEL, show_default=True, help="Model ID")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.option("--output-format", help="Audio format (overrides --format)")
@click.option("--stability", type=float, metavar="0.0-1.0", help="Voice stability")
@click.option("--similarity-boost", type=float, metavar="0.0-1.0", help="Similarity boost")
@click.option("--play", is_flag=True, help="Play audio as chunks arrive")
@click.pass_context
def realtime_tts(
    ctx: click.Context,
    text: str,
    voice: Optional[str],
    model: str,
    output: Optional[str],
    output_format: Optional[str],
    stability: Optional[float],
    similarity_boost: Optional[float],
    play: bool,
):
    """Low-latency speech over the WebSocket streaming API.

    \b
    Examples:
      elevenlabs realtime-tts "Hello there" --play
      elevenlabs realtime-tts "Saved only" -o realtime.mp3
    """
    mode = output_mode(ctx)
    if not text.strip():
        raise ValidationError("Text cannot be empty")
    fmt = resolve_format(ctx, output_format)
    client = client_from_context(ctx)
    voice_id = voice_or_default(ctx, voice)

    realtime = RealtimeTTSClient(
        client.api_key,
        voice_id,
        model_id=model,
        output_format=fmt,
        voice_settings=build_voice_settings(stability, similarity_boost),
    )
    print_info(f"Real-time TTS using voice '{voice_id}', model '{model}'...", mode)

    player = open_player(ctx, fmt) if play else None
    try:
        result = asyncio.run(realtime.synthesize(text, on_chunk=player.feed if player else None))
    finally:
        if player is not None:
            player.close()

    if not result.audio:
        raise ValidationError("No audio data received")
    print_success(f"Received {result.chunks} chunks ({format_size(len(result.audio))} total)", mode)
    save_audio(ctx, result.audio, output, "realtime_tts", fmt)

