"""Speech-to-text commands."""

import json
import time
from pathlib import Path
from typing import Any, Dict, Optional

import click

from ..audio import AudioBackend, get_audio_backend
from ..exceptions import ValidationError
from ..utils.client import client_from_context
from ..utils.files import check_media_extension, validate_file_size
from ..utils.output import OutputMode, console, format_output, print_info, print_success
from ..utils.subtitles import words_to_srt, words_to_vtt
from .common import output_mode

TRANSCRIPT_FORMATS = ("txt", "json", "srt", "vtt")


def resolve_input_device(backend: AudioBackend, device: Optional[str]) -> Optional[int]:
    """Map ``--input-device`` (index or part of a name) to a device index."""
    if device is None:
        return None
    devices = backend.list_input_devices()
    if device.isdigit():
        index = int(device)
        if any(d["index"] == index for d in devices):
            return index
    else:
        for d in devices:
            if device.lower() in str(d.get("name", "")).lower():
                return d["index"]
    raise ValidationError(
        f"Input device not found: {device}. Use --list-input-devices to see available devices"
    )


def render_transcript(result: Dict[str, Any], fmt: str, diarize: bool = False) -> str:
    """Render a transcription response as plain text, JSON, SRT or WebVTT."""
    if fmt == "json":
        return json.dumps(result, indent=2)

    words = result.get("words") or []
    if not diarize:
        words = [{k: v for k, v in w.items() if k != "speaker_id"} for w in words]
    if fmt == "srt":
        return words_to_srt(words)
    if fmt == "vtt":
        return words_to_vtt(words)

    if diarize and words:
        return _speaker_paragraphs(words)
    return result.get("text", "")


def _speaker_paragraphs(words) -> str:
    lines = []
    speaker = None
    current = []
    for word in words:
        if word.get("speaker_id") != speaker and current:
            lines.append(f"[{speaker}] {''.join(current).strip()}")
            current = []
        speaker = word.get("speaker_id")
        current.append(word.get("text", ""))
    if current:
        lines.append(f"[{speaker}] {''.join(current).strip()}")
    return "\n".join(lines)


@click.command("stt")
@click.argument("file", required=False, type=click.Path(dir_okay=False))
@click.option("--record", is_flag=True, help="Record audio from the microphone instead of a file")
@click.option("--duration", type=click.FloatRange(min=0.5), default=5.0, show_default=True,
              help="Recording duration in seconds")
@click.option("--input-device", metavar="DEVICE", help="Input device index or name")
@click.option("--list-input-devices", is_flag=True, help="List available input devices and exit")
@click.option("--model", "-m", default="scribe_v1", show_default=True, help="Transcription model")
@click.option("--language", "-l", metavar="CODE", help="Language code (auto-detected if omitted)")
@click.option("--tag-audio-events/--no-tag-audio-events", default=True, show_default=True,
              help="Tag non-speech events such as (laughter)")
@click.option("--num-speakers", type=click.IntRange(1, 32), help="Maximum number of speakers")
@click.option("--timestamps", type=click.Choice(["none", "word", "character"]), default="word",
              show_default=True, help="Timestamp granularity")
@click.option("--diarize", is_flag=True, help="Identify speakers")
@click.option("--format", "-f", "fmt", type=click.Choice(TRANSCRIPT_FORMATS), default="txt",
              show_default=True, help="Transcript format")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write transcript to file")
@click.pass_context
def stt(
    ctx: click.Context,
    file: Optional[str],
    record: bool,
    duration: float,
    input_device: Optional[str],
    list_input_devices: bool,
    model: str,
    language: Optional[str],
    tag_audio_events: bool,
    num_speakers: Optional[int],
    timestamps: str,
    diarize: bool,
    fmt: str,
    output: Optional[str],
):
    """Transcribe speech to text.

    \b
    Examples:
      elevenlabs stt meeting.mp3
      elevenlabs stt interview.wav --diarize -f srt -o interview.srt
      elevenlabs stt --record --duration 10
    """
    mode = output_mode(ctx)

    if list_input_devices:
        devices = get_audio_backend().list_input_devices()
        format_output(devices, mode, columns=["index", "name", "channels", "sample_rate"],
                      title="Input Devices")
        return

    if record:
        backend = get_audio_backend()
        device_index = resolve_input_device(backend, input_device)
        print_info(f"Recording for {duration:g} seconds...", mode)
        audio = backend.record(duration, device_index)
        print_info("Recording complete", mode)
        source: Any = ("recording.wav", audio, "audio/wav")
        label = "recording"
    elif file:
        validate_file_size(file)
        check_media_extension(file, (".mp3", ".wav", ".m4a", ".ogg", ".flac", ".webm", ".mp4"), mode)
        source = file
        label = file
    else:
        raise click.UsageError("Provide an audio FILE or use --record")

    client = client_from_context(ctx)
    print_info(f"Transcribing '{label}' with {model}...", mode)
    started = time.monotonic()
    result = client.stt.transcribe(
        source,
        model_id=model,
        language_code=language,
        tag_audio_events=tag_audio_events,
        num_speakers=num_speakers,
        timestamps_granularity=timestamps,
        diarize=diarize,
    )
    elapsed = time.monotonic() - started
    text = render_transcript(result, fmt, diarize)

    if output:
        Path(output).write_text(text, encoding="utf-8")
        print_success(f"Transcription complete in {elapsed:.2f}s -> {output}", mode)
    elif mode is OutputMode.TABLE or fmt != "txt":
        console.print()
        console.print("[bold underline]Transcription:[/bold underline]")
        console.print(text, markup=False, highlight=False)
        print_success(f"Completed in {elapsed:.2f}s", mode)
    else:
        format_output(result, mode)

    if result.get("language_code"):
        probability = float(result.get("language_probability") or 0.0)
        print_info(f"Detected language: {result['language_code']} ({probability * 100:.1f}% confidence)", mode)
