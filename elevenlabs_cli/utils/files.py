"""File, format and input helpers shared by the audio commands."""

import logging
import time
from pathlib import Path
from typing import Optional, Union

from ..exceptions import ValidationError
from .output import OutputMode, confirm, print_warning

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300
MAX_FILE_SIZE = 100 * 1024 * 1024
MAX_TTS_TEXT_LENGTH = 50_000

DEFAULT_OUTPUT_FORMAT = "mp3_44100_128"

OUTPUT_FORMATS = (
    "mp3_22050_32",
    "mp3_44100_32",
    "mp3_44100_64",
    "mp3_44100_96",
    "mp3_44100_128",
    "mp3_44100_192",
    "pcm_8000",
    "pcm_16000",
    "pcm_22050",
    "pcm_24000",
    "pcm_44100",
    "ulaw_8000",
    "mulaw_8000",
    "opus_48000_32",
    "opus_48000_64",
    "opus_48000_96",
    "opus_48000_128",
    "opus_48000_192",
    "wav_8000",
    "wav_16000",
    "wav_22050",
    "wav_24000",
    "wav_44100",
)

AUDIO_EXTENSIONS = (".mp3", ".wav", ".m4a", ".ogg", ".flac")

PathLike = Union[str, Path]


def format_to_extension(output_format: str) -> str:
    """File extension for an ElevenLabs output format string."""
    if output_format.startswith("mp3"):
        return "mp3"
    if output_format.startswith("pcm") or output_format.startswith("wav"):
        return "wav"
    if output_format.startswith("ulaw") or output_format.startswith("mulaw"):
        return "ulaw"
    if output_format.startswith("opus"):
        return "opus"
    return "mp3"


def validate_output_format(output_format: str) -> str:
    if output_format not in OUTPUT_FORMATS:
        raise ValidationError(
            f"Invalid output format: {output_format}. Valid formats: {', '.join(OUTPUT_FORMATS)}"
        )
    # The API has no mulaw alias
    return "ulaw_8000" if output_format == "mulaw_8000" else output_format


def generate_output_filename(prefix: str, extension: str) -> str:
    """``{prefix}_{unix_timestamp}.{extension}``"""
    return f"{prefix}_{int(time.time())}.{extension}"


def get_input_text(text: Optional[str], file: Optional[PathLike]) -> str:
    """Return ``text`` or the contents of ``file``."""
    if text is not None:
        return text
    if file is not None:
        try:
            return Path(file).read_text(encoding="utf-8")
        except OSError as e:
            raise ValidationError(f"Failed to read file: {file} ({e})")
    raise ValidationError("Either text or file must be provided")


def validate_text_length(text: str, max_length: int = MAX_TTS_TEXT_LENGTH) -> None:
    if not text.strip():
        raise ValidationError("Text cannot be empty")
    if len(text) > max_length:
        raise ValidationError(
            f"Text too long: {len(text)} characters (max {max_length})"
        )


def validate_file_size(path: PathLike, max_size: int = MAX_FILE_SIZE) -> None:
    path = Path(path)
    if not path.is_file():
        raise ValidationError(f"File not found: {path}")
    size = path.stat().st_size
    if size == 0:
        raise ValidationError(f"File is empty: {path}")
    if size > max_size:
        raise ValidationError(
            f"File too large: {size / (1024 * 1024):.1f}MB (max {max_size // (1024 * 1024)}MB)"
        )


def check_media_extension(
    path: PathLike,
    allowed: tuple = AUDIO_EXTENSIONS,
    mode: OutputMode = OutputMode.TABLE,
) -> None:
    """Warn (without failing) when a file has an unexpected extension."""
    suffix = Path(path).suffix.lower()
    if suffix not in allowed:
        print_warning(
            f"File extension '{suffix or '(none)'}' may not be supported. "
            f"Supported: {', '.join(e.lstrip('.') for e in allowed)}",
            mode,
        )


def confirm_overwrite(path: PathLike, assume_yes: bool, mode: OutputMode = OutputMode.TABLE) -> bool:
    """True if ``path`` may be written."""
    path = Path(path)
    if not path.exists() or assume_yes:
        return True
    print_warning(f"File '{path}' already exists.", mode)
    return confirm("Overwrite?", assume_yes=False)


def write_bytes_to_file(data: bytes, path: PathLike) -> Path:
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.debug(f"Wrote {len(data)} bytes to {path}")
    return path


def format_size(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"
