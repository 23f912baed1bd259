"""Tests for the file, subtitle and validation helpers."""

import re

import pytest

from elevenlabs_cli.exceptions import ValidationError
from elevenlabs_cli.utils.files import (
    check_media_extension,
    confirm_overwrite,
    format_size,
    format_to_extension,
    generate_output_filename,
    get_input_text,
    validate_file_size,
    validate_output_format,
    validate_text_length,
    write_bytes_to_file,
)
from elevenlabs_cli.utils.output import OutputMode
from elevenlabs_cli.utils.subtitles import (
    alignment_to_srt,
    alignment_to_vtt,
    format_srt_time,
    format_vtt_time,
    subtitle_format_for,
    words_to_srt,
    words_to_vtt,
)
from elevenlabs_cli.utils.validation import build_voice_settings, validate_voice_settings


class TestOutputFormats:
    """Test output format handling."""

    @pytest.mark.parametrize(
        "fmt,ext",
        [
            ("mp3_44100_128", "mp3"),
            ("pcm_16000", "wav"),
            ("wav_44100", "wav"),
            ("ulaw_8000", "ulaw"),
            ("opus_48000_64", "opus"),
            ("something_else", "mp3"),
        ],
    )
    def test_format_to_extension(self, fmt, ext):
        assert format_to_extension(fmt) == ext

    def test_mulaw_alias(self):
        assert validate_output_format("mulaw_8000") == "ulaw_8000"

    def test_known_format_unchanged(self):
        assert validate_output_format("pcm_24000") == "pcm_24000"

    def test_unknown_format(self):
        with pytest.raises(ValidationError, match="Invalid output format: flac"):
            validate_output_format("flac")

    def test_generated_filename(self):
        assert re.fullmatch(r"speech_\d+\.mp3", generate_output_filename("speech", "mp3"))


class TestInputText:
    """Test text input validation."""

    def test_text_wins(self, tmp_path):
        source = tmp_path / "script.txt"
        source.write_text("from file", encoding="utf-8")
        assert get_input_text("inline", source) == "inline"

    def test_reads_file(self, tmp_path):
        source = tmp_path / "script.txt"
        source.write_text("from file", encoding="utf-8")
        assert get_input_text(None, source) == "from file"

    def test_neither(self):
        with pytest.raises(ValidationError, match="Either text or file"):
            get_input_text(None, None)

    def test_empty_text(self):
        with pytest.raises(ValidationError, match="Text cannot be empty"):
            validate_text_length("   ")

    def test_text_too_long(self):
        with pytest.raises(ValidationError, match="Text too long: 11 characters"):
            validate_text_length("x" * 11, max_length=10)


class TestFiles:
    """Test file checks and writes."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError, match="File not found"):
            validate_file_size(tmp_path / "nope.mp3")

    def test_empty_file(self, tmp_path):
        empty = tmp_path / "empty.mp3"
        empty.write_bytes(b"")
        with pytest.raises(ValidationError, match="File is empty"):
            validate_file_size(empty)

    def test_file_too_large(self, tmp_path):
        big = tmp_path / "big.mp3"
        big.write_bytes(b"x" * 2048)
        with pytest.raises(ValidationError, match="File too large"):
            validate_file_size(big, max_size=1024)

    def test_write_creates_parents(self, tmp_path):
        path = write_bytes_to_file(b"abc", tmp_path / "nested" / "out.mp3")
        assert path.read_bytes() == b"abc"

    @pytest.mark.parametrize(
        "size,expected",
        [(512, "512 B"), (1024, "1.0 KB"), (1536, "1.5 KB"), (3 * 1024 * 1024, "3.0 MB")],
    )
    def test_format_size(self, size, expected):
        assert format_size(size) == expected


class TestSubtitles:
    """Test SRT/VTT rendering."""

    def test_time_formats(self):
        assert format_srt_time(3723.456) == "01:02:03,456"
        assert format_vtt_time(3723.456) == "01:02:03.456"
        assert format_srt_time(-1) == "00:00:00,000"

    def test_words_to_srt(self):
        words = [
            {"text": "Hello", "start": 0.0, "end": 0.5, "type": "word", "speaker_id": "speaker_0"},
            {"text": " ", "start": 0.5, "end": 0.6, "type": "spacing"},
            {"text": "world", "start": 0.6, "end": 1.1, "type": "word"},
        ]
        srt = words_to_srt(words)
        assert srt.startswith("1\n00:00:00,000 --> 00:00:00,500\n[speaker_0] Hello\n")
        assert "2\n00:00:00,600 --> 00:00:01,100\nworld\n" in srt

    def test_words_to_vtt(self):
        vtt = words_to_vtt([{"text": "Hi", "start": 1.0, "end": 1.25, "speaker_id": "speaker_1"}])
        assert vtt.splitlines()[:4] == ["WEBVTT", "", "00:00:01.000 --> 00:00:01.250", "<v speaker_1>Hi"]

    def test_alignment_chunks(self):
        text = "Hello world"
        alignment = {
            "characters": list(text),
            "character_start_times_seconds": [i * 0.1 for i in range(len(text))],
            "character_end_times_seconds": [(i + 1) * 0.1 for i in range(len(text))],
        }
        srt = alignment_to_srt(alignment)
        assert "1\n00:00:00,000 --> 00:00:00,500\nHello\n" in srt
        assert "3\n00:00:01,000 --> 00:00:01,100\nd\n" in srt
        assert alignment_to_vtt(alignment).startswith("WEBVTT\n\n00:00:00.000 --> 00:00:00.500\nHello")

    def test_subtitle_format_for(self):
        assert subtitle_format_for("out.vtt") == "vtt"
        assert subtitle_format_for("out.SRT") == "srt"
        assert subtitle_format_for("out") == "srt"


class TestVoiceSettings:
    """Test voice settings validation."""

    def test_nothing_set(self):
        assert build_voice_settings() is None

    def test_partial(self):
        assert build_voice_settings(stability=0.3, speaker_boost=True) == {
            "stability": 0.3,
            "use_speaker_boost": True,
        }

    @pytest.mark.parametrize("field", ["stability", "similarity_boost", "style"])
    def test_out_of_range(self, field):
        with pytest.raises(ValidationError, match="must be between 0.0 and 1.0"):
            build_voice_settings(**{field: 1.5})

    def test_validate_voice_settings(self):
        with pytest.raises(ValidationError):
            validate_voice_settings(2.0, None, None)
        validate_voice_settings(0.5, 0.75, 0.25)
        validate_voice_settings(0.0, 1.0, 0.0)


class TestFileWarnings:
    """Test that file warnings respect the output mode."""

    def test_extension_warning_on_stderr_in_json_mode(self, capsys):
        check_media_extension("notes.xyz", mode=OutputMode.JSON)
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "may not be supported" in captured.err

    def test_overwrite_warning_on_stderr_in_json_mode(self, tmp_path, capsys, monkeypatch):
        existing = tmp_path / "out.mp3"
        existing.write_bytes(b"old")
        monkeypatch.setattr("elevenlabs_cli.utils.files.confirm", lambda message, assume_yes=False: False)
        assert confirm_overwrite(existing, assume_yes=False, mode=OutputMode.JSON) is False
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "already exists" in captured.err
