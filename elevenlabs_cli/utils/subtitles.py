"""SRT and WebVTT rendering for transcripts and TTS alignment data."""

from typing import Any, Dict, List, Optional

# Characters per cue when subtitling character-level TTS alignment
ALIGNMENT_CHUNK_SIZE = 5


def _split_seconds(seconds: float):
    seconds = max(seconds, 0.0)
    total_ms = int(round(seconds * 1000))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    return hours, minutes, secs, millis


def format_srt_time(seconds: float) -> str:
    """``HH:MM:SS,mmm``"""
    h, m, s, ms = _split_seconds(seconds)
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"


def format_vtt_time(seconds: float) -> str:
    """``HH:MM:SS.mmm``"""
    h, m, s, ms = _split_seconds(seconds)
    return f"{h:02d}:{m:02d}:{s:02d}.{ms:03d}"


def _word_cues(words: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    cues = []
    for word in words:
        if word.get("type", "word") != "word":
            continue
        text = (word.get("text") or "").strip()
        if not text:
            continue
        start = float(word.get("start") or 0.0)
        end = float(word.get("end") or start)
        cues.append({"text": text, "start": start, "end": end, "speaker": word.get("speaker_id")})
    return cues


def words_to_srt(words: List[Dict[str, Any]]) -> str:
    """One SRT cue per transcribed word, prefixed with ``[speaker]`` when diarized."""
    blocks = []
    for index, cue in enumerate(_word_cues(words), start=1):
        text = f"[{cue['speaker']}] {cue['text']}" if cue["speaker"] else cue["text"]
        blocks.append(
            f"{index}\n{format_srt_time(cue['start'])} --> {format_srt_time(cue['end'])}\n{text}\n"
        )
    return "\n".join(blocks)


def words_to_vtt(words: List[Dict[str, Any]]) -> str:
    """One WebVTT cue per transcribed word, using ``<v speaker>`` voice tags."""
    lines = ["WEBVTT", ""]
    for cue in _word_cues(words):
        text = f"<v {cue['speaker']}>{cue['text']}" if cue["speaker"] else cue["text"]
        lines.append(f"{format_vtt_time(cue['start'])} --> {format_vtt_time(cue['end'])}")
        lines.append(text)
        lines.append("")
    return "\n".join(lines)


def _alignment_chunks(alignment: Dict[str, Any], chunk_size: int):
    chars = alignment.get("characters") or []
    starts = alignment.get("character_start_times_seconds") or []
    ends = alignment.get("character_end_times_seconds") or []
    count = min(len(chars), len(starts), len(ends))
    for i in range(0, count, chunk_size):
        j = min(i + chunk_size, count)
        yield "".join(chars[i:j]), starts[i], ends[j - 1]


def alignment_to_srt(alignment: Dict[str, Any], chunk_size: int = ALIGNMENT_CHUNK_SIZE) -> str:
    blocks = []
    for index, (text, start, end) in enumerate(_alignment_chunks(alignment, chunk_size), start=1):
        blocks.append(f"{index}\n{format_srt_time(start)} --> {format_srt_time(end)}\n{text}\n")
    return "\n".join(blocks)


def alignment_to_vtt(alignment: Dict[str, Any], chunk_size: int = ALIGNMENT_CHUNK_SIZE) -> str:
    lines = ["WEBVTT", ""]
    for text, start, end in _alignment_chunks(alignment, chunk_size):
        lines.append(f"{format_vtt_time(start)} --> {format_vtt_time(end)}")
        lines.append(text)
        lines.append("")
    return "\n".join(lines)


def subtitle_format_for(path: str, default: str = "srt") -> str:
    suffix = path.rsplit(".", 1)[-1].lower() if "." in path else default
    return "vtt" if suffix == "vtt" else "srt"


def render_alignment(alignment: Dict[str, Any], fmt: Optional[str] = "srt") -> str:
    return alignment_to_vtt(alignment) if fmt == "vtt" else alignment_to_srt(alignment)
