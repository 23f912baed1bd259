"""
ElevenLabs CLI - Audio

Local playback and recording. Everything that touches a sound device goes
through an ``AudioBackend``; ``get_audio_backend()`` picks the PyAudio
implementation when the optional ``audio`` extra is installed and a no-op
implementation otherwise, so commands never branch on availability
themselves.

Streaming playback uses ``StreamingPlayer``: producers push encoded chunks
into a bounded queue and a single background thread buffers, decodes and
plays them in arrival order.
"""

from __future__ import annotations

import io
import logging
import queue
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from elevenlabs_cli.exceptions import AudioUnavailableError, ElevenLabsError

logger = logging.getLogger(__name__)

# Minimum number of encoded bytes handed to the decoder at once
MIN_BUFFER_SIZE = 8192
DEFAULT_QUEUE_SIZE = 64
RECORD_SAMPLE_RATE = 16000
RECORD_CHUNK = 1024


class AudioDecodeError(ElevenLabsError):
    """Raised when a chunk of encoded audio cannot be decoded."""


@dataclass
class PcmAudio:
    """Decoded PCM frames ready to be written to an output stream."""

    frames: bytes
    sample_rate: int
    channels: int = 1
    sample_width: int = 2


def pcm_sample_rate(output_format: str) -> Optional[int]:
    """Sample rate of a raw ``pcm_*`` output format, None for encoded formats."""
    if not output_format.startswith("pcm_"):
        return None
    try:
        return int(output_format.split("_")[1])
    except (IndexError, ValueError):
        return None


class OutputStream(ABC):
    """An open output device stream."""

    @abstractmethod
    def write(self, frames: bytes) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        """Block until queued frames have played, then release the device."""


class AudioBackend(ABC):
    """Interface for local audio playback and capture."""

    name = "abstract"
    available = False

    @abstractmethod
    def decode(self, data: bytes, output_format: str = "mp3_44100_128") -> PcmAudio:
        """Decode encoded audio, raising ``AudioDecodeError`` on failure."""

    @abstractmethod
    def open_output(self, sample_rate: int, channels: int = 1, sample_width: int = 2) -> OutputStream:
        pass

    @abstractmethod
    def record(self, duration: float, device_index: Optional[int] = None) -> bytes:
        """Record ``duration`` seconds from an input device and return WAV bytes."""

    @abstractmethod
    def list_input_devices(self) -> List[Dict[str, Any]]:
        pass

    def play(self, data: bytes, output_format: str = "mp3_44100_128") -> None:
        """Decode and play a complete clip, blocking until it has finished."""
        pcm = self.decode(data, output_format)
        stream = self.open_output(pcm.sample_rate, pcm.channels, pcm.sample_width)
        try:
            stream.write(pcm.frames)
        finally:
            stream.close()


class _NullOutputStream(OutputStream):
    def __init__(self) -> None:
        self.frames_written = 0

    def write(self, frames: bytes) -> None:
        self.frames_written += len(frames)

    def close(self) -> None:
        pass


class NullAudioBackend(AudioBackend):
    """Backend used when no audio libraries are installed. Playback is a no-op."""

    name = "null"
    available = False

    def decode(self, data: bytes, output_format: str = "mp3_44100_128") -> PcmAudio:
        return PcmAudio(frames=data, sample_rate=pcm_sample_rate(output_format) or 0)

    def open_output(self, sample_rate: int, channels: int = 1, sample_width: int = 2) -> OutputStream:
        return _NullOutputStream()

    def play(self, data: bytes, output_format: str = "mp3_44100_128") -> None:
        logger.info("Audio playback unavailable; skipping %d bytes", len(data))

    def record(self, duration: float, device_index: Optional[int] = None) -> bytes:
        raise AudioUnavailableError()

    def list_input_devices(self) -> List[Dict[str, Any]]:
        raise AudioUnavailableError()


class _PyAudioOutputStream(OutputStream):
    def __init__(self, stream: Any) -> None:
        self._stream = stream

    def write(self, frames: bytes) -> None:
        self._stream.write(frames)

    def close(self) -> None:
        # stop_stream() returns once buffered frames have been played
        self._stream.stop_stream()
        self._stream.close()


class PyAudioBackend(AudioBackend):
    """
    Playback and recording through PortAudio.

    Requires the ``audio`` extra: pip install 'elevenlabs-cli[audio]'
    (pyaudio for the device, pydub + ffmpeg for compressed formats).
    """

    name = "pyaudio"
    available = True

    def __init__(self) -> None:
        import pyaudio
        from pydub import AudioSegment

        self._pyaudio = pyaudio
        self._segment_cls = AudioSegment
        self._pa = pyaudio.PyAudio()

    def decode(self, data: bytes, output_format: str = "mp3_44100_128") -> PcmAudio:
        rate = pcm_sample_rate(output_format)
        if rate:
            return PcmAudio(frames=data, sample_rate=rate)

        container = output_format.split("_")[0]
        if container in ("ulaw", "mulaw"):
            container = "mulaw"
        try:
            segment = self._segment_cls.from_file(io.BytesIO(data), format=container)
        except Exception as e:
            raise AudioDecodeError(f"Could not decode {len(data)} bytes of {container}: {e}")
        return PcmAudio(
            frames=segment.raw_data,
            sample_rate=segment.frame_rate,
            channels=segment.channels,
            sample_width=segment.sample_width,
        )

    def open_output(self, sample_rate: int, channels: int = 1, sample_width: int = 2) -> OutputStream:
        stream = self._pa.open(
            format=self._pa.get_format_from_width(sample_width),
            channels=channels,
            rate=sample_rate,
            output=True,
        )
        return _PyAudioOutputStream(stream)

    def record(self, duration: float, device_index: Optional[int] = None) -> bytes:
        stream = self._pa.open(
            format=self._pyaudio.paInt16,
            channels=1,
            rate=RECORD_SAMPLE_RATE,
            input=True,
            input_device_index=device_index,
            frames_per_buffer=RECORD_CHUNK,
        )
        frames = bytearray()
        deadline = time.monotonic() + duration
        try:
            while time.monotonic() < deadline:
                frames.extend(stream.read(RECORD_CHUNK, exception_on_overflow=False))
        finally:
            stream.stop_stream()
            stream.close()

        segment = self._segment_cls(
            data=bytes(frames),
            sample_width=2,
            frame_rate=RECORD_SAMPLE_RATE,
            channels=1,
        )
        buffer = io.BytesIO()
        segment.export(buffer, format="wav")
        return buffer.getvalue()

    def list_input_devices(self) -> List[Dict[str, Any]]:
        devices = []
        for index in range(self._pa.get_device_count()):
            info = self._pa.get_device_info_by_index(index)
            if info.get("maxInputChannels", 0) > 0:
                devices.append({
                    "index": index,
                    "name": info.get("name"),
                    "channels": info.get("maxInputChannels"),
                    "sample_rate": int(info.get("defaultSampleRate", 0)),
                })
        return devices


_backend: Optional[AudioBackend] = None


def get_audio_backend() -> AudioBackend:
    """Return the process-wide audio backend, choosing it on first use."""
    global _backend
    if _backend is None:
        try:
            _backend = PyAudioBackend()
        except ImportError as e:
            logger.debug(f"Audio libraries unavailable ({e}); using null backend")
            _backend = NullAudioBackend()
        except OSError as e:
            logger.warning(f"No usable audio device ({e}); using null backend")
            _backend = NullAudioBackend()
    return _backend


def set_audio_backend(backend: Optional[AudioBackend]) -> None:
    """Override the backend (used by tests); None resets to auto-detection."""
    global _backend
    _backend = backend


_END = object()


class StreamingPlayer:
    """
    Plays a stream of encoded audio chunks on a background thread.

    ``feed()`` blocks once ``max_queue`` chunks are waiting, which bounds
    memory when the network outruns the speaker. Chunks are accumulated to
    at least ``min_buffer`` bytes before decoding; a buffer that fails to
    decode is logged and dropped. ``close()`` flushes what is left and
    blocks until playback has drained.

    Example:
        >>> with StreamingPlayer(get_audio_backend()) as player:
        ...     for chunk in chunks:
        ...         player.feed(chunk)
    """

    def __init__(
        self,
        backend: AudioBackend,
        output_format: str = "mp3_44100_128",
        min_buffer: int = MIN_BUFFER_SIZE,
        max_queue: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        self.backend = backend
        self.output_format = output_format
        self.min_buffer = min_buffer
        self._queue: "queue.Queue[Any]" = queue.Queue(maxsize=max_queue)
        self._thread = threading.Thread(target=self._run, name="audio-player", daemon=True)
        self._output: Optional[OutputStream] = None
        self._output_key: Optional[tuple] = None
        self._started = False
        self._closed = False

        self.bytes_received = 0
        self.bytes_played = 0
        self.buffers_dropped = 0
        self.error: Optional[BaseException] = None

    def start(self) -> "StreamingPlayer":
        if not self._started:
            self._thread.start()
            self._started = True
        return self

    def feed(self, chunk: bytes) -> None:
        """Queue an encoded chunk for playback."""
        if self._closed:
            raise RuntimeError("StreamingPlayer is closed")
        if not chunk:
            return
        if not self._started:
            self.start()
        self.bytes_received += len(chunk)
        self._queue.put(chunk)

    def close(self) -> None:
        """Signal end of stream, flush the remainder and wait for playback to drain."""
        if self._closed:
            return
        self._closed = True
        if not self._started:
            return
        self._queue.put(_END)
        self._thread.join()

    def __enter__(self) -> "StreamingPlayer":
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _run(self) -> None:
        buffer = bytearray()
        while True:
            item = self._queue.get()
            if item is _END:
                break
            buffer.extend(item)
            if len(buffer) >= self.min_buffer:
                self._play(bytes(buffer))
                buffer = bytearray()

        if buffer:
            self._play(bytes(buffer))
        if self._output is not None:
            try:
                self._output.close()
            except Exception as e:
                logger.error(f"Failed to close audio output: {e}")
                self.error = self.error or e
            self._output = None

    def _play(self, data: bytes) -> None:
        if self.error is not None:
            # Keep draining the queue so producers never block on a dead player
            return
        try:
            pcm = self.backend.decode(data, self.output_format)
        except AudioDecodeError as e:
            self.buffers_dropped += 1
            logger.debug(f"Dropping undecodable audio buffer: {e}")
            return

        try:
            key = (pcm.sample_rate, pcm.channels, pcm.sample_width)
            if self._output is None or key != self._output_key:
                if self._output is not None:
                    self._output.close()
                self._output = self.backend.open_output(*key)
                self._output_key = key
            self._output.write(pcm.frames)
            self.bytes_played += len(data)
        except Exception as e:
            logger.error(f"Audio playback failed: {e}")
            self.error = e
