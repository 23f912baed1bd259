"""Tests for audio backends and streaming playback."""

import pytest

from elevenlabs_cli.audio import (
    AudioBackend,
    AudioDecodeError,
    NullAudioBackend,
    OutputStream,
    PcmAudio,
    StreamingPlayer,
    get_audio_backend,
    pcm_sample_rate,
)
from elevenlabs_cli.exceptions import AudioUnavailableError


class RecordingStream(OutputStream):
    def __init__(self, backend):
        self.backend = backend

    def write(self, frames):
        self.backend.written.append(frames)

    def close(self):
        self.backend.closed_streams += 1


class RecordingBackend(AudioBackend):
    """Decodes by passing bytes through; rejects buffers starting with ``bad``."""

    name = "recording"
    available = True

    def __init__(self):
        self.written = []
        self.decoded_sizes = []
        self.opened = []
        self.closed_streams = 0

    def decode(self, data, output_format="mp3_44100_128"):
        if data.startswith(b"bad"):
            raise AudioDecodeError("not audio")
        self.decoded_sizes.append(len(data))
        return PcmAudio(frames=data, sample_rate=pcm_sample_rate(output_format) or 44100)

    def open_output(self, sample_rate, channels=1, sample_width=2):
        self.opened.append((sample_rate, channels, sample_width))
        return RecordingStream(self)

    def record(self, duration, device_index=None):
        return b""

    def list_input_devices(self):
        return []


class TestFormats:
    """Test format helpers."""

    def test_pcm_sample_rate(self):
        assert pcm_sample_rate("pcm_16000") == 16000
        assert pcm_sample_rate("pcm_x") is None
        assert pcm_sample_rate("mp3_44100_128") is None


class TestNullBackend:
    """Test the backend used without the audio extra."""

    def test_unavailable(self):
        assert NullAudioBackend.available is False
        assert isinstance(get_audio_backend(), NullAudioBackend)

    def test_play_is_noop(self):
        NullAudioBackend().play(b"ID3audio")

    def test_record_raises(self):
        with pytest.raises(AudioUnavailableError, match="pip install"):
            NullAudioBackend().record(1.0)

    def test_list_devices_raises(self):
        with pytest.raises(AudioUnavailableError):
            NullAudioBackend().list_input_devices()


class TestStreamingPlayer:
    """Test buffered background playback."""

    def test_plays_in_arrival_order(self):
        backend = RecordingBackend()
        with StreamingPlayer(backend, output_format="pcm_16000", min_buffer=4) as player:
            for chunk in (b"aaaa", b"bbbb", b"cc"):
                player.feed(chunk)

        assert b"".join(backend.written) == b"aaaabbbbcc"
        assert player.bytes_received == 10
        assert player.bytes_played == 10
        assert backend.opened == [(16000, 1, 2)]
        assert backend.closed_streams == 1

    def test_buffers_small_chunks(self):
        backend = RecordingBackend()
        player = StreamingPlayer(backend, min_buffer=8).start()
        for _ in range(4):
            player.feed(b"ab")
        player.close()
        assert backend.decoded_sizes == [8]

    def test_flushes_remainder_on_close(self):
        backend = RecordingBackend()
        player = StreamingPlayer(backend, min_buffer=1024).start()
        player.feed(b"tail")
        player.close()
        assert backend.written == [b"tail"]

    def test_undecodable_buffer_dropped(self):
        backend = RecordingBackend()
        player = StreamingPlayer(backend, min_buffer=4).start()
        player.feed(b"bad!")
        player.feed(b"good")
        player.close()
        assert player.buffers_dropped == 1
        assert backend.written == [b"good"]
        assert player.error is None

    def test_empty_chunks_ignored(self):
        backend = RecordingBackend()
        player = StreamingPlayer(backend).start()
        player.feed(b"")
        player.close()
        assert player.bytes_received == 0
        assert backend.written == []

    def test_feed_after_close(self):
        player = StreamingPlayer(RecordingBackend())
        player.close()
        with pytest.raises(RuntimeError, match="closed"):
            player.feed(b"late")

    def test_close_is_idempotent(self):
        player = StreamingPlayer(RecordingBackend()).start()
        player.close()
        player.close()
