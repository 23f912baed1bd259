"""
ElevenLabs CLI - Speech Resources

Text-to-speech, speech-to-text and the other audio generation endpoints.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from elevenlabs_cli.resources.base import BaseResource, file_part


class TextToSpeechResource(BaseResource):
    """Text-to-speech endpoints."""

    @staticmethod
    def build_body(
        text: str,
        model_id: str,
        voice_settings: Optional[Dict[str, Any]] = None,
        language_code: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"text": text, "model_id": model_id}
        if voice_settings:
            body["voice_settings"] = voice_settings
        if language_code:
            body["language_code"] = language_code
        if seed is not None:
            body["seed"] = seed
        return body

    def convert(
        self,
        voice_id: str,
        text: str,
        model_id: str,
        output_format: str,
        voice_settings: Optional[Dict[str, Any]] = None,
        language_code: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> bytes:
        """Generate speech and return the encoded audio bytes."""
        body = self.build_body(text, model_id, voice_settings, language_code, seed)
        return self._post_bytes(
            f"/text-to-speech/{voice_id}",
            json=body,
            params={"output_format": output_format},
        )

    def convert_with_timestamps(
        self,
        voice_id: str,
        text: str,
        model_id: str,
        output_format: str,
        latency: Optional[int] = None,
        enable_logging: bool = True,
    ) -> Dict[str, Any]:
        """Generate speech with character alignment; audio comes back base64-encoded."""
        return self._post(
            f"/text-to-speech/{voice_id}/with-timestamps",
            json=self.build_body(text, model_id),
            params={
                "output_format": output_format,
                "optimize_streaming_latency": latency,
                "enable_logging": enable_logging,
            },
        )

    @contextmanager
    def stream(
        self,
        voice_id: str,
        text: str,
        model_id: str,
        output_format: str,
        latency: Optional[int] = None,
        voice_settings: Optional[Dict[str, Any]] = None,
    ) -> Iterator[Iterator[bytes]]:
        """Stream generated audio; yields an iterator over byte chunks."""
        with self._client.stream(
            "POST",
            f"/text-to-speech/{voice_id}/stream",
            params={"output_format": output_format, "optimize_streaming_latency": latency},
            json=self.build_body(text, model_id, voice_settings),
        ) as chunks:
            yield chunks


class SpeechToTextResource(BaseResource):
    """Speech-to-text (Scribe) endpoint."""

    def transcribe(
        self,
        file: Union[str, Path, tuple],
        model_id: str = "scribe_v1",
        language_code: Optional[str] = None,
        tag_audio_events: bool = True,
        num_speakers: Optional[int] = None,
        timestamps_granularity: str = "word",
        diarize: bool = False,
    ) -> Dict[str, Any]:
        part = file if isinstance(file, tuple) else file_part(file)
        form = self._compact(
            model_id=model_id,
            language_code=language_code,
            tag_audio_events=str(tag_audio_events).lower(),
            num_speakers=num_speakers,
            timestamps_granularity=timestamps_granularity,
            diarize=str(diarize).lower(),
        )
        return self._post("/speech-to-text", form=form, files={"file": part})


class SpeechToSpeechResource(BaseResource):
    """Voice changer endpoint."""

    def convert(
        self,
        voice_id: str,
        audio: Union[str, Path, tuple],
        model_id: str,
        output_format: str,
        voice_settings: Optional[Dict[str, Any]] = None,
    ) -> bytes:
        part = audio if isinstance(audio, tuple) else file_part(audio)
        form: Dict[str, Any] = {"model_id": model_id}
        if voice_settings:
            form["voice_settings"] = json.dumps(voice_settings)
        return self._post_bytes(
            f"/speech-to-speech/{voice_id}",
            params={"output_format": output_format},
            form=form,
            files={"audio": part},
        )


class AudioIsolationResource(BaseResource):
    """Background noise removal."""

    def isolate(self, audio: Union[str, Path]) -> bytes:
        return self._post_bytes("/audio-isolation", form={}, files={"audio": file_part(audio)})


class SoundEffectsResource(BaseResource):
    """Sound effect generation."""

    def generate(
        self,
        text: str,
        duration_seconds: Optional[float] = None,
        prompt_influence: Optional[float] = None,
    ) -> bytes:
        body = self._compact(
            text=text,
            duration_seconds=duration_seconds,
            prompt_influence=prompt_influence,
        )
        return self._post_bytes("/sound-generation", json=body)


class TextToDialogueResource(BaseResource):
    """Multi-speaker dialogue generation."""

    def convert_with_timestamps(
        self,
        inputs: List[Dict[str, str]],
        model_id: str,
        output_format: str,
    ) -> Dict[str, Any]:
        return self._post(
            "/text-to-dialogue/with-timestamps",
            json={"inputs": inputs, "model_id": model_id},
            params={"output_format": output_format},
        )


class TextToVoiceResource(BaseResource):
    """Voice design from a text description."""

    def create_previews(self, voice_description: str, text: str) -> Dict[str, Any]:
        return self._post(
            "/text-to-voice/create-previews",
            json={"voice_description": voice_description, "text": text},
        )


class MusicResource(BaseResource):
    """Music generation."""

    def generate(
        self,
        prompt: str,
        duration_seconds: Optional[float] = None,
        audio_influence: Optional[float] = None,
    ) -> bytes:
        body = self._compact(
            prompt=prompt,
            duration_seconds=duration_seconds,
            audio_influence=audio_influence,
        )
        return self._post_bytes("/music", json=body)

    def list(self, limit: Optional[int] = None) -> Dict[str, Any]:
        return self._get("/music", params={"page_size": limit})

    def get(self, music_id: str) -> Dict[str, Any]:
        return self._get(f"/music/{music_id}")

    def download(self, music_id: str) -> bytes:
        return self._get_bytes(f"/music/{music_id}/audio")

    def delete(self, music_id: str) -> Dict[str, Any]:
        return self._delete(f"/music/{music_id}")
