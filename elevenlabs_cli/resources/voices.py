"""
ElevenLabs CLI - Voices Resources

Voice management, samples, the shared voice library and pronunciation
dictionaries.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from elevenlabs_cli.resources.base import BaseResource, file_part

SHARED_VOICES_V2_URL = "https://api.elevenlabs.io/v2/voices"


class VoicesResource(BaseResource):
    """
    Resource for managing the account's voices.

    Example:
        >>> client = ElevenLabsClient(api_key="...")
        >>> voices = client.voices.list()["voices"]
        >>> client.voices.settings(voices[0]["voice_id"])
    """

    def list(self) -> Dict[str, Any]:
        return self._get("/voices")

    def get(self, voice_id: str) -> Dict[str, Any]:
        return self._get(f"/voices/{voice_id}")

    def delete(self, voice_id: str) -> Dict[str, Any]:
        return self._delete(f"/voices/{voice_id}")

    def settings(self, voice_id: str) -> Dict[str, Any]:
        return self._get(f"/voices/{voice_id}/settings")

    def edit_settings(self, voice_id: str, settings: Dict[str, Any]) -> Dict[str, Any]:
        return self._post(f"/voices/{voice_id}/settings/edit", json=settings)

    def edit(
        self,
        voice_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self._put(f"/voices/{voice_id}", json=self._compact(name=name, description=description))

    def add(
        self,
        name: str,
        samples: Sequence[Union[str, Path]],
        description: Optional[str] = None,
        labels: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Instant voice clone from local sample files."""
        form: Dict[str, Any] = {"name": name}
        if description:
            form["description"] = description
        if labels:
            form["labels"] = json.dumps(labels)
        files = [("files", file_part(path)) for path in samples]
        return self._post("/voices/add", form=form, files=files)

    def share(self, voice_id: str) -> Dict[str, Any]:
        return self._post(f"/voices/{voice_id}/share")

    def similar(self, voice_id: Optional[str] = None, text: Optional[str] = None) -> Dict[str, Any]:
        return self._get("/voices/similar", params={"voice_id": voice_id, "text": text})

    def start_fine_tune(self, voice_id: str) -> Dict[str, Any]:
        return self._post(f"/voices/{voice_id}/fine-tune")

    def fine_tune_status(self, voice_id: str) -> Dict[str, Any]:
        return self._get(f"/voices/{voice_id}/fine-tune")

    def cancel_fine_tune(self, voice_id: str) -> Dict[str, Any]:
        return self._delete(f"/voices/{voice_id}/fine-tune")


class SamplesResource(BaseResource):
    """Audio samples attached to a cloned voice."""

    def list(self, voice_id: str) -> List[Dict[str, Any]]:
        voice = self._get(f"/voices/{voice_id}")
        return voice.get("samples") or []

    def delete(self, voice_id: str, sample_id: str) -> Dict[str, Any]:
        return self._delete(f"/voices/{voice_id}/samples/{sample_id}")

    def audio(self, voice_id: str, sample_id: str) -> bytes:
        return self._get_bytes(f"/voices/{voice_id}/samples/{sample_id}/audio")


class VoiceLibraryResource(BaseResource):
    """Community shared voices and collections."""

    def shared(self, **params: Any) -> Dict[str, Any]:
        return self._get("/shared-voices", params=params)

    def saved(self, page_size: Optional[int] = None, search: Optional[str] = None) -> Dict[str, Any]:
        return self._get(
            SHARED_VOICES_V2_URL,
            params={"voice_type": "saved", "page_size": page_size, "search": search},
        )

    def add(self, public_user_id: str, voice_id: str, name: str) -> Dict[str, Any]:
        return self._post(f"/voices/add/{public_user_id}/{voice_id}", json={"new_name": name})

    def collections(self, page_size: Optional[int] = None) -> Dict[str, Any]:
        return self._get("/voices/collections", params={"page_size": page_size})

    def collection_voices(self, collection_id: str) -> Dict[str, Any]:
        return self._get(f"/voices/collections/{collection_id}/voices")


class PronunciationResource(BaseResource):
    """Pronunciation dictionaries."""

    def list(self, page_size: Optional[int] = None) -> Dict[str, Any]:
        return self._get("/pronunciation-dictionaries", params={"page_size": page_size})

    def add_from_file(
        self,
        path: Union[str, Path],
        name: str,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        form = self._compact(name=name, description=description)
        return self._post(
            "/pronunciation-dictionaries/add-from-file",
            form=form,
            files={"file": file_part(path)},
        )

    def delete(self, dictionary_id: str) -> Dict[str, Any]:
        return self._delete(f"/pronunciation-dictionaries/{dictionary_id}")

    def get(self, dictionary_id: str) -> Dict[str, Any]:
        return self._get(f"/pronunciation-dictionaries/{dictionary_id}")

    def add_rules(self, dictionary_id: str, rules: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self._post(
            f"/pronunciation-dictionaries/{dictionary_id}/add-rules",
            json={"rules": rules},
        )

    def remove_rules(self, dictionary_id: str, rule_strings: List[str]) -> Dict[str, Any]:
        return self._post(
            f"/pronunciation-dictionaries/{dictionary_id}/remove-rules",
            json={"rule_strings": rule_strings},
        )

    def pls(self, dictionary_id: str, version_id: str) -> bytes:
        return self._get_bytes(f"/pronunciation-dictionaries/{dictionary_id}/{version_id}/download")
