"""
ElevenLabs CLI - Studio Resources

Dubbing jobs, Studio projects and Audio Native embeds.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

from elevenlabs_cli.resources.base import BaseResource, file_part


class DubbingResource(BaseResource):
    """Dubbing jobs."""

    def create(
        self,
        file: Union[str, Path],
        target_lang: str,
        source_lang: Optional[str] = None,
        num_speakers: Optional[int] = None,
        watermark: bool = False,
        name: Optional[str] = None,
    ) -> Dict[str, Any]:
        form = self._compact(
            target_lang=target_lang,
            source_lang=source_lang or "auto",
            num_speakers=num_speakers,
            watermark=str(watermark).lower(),
            name=name,
        )
        return self._post("/dubbing", form=form, files={"file": file_part(file)})

    def get(self, dubbing_id: str) -> Dict[str, Any]:
        return self._get(f"/dubbing/{dubbing_id}")

    def audio(self, dubbing_id: str, language_code: str) -> bytes:
        return self._get_bytes(f"/dubbing/{dubbing_id}/audio/{language_code}")

    def delete(self, dubbing_id: str) -> Dict[str, Any]:
        return self._delete(f"/dubbing/{dubbing_id}")


class ProjectsResource(BaseResource):
    """Studio projects."""

    def list(self) -> Dict[str, Any]:
        return self._get("/projects")

    def get(self, project_id: str) -> Dict[str, Any]:
        return self._get(f"/projects/{project_id}")

    def delete(self, project_id: str) -> Dict[str, Any]:
        return self._delete(f"/projects/{project_id}")

    def convert(self, project_id: str) -> Dict[str, Any]:
        return self._post(f"/projects/{project_id}/convert")

    def snapshots(self, project_id: str) -> Dict[str, Any]:
        return self._get(f"/projects/{project_id}/snapshots")

    def snapshot_audio(self, project_id: str, snapshot_id: str) -> bytes:
        return self._post_bytes(f"/projects/{project_id}/snapshots/{snapshot_id}/stream")


class AudioNativeResource(BaseResource):
    """Audio Native embeddable players."""

    def list(self, page_size: int = 10, page: int = 1) -> Any:
        return self._get("/audio-native", params={"page_size": page_size, "page": page})

    def get(self, project_id: str) -> Dict[str, Any]:
        return self._get(f"/audio-native/{project_id}/settings")

    def create(self, name: str, file: Optional[Union[str, Path]] = None, **options: Any) -> Dict[str, Any]:
        form: Dict[str, Any] = {"name": name}
        for key, value in options.items():
            if value is None or value is False:
                continue
            form[key] = str(value).lower() if isinstance(value, bool) else value
        files = {"file": file_part(file)} if file else None
        return self._post("/audio-native", form=form, files=files)
