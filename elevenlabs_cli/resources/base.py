"""
ElevenLabs CLI - Base Resource

This module contains the base class for all API resources.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple, Union

if TYPE_CHECKING:
    from elevenlabs_cli.utils.client import ElevenLabsClient


FileTuple = Tuple[str, bytes, str]


def file_part(path: Union[str, Path]) -> FileTuple:
    """Multipart file tuple ``(filename, content, content_type)`` for ``path``."""
    path = Path(path)
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return (path.name, path.read_bytes(), content_type)


class BaseResource:
    """
    Base class for all API resources.

    Resources are thin: they know endpoint paths and request shapes, and
    return the decoded JSON (or raw bytes for audio) unchanged.
    """

    def __init__(self, client: "ElevenLabsClient") -> None:
        self._client = client

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._client.get(path, params=params)

    def _post(
        self,
        path: str,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        form: Optional[Dict[str, Any]] = None,
        files: Optional[Any] = None,
    ) -> Any:
        return self._client.post(path, data=json, params=params, form=form, files=files)

    def _patch(self, path: str, json: Optional[Any] = None) -> Any:
        return self._client.patch(path, data=json)

    def _put(self, path: str, json: Optional[Any] = None) -> Any:
        return self._client.put(path, data=json)

    def _delete(self, path: str, params: Optional[Dict[str, Any]] = None, json: Optional[Any] = None) -> Any:
        return self._client.delete(path, params=params, data=json)

    def _get_bytes(self, path: str, params: Optional[Dict[str, Any]] = None) -> bytes:
        return self._client.get_bytes(path, params=params)

    def _post_bytes(
        self,
        path: str,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        form: Optional[Dict[str, Any]] = None,
        files: Optional[Any] = None,
    ) -> bytes:
        return self._client.post_bytes(path, data=json, params=params, form=form, files=files)

    @staticmethod
    def _compact(**values: Any) -> Dict[str, Any]:
        """Drop keys whose value is None."""
        return {k: v for k, v in values.items() if v is not None}
