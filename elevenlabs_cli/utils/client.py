"""API client wrapper for the CLI."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import click
import httpx

from .. import __version__
from ..exceptions import MissingApiKeyError, NetworkError, TimeoutError, error_from_status
from ..resources import (
    AgentsResource,
    AudioIsolationResource,
    AudioNativeResource,
    BatchCallsResource,
    ConversationsResource,
    DubbingResource,
    HistoryResource,
    KnowledgeBaseResource,
    ModelsResource,
    MusicResource,
    PhoneNumbersResource,
    ProjectsResource,
    PronunciationResource,
    RagResource,
    SamplesResource,
    SoundEffectsResource,
    SpeechToSpeechResource,
    SpeechToTextResource,
    TextToDialogueResource,
    TextToSpeechResource,
    TextToVoiceResource,
    ToolsResource,
    UsageResource,
    UserResource,
    VoiceLibraryResource,
    VoicesResource,
    WebhooksResource,
    WorkspaceResource,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.elevenlabs.io/v1"
DEFAULT_WS_URL = "wss://api.elevenlabs.io/v1"

# 300s per request, 30s to establish the connection
DEFAULT_TIMEOUT = httpx.Timeout(300.0, connect=30.0)


def _clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None}


def _error_message(response: httpx.Response) -> tuple:
    """Extract (message, details) from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return (response.text or f"HTTP {response.status_code}"), {}

    if not isinstance(body, dict):
        return str(body), {}
    detail = body.get("detail")
    if isinstance(detail, dict):
        message = detail.get("message") or detail.get("status") or str(detail)
    elif isinstance(detail, list) and detail:
        first = detail[0]
        message = first.get("msg", str(first)) if isinstance(first, dict) else str(first)
    else:
        message = detail or body.get("message") or body.get("error") or str(body)
    return str(message), body


class ElevenLabsClient:
    """
    Synchronous HTTP client for the ElevenLabs REST API.

    Every failed response is turned into a typed ``ElevenLabsError``
    subclass chosen by status code; transport failures become
    ``NetworkError`` or ``TimeoutError``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={
                "xi-api-key": api_key,
                "Accept": "application/json",
                "User-Agent": f"elevenlabs-cli/{__version__}",
            },
            timeout=timeout,
            transport=transport,
        )
        logger.debug(f"ElevenLabs client initialized with base URL: {self.base_url}")

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return self.base_url + "/" + path.lstrip("/")

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.status_code < 400:
            return
        message, details = _error_message(response)
        logger.debug(f"API error {response.status_code}: {message}")
        raise error_from_status(
            response.status_code,
            message,
            details=details,
            retry_after=response.headers.get("Retry-After"),
        )

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Any] = None,
    ) -> httpx.Response:
        """Make an HTTP request and return the successful response."""
        url = self._url(path)
        logger.debug(f"Making {method} request to {url}")
        logger.debug(f"Params: {params}")

        try:
            response = self._client.request(
                method,
                url,
                params=_clean_params(params),
                json=json,
                data=data,
                files=files,
            )
        except httpx.TimeoutException as e:
            raise TimeoutError(f"Request to {url} timed out") from e
        except httpx.RequestError as e:
            raise NetworkError(f"Could not connect to ElevenLabs API: {e}") from e

        logger.debug(f"Response status: {response.status_code}")
        self._raise_for_status(response)
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {"data": response.text}

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Make a GET request."""
        return self._decode(self.request("GET", path, params=params))

    def post(
        self,
        path: str,
        data: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        form: Optional[Dict[str, Any]] = None,
        files: Optional[Any] = None,
    ) -> Any:
        """Make a POST request with a JSON body, or multipart when ``files`` is given."""
        if files is not None or form is not None:
            return self._decode(self.request("POST", path, params=params, data=form, files=files))
        return self._decode(self.request("POST", path, params=params, json=data))

    def patch(self, path: str, data: Optional[Any] = None) -> Any:
        """Make a PATCH request."""
        return self._decode(self.request("PATCH", path, json=data))

    def put(self, path: str, data: Optional[Any] = None) -> Any:
        """Make a PUT request."""
        return self._decode(self.request("PUT", path, json=data))

    def delete(self, path: str, params: Optional[Dict[str, Any]] = None, data: Optional[Any] = None) -> Any:
        """Make a DELETE request."""
        return self._decode(self.request("DELETE", path, params=params, json=data))

    def get_bytes(self, path: str, params: Optional[Dict[str, Any]] = None) -> bytes:
        """GET returning the raw response body (audio downloads)."""
        return self.request("GET", path, params=params).content

    def post_bytes(
        self,
        path: str,
        data: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        form: Optional[Dict[str, Any]] = None,
        files: Optional[Any] = None,
    ) -> bytes:
        """POST returning the raw response body (audio generation)."""
        if files is not None or form is not None:
            return self.request("POST", path, params=params, data=form, files=files).content
        return self.request("POST", path, params=params, json=data).content

    @contextmanager
    def stream(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        chunk_size: int = 4096,
    ) -> Iterator[Iterator[bytes]]:
        """Stream a response body; yields an iterator of byte chunks in arrival order."""
        url = self._url(path)
        logger.debug(f"Streaming {method} request to {url}")
        try:
            with self._client.stream(method, url, params=_clean_params(params), json=json) as response:
                if response.status_code >= 400:
                    response.read()
                    self._raise_for_status(response)
                yield response.iter_bytes(chunk_size)
        except httpx.TimeoutException as e:
            raise TimeoutError(f"Request to {url} timed out") from e
        except httpx.RequestError as e:
            raise NetworkError(f"Could not connect to ElevenLabs API: {e}") from e

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ElevenLabsClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Resource shortcuts
    @property
    def tts(self) -> TextToSpeechResource:
        return TextToSpeechResource(self)

    @property
    def stt(self) -> SpeechToTextResource:
        return SpeechToTextResource(self)

    @property
    def speech_to_speech(self) -> SpeechToSpeechResource:
        return SpeechToSpeechResource(self)

    @property
    def audio_isolation(self) -> AudioIsolationResource:
        return AudioIsolationResource(self)

    @property
    def sound_effects(self) -> SoundEffectsResource:
        return SoundEffectsResource(self)

    @property
    def dialogue(self) -> TextToDialogueResource:
        return TextToDialogueResource(self)

    @property
    def voice_design(self) -> TextToVoiceResource:
        return TextToVoiceResource(self)

    @property
    def music(self) -> MusicResource:
        return MusicResource(self)

    @property
    def voices(self) -> VoicesResource:
        return VoicesResource(self)

    @property
    def samples(self) -> SamplesResource:
        return SamplesResource(self)

    @property
    def library(self) -> VoiceLibraryResource:
        return VoiceLibraryResource(self)

    @property
    def pronunciation(self) -> PronunciationResource:
        return PronunciationResource(self)

    @property
    def agents(self) -> AgentsResource:
        return AgentsResource(self)

    @property
    def batch_calls(self) -> BatchCallsResource:
        return BatchCallsResource(self)

    @property
    def conversations(self) -> ConversationsResource:
        return ConversationsResource(self)

    @property
    def knowledge_base(self) -> KnowledgeBaseResource:
        return KnowledgeBaseResource(self)

    @property
    def rag(self) -> RagResource:
        return RagResource(self)

    @property
    def tools(self) -> ToolsResource:
        return ToolsResource(self)

    @property
    def phone_numbers(self) -> PhoneNumbersResource:
        return PhoneNumbersResource(self)

    @property
    def webhooks(self) -> WebhooksResource:
        return WebhooksResource(self)

    @property
    def user(self) -> UserResource:
        return UserResource(self)

    @property
    def models(self) -> ModelsResource:
        return ModelsResource(self)

    @property
    def usage(self) -> UsageResource:
        return UsageResource(self)

    @property
    def history(self) -> HistoryResource:
        return HistoryResource(self)

    @property
    def workspace(self) -> WorkspaceResource:
        return WorkspaceResource(self)

    @property
    def dubbing(self) -> DubbingResource:
        return DubbingResource(self)

    @property
    def projects(self) -> ProjectsResource:
        return ProjectsResource(self)

    @property
    def audio_native(self) -> AudioNativeResource:
        return AudioNativeResource(self)


def get_client(api_key: str, base_url: Optional[str] = None) -> ElevenLabsClient:
    """Get an API client instance."""
    return ElevenLabsClient(api_key, base_url or DEFAULT_BASE_URL)


def client_from_context(ctx: click.Context) -> ElevenLabsClient:
    """
    The invocation's API client, created on first use.

    Raises ``MissingApiKeyError`` when neither ``--api-key``,
    ``ELEVENLABS_API_KEY`` nor the config file supplied a key.
    """
    obj = ctx.ensure_object(dict)
    client = obj.get("client")
    if client is None:
        api_key = obj.get("api_key")
        if not api_key:
            raise MissingApiKeyError()
        client = get_client(api_key, obj.get("base_url"))
        obj["client"] = client
        ctx.find_root().call_on_close(client.close)
    return client
