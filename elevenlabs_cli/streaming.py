"""
ElevenLabs CLI - Streaming Clients

WebSocket clients for the two realtime endpoints:

- ``RealtimeTTSClient``: text-to-speech ``stream-input``; text goes up, base64
  audio frames come back and are forwarded to a chunk callback in order.
- ``ConversationSession``: agent conversations; handles ping/pong, dispatches
  transcript/response/audio events to registered handlers and relays user
  messages read from stdin.
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import urlencode

import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK, InvalidStatus, WebSocketException

from elevenlabs_cli.exceptions import (
    NetworkError,
    TimeoutError,
    WebSocketError,
    error_from_status,
)
from elevenlabs_cli.utils.client import DEFAULT_WS_URL

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 30.0
DEFAULT_REALTIME_MODEL = "eleven_flash_v2_5"
DEFAULT_RESPONSE_TIMEOUT = 60.0


async def open_websocket(url: str, api_key: str, timeout: float = CONNECT_TIMEOUT) -> Any:
    """Open an authenticated WebSocket, mapping failures to CLI errors."""
    logger.debug(f"Connecting to {url}")
    try:
        return await websockets.connect(
            url,
            additional_headers={"xi-api-key": api_key},
            open_timeout=timeout,
            max_size=None,
        )
    except InvalidStatus as e:
        status = e.response.status_code
        raise error_from_status(status, f"WebSocket handshake rejected with HTTP {status}")
    except asyncio.TimeoutError:
        raise TimeoutError(f"Connection timeout after {timeout:.0f}s")
    except WebSocketException as e:
        raise WebSocketError(f"Failed to connect: {e}")
    except OSError as e:
        raise NetworkError(f"Failed to connect to ElevenLabs WebSocket: {e}")


# =============================================================================
# Realtime text-to-speech
# =============================================================================


@dataclass
class TTSFrame:
    """One server frame from the stream-input endpoint."""

    audio: bytes = b""
    is_final: bool = False
    error: Optional[str] = None
    alignment: Optional[Dict[str, Any]] = None

    @classmethod
    def from_message(cls, message: Union[str, bytes]) -> "TTSFrame":
        """Parse a frame; binary frames are raw audio."""
        if isinstance(message, bytes):
            return cls(audio=message)

        data = json.loads(message)
        error = data.get("error") or (data.get("message") if data.get("code") else None)
        audio = data.get("audio")
        return cls(
            audio=base64.b64decode(audio) if audio else b"",
            is_final=bool(data.get("isFinal") or data.get("is_final")),
            error=str(error) if error else None,
            alignment=data.get("alignment"),
        )


@dataclass
class RealtimeResult:
    audio: bytes
    chunks: int


class RealtimeTTSClient:
    """
    Client for ``/text-to-speech/{voice_id}/stream-input``.

    Example:
        >>> client = RealtimeTTSClient(api_key, "Brian")
        >>> result = asyncio.run(client.synthesize("Hello", on_chunk=player.feed))
    """

    def __init__(
        self,
        api_key: str,
        voice_id: str,
        model_id: str = DEFAULT_REALTIME_MODEL,
        output_format: str = "mp3_44100_128",
        voice_settings: Optional[Dict[str, Any]] = None,
        base_url: str = DEFAULT_WS_URL,
        connect_timeout: float = CONNECT_TIMEOUT,
    ) -> None:
        self.api_key = api_key
        self.voice_id = voice_id
        self.model_id = model_id
        self.output_format = output_format
        self.voice_settings = voice_settings
        self.base_url = base_url.rstrip("/")
        self.connect_timeout = connect_timeout

    @property
    def url(self) -> str:
        query = urlencode({"model_id": self.model_id, "output_format": self.output_format})
        return f"{self.base_url}/text-to-speech/{self.voice_id}/stream-input?{query}"

    def initial_frame(self) -> Dict[str, Any]:
        frame: Dict[str, Any] = {"text": " "}
        if self.voice_settings:
            frame["voice_settings"] = self.voice_settings
        return frame

    async def synthesize(
        self,
        text: str,
        on_chunk: Optional[Callable[[bytes], None]] = None,
    ) -> RealtimeResult:
        """Send ``text`` and collect audio until the final frame or close."""
        websocket = await open_websocket(self.url, self.api_key, self.connect_timeout)
        audio = bytearray()
        chunks = 0
        try:
            await websocket.send(json.dumps(self.initial_frame()))
            await websocket.send(json.dumps({"text": text if text.endswith(" ") else text + " ", "flush": True}))
            await websocket.send(json.dumps({"text": ""}))

            async for message in websocket:
                try:
                    frame = TTSFrame.from_message(message)
                except (json.JSONDecodeError, ValueError) as e:
                    logger.warning(f"Invalid frame from server: {e}")
                    continue

                if frame.error:
                    raise WebSocketError(f"API error: {frame.error}")
                if frame.audio:
                    chunks += 1
                    audio.extend(frame.audio)
                    logger.debug(f"Received chunk {chunks} ({len(frame.audio)} bytes)")
                    if on_chunk is not None:
                        # on_chunk may block on a full playback queue
                        await asyncio.to_thread(on_chunk, frame.audio)
                if frame.is_final:
                    break
        except ConnectionClosedOK:
            logger.debug("Connection closed by server")
        except ConnectionClosed as e:
            raise WebSocketError(f"Connection closed unexpectedly: {e}")
        finally:
            await websocket.close()

        return RealtimeResult(audio=bytes(audio), chunks=chunks)


# =============================================================================
# Agent conversations
# =============================================================================


class ConversationEventType(str, Enum):
    """Server event types on the conversation socket."""

    METADATA = "conversation_initiation_metadata"
    AUDIO = "audio"
    AGENT_RESPONSE = "agent_response"
    AGENT_RESPONSE_CORRECTION = "agent_response_correction"
    USER_TRANSCRIPT = "user_transcript"
    INTERRUPTION = "interruption"
    PING = "ping"
    CLIENT_TOOL_CALL = "client_tool_call"
    VAD_SCORE = "vad_score"
    ERROR = "error"
    UNKNOWN = "unknown"


# Payload key for each event type where it differs from "<type>_event"
_EVENT_KEYS = {
    ConversationEventType.USER_TRANSCRIPT: "user_transcription_event",
    ConversationEventType.METADATA: "conversation_initiation_metadata_event",
}


@dataclass
class ConversationEvent:
    """A parsed event from the conversation WebSocket."""

    type: ConversationEventType
    data: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_message(cls, message: Dict[str, Any]) -> "ConversationEvent":
        try:
            event_type = ConversationEventType(message.get("type", "unknown"))
        except ValueError:
            event_type = ConversationEventType.UNKNOWN
        key = _EVENT_KEYS.get(event_type, f"{event_type.value}_event")
        data = message.get(key)
        if not isinstance(data, dict):
            data = {}
        return cls(type=event_type, data=data, raw=message)

    @property
    def text(self) -> Optional[str]:
        if self.type == ConversationEventType.AGENT_RESPONSE:
            return self.data.get("agent_response")
        if self.type == ConversationEventType.USER_TRANSCRIPT:
            return self.data.get("user_transcript")
        if self.type == ConversationEventType.AGENT_RESPONSE_CORRECTION:
            return self.data.get("corrected_agent_response")
        if self.type == ConversationEventType.ERROR:
            return self.raw.get("message") or self.data.get("message")
        return None

    @property
    def audio(self) -> bytes:
        encoded = self.data.get("audio_base_64")
        return base64.b64decode(encoded) if encoded else b""

    @property
    def event_id(self) -> Optional[Any]:
        return self.data.get("event_id")


ConversationHandler = Callable[[ConversationEvent], Any]


class ConversationSession:
    """
    Text conversation with an agent over ``/convai/conversation``.

    Register handlers with ``on()``; ``chat()`` connects, starts the receive
    loop as a background task and forwards user input until EOF, ``exit``,
    or ``max_turns`` agent responses.

    Example:
        >>> session = ConversationSession(api_key, agent_id)
        >>> @session.on(ConversationEventType.AGENT_RESPONSE)
        ... def show(event):
        ...     print(event.text)
        >>> asyncio.run(session.chat(message="Hi"))
    """

    def __init__(
        self,
        api_key: str,
        agent_id: str,
        max_turns: Optional[int] = None,
        base_url: str = DEFAULT_WS_URL,
        connect_timeout: float = CONNECT_TIMEOUT,
        config_override: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.api_key = api_key
        self.agent_id = agent_id
        self.max_turns = max_turns
        self.base_url = base_url.rstrip("/")
        self.connect_timeout = connect_timeout
        self.config_override = config_override

        self.conversation_id: Optional[str] = None
        self.audio_format = "pcm_16000"
        self.agent_turns = 0
        self.transcript: List[Dict[str, str]] = []

        self._websocket: Any = None
        self._handlers: Dict[ConversationEventType, List[ConversationHandler]] = {}
        self._reply: Optional[asyncio.Event] = None
        self._done: Optional[asyncio.Event] = None

    @property
    def url(self) -> str:
        return f"{self.base_url}/convai/conversation?{urlencode({'agent_id': self.agent_id})}"

    def on(self, event_type: Union[ConversationEventType, str]) -> Callable[[ConversationHandler], ConversationHandler]:
        """Decorator registering a handler for ``event_type``."""

        def decorator(handler: ConversationHandler) -> ConversationHandler:
            self.add_handler(event_type, handler)
            return handler

        return decorator

    def add_handler(self, event_type: Union[ConversationEventType, str], handler: ConversationHandler) -> None:
        if isinstance(event_type, str):
            event_type = ConversationEventType(event_type)
        self._handlers.setdefault(event_type, []).append(handler)

    async def connect(self) -> "ConversationSession":
        self._reply = asyncio.Event()
        self._done = asyncio.Event()
        self._websocket = await open_websocket(self.url, self.api_key, self.connect_timeout)
        init: Dict[str, Any] = {"type": "conversation_initiation_client_data"}
        if self.config_override:
            init["conversation_config_override"] = self.config_override
        await self.send(init)
        logger.info(f"Connected to agent {self.agent_id}")
        return self

    async def disconnect(self) -> None:
        if self._websocket is not None:
            await self._websocket.close()
            self._websocket = None
            logger.info("Disconnected from conversation")

    async def send(self, message: Dict[str, Any]) -> None:
        if self._websocket is None:
            raise WebSocketError("Not connected")
        await self._websocket.send(json.dumps(message))
        logger.debug(f"Sent message: {message.get('type')}")

    async def send_message(self, text: str) -> None:
        if self._reply is not None:
            self._reply.clear()
        self.transcript.append({"role": "user", "message": text})
        await self.send({"type": "user_message", "text": text})

    async def handle_event(self, event: ConversationEvent) -> None:
        """Apply protocol bookkeeping for ``event`` then run its handlers."""
        if event.type == ConversationEventType.PING:
            await self.send({"type": "pong", "event_id": event.event_id})
        elif event.type == ConversationEventType.METADATA:
            self.conversation_id = event.data.get("conversation_id")
            self.audio_format = event.data.get("agent_output_audio_format") or self.audio_format
        elif event.type == ConversationEventType.USER_TRANSCRIPT and event.text:
            self.transcript.append({"role": "user", "message": event.text})
        elif event.type == ConversationEventType.AGENT_RESPONSE:
            self.agent_turns += 1
            if event.text:
                self.transcript.append({"role": "agent", "message": event.text})

        await self._dispatch(event)

        if event.type == ConversationEventType.AGENT_RESPONSE:
            if self._reply is not None:
                self._reply.set()
            if self.max_turns and self.agent_turns >= self.max_turns and self._done is not None:
                logger.info(f"Reached {self.max_turns} agent turns")
                self._done.set()

    async def listen(self) -> None:
        """Receive events until the socket closes or the session is done."""
        if self._websocket is None:
            raise WebSocketError("Not connected")
        try:
            async for message in self._websocket:
                try:
                    event = ConversationEvent.from_message(json.loads(message))
                except json.JSONDecodeError as e:
                    logger.warning(f"Invalid JSON message: {e}")
                    continue
                await self.handle_event(event)
                if self._done is not None and self._done.is_set():
                    break
        except ConnectionClosedOK:
            logger.debug("Conversation closed by server")
        except ConnectionClosed as e:
            raise WebSocketError(f"Connection closed unexpectedly: {e}")
        finally:
            if self._done is not None:
                self._done.set()

    async def chat(
        self,
        read_line: Optional[Callable[[], Optional[str]]] = None,
        message: Optional[str] = None,
        response_timeout: float = DEFAULT_RESPONSE_TIMEOUT,
    ) -> None:
        """
        Run a conversation.

        With ``message`` a single user message is sent and the call returns
        after the agent replies (or ``response_timeout``). Otherwise lines
        from ``read_line`` are sent until it returns None, ``exit``/``quit``
        is typed, or the session ends.
        """
        await self.connect()
        receiver = asyncio.create_task(self.listen())
        try:
            if message is not None:
                await self.send_message(message)
                await self._wait_for(self._reply, receiver, response_timeout)
            elif read_line is not None:
                await self._relay_input(read_line, receiver)
        finally:
            await self.disconnect()
            if not receiver.done():
                receiver.cancel()
            try:
                await receiver
            except asyncio.CancelledError:
                pass

    async def _relay_input(self, read_line: Callable[[], Optional[str]], receiver: "asyncio.Task[None]") -> None:
        loop = asyncio.get_running_loop()
        lines: "asyncio.Queue[Optional[str]]" = asyncio.Queue()

        def reader() -> None:
            while True:
                try:
                    line = read_line()
                except (EOFError, KeyboardInterrupt):
                    line = None
                try:
                    loop.call_soon_threadsafe(lines.put_nowait, line)
                except RuntimeError:
                    return
                if line is None:
                    return

        # Daemon thread so a pending stdin read never blocks interpreter exit
        threading.Thread(target=reader, name="stdin-reader", daemon=True).start()

        while not self._done.is_set():
            getter = asyncio.ensure_future(lines.get())
            await asyncio.wait({getter, receiver}, return_when=asyncio.FIRST_COMPLETED)
            if not getter.done():
                getter.cancel()
                break
            line = getter.result()
            if line is None:
                break
            line = line.strip()
            if not line:
                continue
            if line.lower() in ("exit", "quit"):
                break
            await self.send_message(line)

    @staticmethod
    async def _wait_for(event: Optional[asyncio.Event], receiver: "asyncio.Task[None]", timeout: float) -> None:
        waiter = asyncio.ensure_future(event.wait())
        finished, _ = await asyncio.wait({waiter, receiver}, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        if waiter not in finished:
            waiter.cancel()
        if not finished:
            raise TimeoutError(f"No response from agent within {timeout:.0f}s")
        if receiver in finished and not receiver.cancelled() and receiver.exception() is not None:
            raise receiver.exception()

    async def _dispatch(self, event: ConversationEvent) -> None:
        for handler in self._handlers.get(event.type, []):
            try:
                result = handler(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.error(f"Error in event handler: {e}")
