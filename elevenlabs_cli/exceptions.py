"""
ElevenLabs CLI - Exceptions

This module contains the error taxonomy used across the CLI. Every error that
leaves the HTTP layer carries an ``ErrorKind`` derived from the HTTP status
code (or from the transport failure), and every kind maps to a retry policy.
"""

from enum import Enum
from typing import Any, Dict, Optional, Type

import httpx


class ErrorKind(str, Enum):
    """Categories of failure the CLI knows how to explain."""

    MISSING_API_KEY = "missing_api_key"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    OTHER = "other"


class Retryable(str, Enum):
    """Whether an operation that failed with a given kind may be retried."""

    NO = "no"
    YES = "yes"
    YES_WITH_BACKOFF = "yes_with_backoff"


class ElevenLabsError(Exception):
    """
    Base exception for all ElevenLabs CLI errors.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code if the error came from the API
        details: Additional error details (usually the decoded error body)
    """

    kind: ErrorKind = ErrorKind.OTHER

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    @property
    def retryable(self) -> Retryable:
        return retry_policy(self.kind)

    def __str__(self) -> str:
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', status_code={self.status_code})"


class MissingApiKeyError(ElevenLabsError):
    """Raised when no API key was supplied by flag, environment or config."""

    kind = ErrorKind.MISSING_API_KEY

    def __init__(self, message: str = "API key is required") -> None:
        super().__init__(message)


class AuthenticationError(ElevenLabsError):
    """Raised on HTTP 401: the API key is invalid or expired."""

    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "Invalid API key", **kwargs: Any) -> None:
        kwargs.setdefault("status_code", 401)
        super().__init__(message, **kwargs)


class PermissionDeniedError(ElevenLabsError):
    """Raised on HTTP 403: the key lacks access, usually a subscription limit."""

    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str = "Permission denied", **kwargs: Any) -> None:
        kwargs.setdefault("status_code", 403)
        super().__init__(message, **kwargs)


class NotFoundError(ElevenLabsError):
    """Raised on HTTP 404."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Resource not found", **kwargs: Any) -> None:
        kwargs.setdefault("status_code", 404)
        super().__init__(message, **kwargs)


class RateLimitError(ElevenLabsError):
    """
    Raised on HTTP 429.

    Attributes:
        retry_after: Seconds the server asked us to wait, if it said so
    """

    kind = ErrorKind.RATE_LIMITED

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("status_code", 429)
        super().__init__(message, **kwargs)
        try:
            self.retry_after: Optional[float] = float(retry_after) if retry_after else None
        except ValueError:
            self.retry_after = None

    def __str__(self) -> str:
        base = super().__str__()
        if self.retry_after:
            return f"{base}. Retry after {self.retry_after:g} seconds."
        return base


class ServerError(ElevenLabsError):
    """Raised on HTTP 5xx responses."""

    kind = ErrorKind.SERVER_ERROR

    def __init__(self, message: str = "Internal server error", **kwargs: Any) -> None:
        kwargs.setdefault("status_code", 500)
        super().__init__(message, **kwargs)


class NetworkError(ElevenLabsError):
    """Raised when the API could not be reached at all."""

    kind = ErrorKind.NETWORK_ERROR


class TimeoutError(ElevenLabsError):
    """Raised when a request or WebSocket connect timed out."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, message: str = "Request timed out") -> None:
        super().__init__(message)


class APIError(ElevenLabsError):
    """Raised for any other non-2xx response."""


class ValidationError(ElevenLabsError):
    """Raised when local input validation fails before any request is made."""


class ConfigError(ElevenLabsError):
    """Raised when the config file cannot be read or a key is not allowed."""


class AudioUnavailableError(ElevenLabsError):
    """Raised when audio playback or recording is requested without a backend."""

    def __init__(
        self,
        message: str = "Audio support is not installed. Install it with: pip install 'elevenlabs-cli[audio]'",
    ) -> None:
        super().__init__(message)


class WebSocketError(ElevenLabsError):
    """Raised for WebSocket protocol failures and server-sent error frames."""


_STATUS_ERRORS: Dict[int, Type[ElevenLabsError]] = {
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    429: RateLimitError,
}


def classify_status(status_code: int) -> ErrorKind:
    """Map an HTTP status code to an error kind."""
    if status_code == 401:
        return ErrorKind.UNAUTHORIZED
    if status_code == 403:
        return ErrorKind.FORBIDDEN
    if status_code == 404:
        return ErrorKind.NOT_FOUND
    if status_code == 429:
        return ErrorKind.RATE_LIMITED
    if 500 <= status_code < 600:
        return ErrorKind.SERVER_ERROR
    if status_code == 408:
        return ErrorKind.TIMEOUT
    return ErrorKind.OTHER


def classify(error: BaseException) -> ErrorKind:
    """Classify any exception raised while talking to the API."""
    if isinstance(error, ElevenLabsError):
        return error.kind
    if isinstance(error, httpx.TimeoutException):
        return ErrorKind.TIMEOUT
    if isinstance(error, httpx.TransportError):
        return ErrorKind.NETWORK_ERROR
    if isinstance(error, httpx.HTTPStatusError):
        return classify_status(error.response.status_code)
    return ErrorKind.OTHER


def retry_policy(kind: ErrorKind) -> Retryable:
    """Return the retry policy for an error kind."""
    if kind is ErrorKind.RATE_LIMITED:
        return Retryable.YES_WITH_BACKOFF
    if kind in (ErrorKind.SERVER_ERROR, ErrorKind.NETWORK_ERROR, ErrorKind.TIMEOUT):
        return Retryable.YES
    return Retryable.NO


def error_from_status(
    status_code: int,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    retry_after: Optional[str] = None,
) -> ElevenLabsError:
    """Build the typed exception for a failed HTTP response."""
    if status_code == 429:
        return RateLimitError(message, retry_after=retry_after, details=details)
    error_cls = _STATUS_ERRORS.get(status_code)
    if error_cls is not None:
        return error_cls(message, details=details)
    if status_code >= 500:
        return ServerError(message, status_code=status_code, details=details)
    if status_code == 408:
        error = TimeoutError(message)
        error.status_code = status_code
        return error
    return APIError(message, status_code=status_code, details=details)
