"""Tests for the error taxonomy and retry helper."""

from unittest.mock import MagicMock

import httpx
import pytest

from elevenlabs_cli.exceptions import (
    APIError,
    AuthenticationError,
    ErrorKind,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    Retryable,
    ServerError,
    TimeoutError,
    ValidationError,
    classify,
    classify_status,
    error_from_status,
    retry_policy,
)
from elevenlabs_cli.utils.retry import backoff_delay, with_retry


class TestClassification:
    """Test status code and exception classification."""

    @pytest.mark.parametrize(
        "status,kind",
        [
            (401, ErrorKind.UNAUTHORIZED),
            (403, ErrorKind.FORBIDDEN),
            (404, ErrorKind.NOT_FOUND),
            (408, ErrorKind.TIMEOUT),
            (429, ErrorKind.RATE_LIMITED),
            (500, ErrorKind.SERVER_ERROR),
            (503, ErrorKind.SERVER_ERROR),
            (400, ErrorKind.OTHER),
            (422, ErrorKind.OTHER),
        ],
    )
    def test_classify_status(self, status, kind):
        assert classify_status(status) is kind

    def test_classify_transport_errors(self):
        request = httpx.Request("GET", "https://api.elevenlabs.io/v1/voices")
        assert classify(httpx.ConnectError("refused", request=request)) is ErrorKind.NETWORK_ERROR
        assert classify(httpx.ReadTimeout("slow", request=request)) is ErrorKind.TIMEOUT
        assert classify(ValueError("other")) is ErrorKind.OTHER

    def test_retry_policies(self):
        assert retry_policy(ErrorKind.RATE_LIMITED) is Retryable.YES_WITH_BACKOFF
        assert retry_policy(ErrorKind.SERVER_ERROR) is Retryable.YES
        assert retry_policy(ErrorKind.NETWORK_ERROR) is Retryable.YES
        assert retry_policy(ErrorKind.TIMEOUT) is Retryable.YES
        assert retry_policy(ErrorKind.UNAUTHORIZED) is Retryable.NO
        assert retry_policy(ErrorKind.NOT_FOUND) is Retryable.NO


class TestErrorFromStatus:
    """Test building typed exceptions from responses."""

    def test_typed_errors(self):
        assert isinstance(error_from_status(401, "bad key"), AuthenticationError)
        assert isinstance(error_from_status(403, "nope"), PermissionDeniedError)
        assert isinstance(error_from_status(404, "gone"), NotFoundError)
        assert isinstance(error_from_status(502, "upstream"), ServerError)
        assert isinstance(error_from_status(400, "bad request"), APIError)

    def test_rate_limit_retry_after(self):
        error = error_from_status(429, "Too many requests", retry_after="12")
        assert isinstance(error, RateLimitError)
        assert error.retry_after == 12.0
        assert "Retry after 12 seconds" in str(error)

    def test_invalid_retry_after_is_ignored(self):
        error = RateLimitError("Too many requests", retry_after="Wed, 21 Oct 2015 07:28:00 GMT")
        assert error.retry_after is None

    def test_status_code_kept(self):
        error = error_from_status(503, "unavailable")
        assert error.status_code == 503
        assert str(error) == "[503] unavailable"

    def test_request_timeout(self):
        error = error_from_status(408, "timeout")
        assert isinstance(error, TimeoutError)
        assert error.status_code == 408


class TestBackoff:
    """Test the backoff schedule."""

    def test_exponential_without_jitter(self):
        assert backoff_delay(1, base=1.0, jitter=0) == 1.0
        assert backoff_delay(2, base=1.0, jitter=0) == 2.0
        assert backoff_delay(3, base=1.0, jitter=0) == 4.0

    def test_capped(self):
        assert backoff_delay(10, base=5.0, cap=30.0, jitter=0) == 30.0

    def test_jitter_bounds(self):
        for _ in range(20):
            delay = backoff_delay(1, base=1.0, jitter=0.5)
            assert 1.0 <= delay <= 1.5


class TestWithRetry:
    """Test the retry loop."""

    def test_success_first_try(self):
        sleep = MagicMock()
        assert with_retry(lambda: "ok", sleep=sleep) == "ok"
        sleep.assert_not_called()

    def test_non_retryable_raised_immediately(self):
        operation = MagicMock(side_effect=ValidationError("bad input"))
        sleep = MagicMock()
        with pytest.raises(ValidationError):
            with_retry(operation, sleep=sleep)
        assert operation.call_count == 1
        sleep.assert_not_called()

    def test_server_error_retried_until_success(self):
        operation = MagicMock(side_effect=[ServerError("boom"), NetworkError("down"), {"ok": True}])
        sleep = MagicMock()
        assert with_retry(operation, sleep=sleep) == {"ok": True}
        assert operation.call_count == 3
        assert sleep.call_count == 2

    def test_gives_up_after_max_attempts(self):
        operation = MagicMock(side_effect=ServerError("boom"))
        sleep = MagicMock()
        with pytest.raises(ServerError):
            with_retry(operation, max_attempts=3, sleep=sleep)
        assert operation.call_count == 3
        assert sleep.call_count == 2

    def test_rate_limit_uses_longer_base(self):
        operation = MagicMock(side_effect=[RateLimitError("slow down"), "done"])
        sleep = MagicMock()
        with_retry(operation, base_delay=1.0, rate_limit_delay=5.0, sleep=sleep)
        assert sleep.call_args[0][0] >= 5.0

    def test_retry_after_honoured(self):
        operation = MagicMock(side_effect=[RateLimitError("slow down", retry_after="20"), "done"])
        sleep = MagicMock()
        with_retry(operation, sleep=sleep)
        assert sleep.call_args[0][0] >= 20.0
