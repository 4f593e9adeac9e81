"""
Unit tests for resilient_api.py - API error taxonomy and retry classification.

Tests coverage:
- is_retryable_error() - Error classification
- ApiError.from_response() - Message, code and field detail extraction
- parse_field_errors() - Both server detail formats
- retry_policy() - Stop/retry behaviour with tenacity
"""

import httpx
import pytest
from tenacity import AsyncRetrying

from shared.resilient_api import (
    ApiConnectionError,
    ApiError,
    ApiResponseError,
    ApiTimeoutError,
    FieldError,
    is_retryable_error,
    parse_field_errors,
    retry_policy,
)


# ============================================================================
# Test is_retryable_error()
# ============================================================================


class TestIsRetryableError:
    """Test error classification logic."""

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
    def test_server_errors_are_retryable(self, status):
        """Test that rate limit and server errors are retryable."""
        assert is_retryable_error(ApiError("x", status_code=status)) is True

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 409, 422])
    def test_client_errors_not_retryable(self, status):
        """Test that client errors are never retried."""
        assert is_retryable_error(ApiError("x", status_code=status)) is False

    def test_api_error_without_status_not_retryable(self):
        assert is_retryable_error(ApiError("x")) is False

    def test_timeout_and_connection_errors_are_retryable(self):
        assert is_retryable_error(ApiTimeoutError()) is True
        assert is_retryable_error(ApiConnectionError("down")) is True

    def test_malformed_response_not_retryable(self):
        assert is_retryable_error(ApiResponseError("bad body")) is False

    def test_httpx_transport_error_is_retryable(self):
        request = httpx.Request("GET", "http://console.test/")
        assert is_retryable_error(httpx.ConnectError("refused", request=request)) is True

    def test_connection_error_is_retryable(self):
        """Test that ConnectionError is retryable."""
        assert is_retryable_error(ConnectionError("Connection refused")) is True

    def test_timeout_error_is_retryable(self):
        """Test that TimeoutError is retryable."""
        assert is_retryable_error(TimeoutError("Request timeout")) is True

    def test_os_error_is_retryable(self):
        """Test that OSError is retryable."""
        assert is_retryable_error(OSError("Network unreachable")) is True

    def test_value_error_not_retryable(self):
        """Test that ValueError is not retryable."""
        assert is_retryable_error(ValueError("Invalid argument")) is False

    def test_key_error_not_retryable(self):
        """Test that KeyError is not retryable."""
        assert is_retryable_error(KeyError("missing_key")) is False


# ============================================================================
# Test ApiError
# ============================================================================


class TestApiError:
    """Test ApiError construction from responses."""

    def test_message_field(self):
        error = ApiError.from_response(httpx.Response(400, json={"message": "Bad input", "error": "BAD"}))

        assert error.message == "Bad input"
        assert error.code == "BAD"
        assert error.status_code == 400

    def test_error_string_used_as_message(self):
        error = ApiError.from_response(httpx.Response(409, json={"error": "DUPLICATE_ITEM_NAME"}))

        assert error.message == "DUPLICATE_ITEM_NAME"
        assert error.code == "DUPLICATE_ITEM_NAME"

    def test_non_json_body(self):
        error = ApiError.from_response(httpx.Response(502, content=b"<html>Bad gateway</html>"))

        assert error.message == "Request failed with status 502"
        assert error.code is None
        assert error.details == ()

    def test_error_object_is_not_a_code(self):
        error = ApiError.from_response(httpx.Response(500, json={"error": {"detail": "x"}}))

        assert error.code is None
        assert error.message == "Request failed with status 500"

    def test_str_includes_status(self):
        assert str(ApiError("Not found", status_code=404)) == "Not found (status 404)"
        assert str(ApiError("Offline")) == "Offline"

    def test_timeout_default_message(self):
        assert ApiTimeoutError().message == "Request timeout. Please check your connection and try again."


# ============================================================================
# Test parse_field_errors()
# ============================================================================


class TestParseFieldErrors:
    """Test both server field-error formats."""

    def test_details_format(self):
        body = {"details": [{"field": "email", "message": "Invalid email"}, {"message": "no field"}]}
        assert parse_field_errors(body) == (FieldError("email", "Invalid email"),)

    def test_errors_path_format(self):
        body = {"errors": [{"path": "sku", "message": "Required"}]}
        assert parse_field_errors(body) == (FieldError("sku", "Required"),)

    def test_no_details(self):
        assert parse_field_errors({"message": "Nope"}) == ()


# ============================================================================
# Test retry_policy()
# ============================================================================


class TestRetryPolicy:
    """Test the tenacity policy built from settings."""

    @pytest.mark.asyncio
    async def test_transient_failures_then_success(self, settings):
        """Test function succeeding after retries."""
        call_count = [0]

        async def flaky():
            call_count[0] += 1
            if call_count[0] < 3:
                raise ApiError("busy", status_code=503)
            return "success"

        result = None
        async for attempt in AsyncRetrying(**retry_policy(settings)):
            with attempt:
                result = await flaky()

        assert result == "success"
        assert call_count[0] == 3

    @pytest.mark.asyncio
    async def test_permanent_failure_not_retried(self, settings):
        call_count = [0]

        async def missing():
            call_count[0] += 1
            raise ApiError("Not found", status_code=404)

        with pytest.raises(ApiError):
            async for attempt in AsyncRetrying(**retry_policy(settings)):
                with attempt:
                    await missing()

        assert call_count[0] == 1

    @pytest.mark.asyncio
    async def test_reraises_last_error_after_max_retries(self, settings):
        settings.API_MAX_RETRIES = 1
        call_count = [0]

        async def down():
            call_count[0] += 1
            raise ApiConnectionError("down")

        with pytest.raises(ApiConnectionError):
            async for attempt in AsyncRetrying(**retry_policy(settings)):
                with attempt:
                    await down()

        assert call_count[0] == 2
