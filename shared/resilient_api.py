"""
API error taxonomy and retry classification.

This module defines the exceptions raised by the REST transport and decides
which of them are worth retrying with exponential backoff.

Retryable errors:
- Rate limit and server errors (429, 500, 502, 503, 504)
- Timeouts and transport-level connection failures

Never retried:
- Client errors (400, 401, 403, 404, 409, 422)
- Malformed success responses
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from tenacity import (
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from shared.config import Settings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


@dataclass(frozen=True)
class FieldError:
    """Field-level validation failure, client or server detected."""

    field: str
    message: str


class ApiError(Exception):
    """
    Exception raised when an API call fails.

    Attributes:
        message: Human-readable message suitable for a toast
        status_code: HTTP status, None for transport failures
        code: Machine-readable error code from the response (e.g. DUPLICATE_ITEM_SKU)
        details: Structured field errors from the response
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: tuple[FieldError, ...] = (),
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.status_code is None:
            return self.message
        return f"{self.message} (status {self.status_code})"

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        """
        Build an ApiError from a non-2xx response.

        Message lookup order: `message`, then a string `error`, then a
        generic status message. Field details come from either
        `details: [{field, message}]` or `errors: [{path, message}]`.
        """
        status = response.status_code
        try:
            body: Any = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            return cls(f"Request failed with status {status}", status_code=status)

        error_value = body.get("error")
        code = error_value if isinstance(error_value, str) else None
        message = body.get("message") or code or f"Request failed with status {status}"

        return cls(
            str(message),
            status_code=status,
            code=code,
            details=parse_field_errors(body),
        )


class ApiTimeoutError(ApiError):
    """Request exceeded the configured timeout."""

    def __init__(self, message: str = "Request timeout. Please check your connection and try again."):
        super().__init__(message)


class ApiConnectionError(ApiError):
    """Transport failure before any response was received."""


class ApiResponseError(ApiError):
    """Successful status with a body the caller cannot use."""


def parse_field_errors(body: dict[str, Any]) -> tuple[FieldError, ...]:
    """Extract structured field errors from an error envelope."""
    details = body.get("details")
    if isinstance(details, list):
        return tuple(
            FieldError(str(d["field"]), str(d.get("message", "")))
            for d in details
            if isinstance(d, dict) and d.get("field")
        )

    errors = body.get("errors")
    if isinstance(errors, list):
        return tuple(
            FieldError(str(e["path"]), str(e.get("message", "")))
            for e in errors
            if isinstance(e, dict) and e.get("path")
        )

    return ()


def is_retryable_error(error: BaseException) -> bool:
    """
    Determine if an error is retryable.

    Args:
        error: Exception to check

    Returns:
        bool: True if error is retryable, False otherwise
    """
    if isinstance(error, (ApiTimeoutError, ApiConnectionError)):
        return True

    if isinstance(error, ApiResponseError):
        return False

    if isinstance(error, ApiError):
        return error.status_code in RETRYABLE_STATUS_CODES

    if isinstance(error, httpx.TransportError):
        return True

    # Generic network/timeout errors (ConnectionError, TimeoutError)
    if isinstance(error, OSError):
        return True

    return False


def _log_retry(retry_state) -> None:
    logger.warning(
        f"API call failed (attempt {retry_state.attempt_number}), "
        f"retrying: {retry_state.outcome.exception()}"
    )


def retry_policy(settings: Settings) -> dict[str, Any]:
    """
    Keyword arguments for tenacity.AsyncRetrying built from settings.

    Stops after 1 + API_MAX_RETRIES attempts and re-raises the last error.
    """
    return {
        "stop": stop_after_attempt(settings.API_MAX_RETRIES + 1),
        "wait": wait_exponential(
            multiplier=settings.API_RETRY_MIN_WAIT_SECONDS,
            min=settings.API_RETRY_MIN_WAIT_SECONDS,
            max=settings.API_RETRY_MAX_WAIT_SECONDS,
        ),
        "retry": retry_if_exception(is_retryable_error),
        "before_sleep": _log_retry,
        "reraise": True,
    }
