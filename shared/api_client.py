"""
REST client for the console backend.

This module provides the ApiClient class used by every resource page and by
the notification loop. It attaches the session's bearer token, retries
transient GET failures with exponential backoff (writes are sent exactly once),
and converts failures into the ApiError family from shared.resilient_api.

Response shapes tolerated by the helpers:
- `{ "success": true, "data": T }` envelopes
- bare `T` values or arrays
- paginated objects holding the list under a named key
"""

import logging
from typing import Any, Protocol

import httpx
from tenacity import AsyncRetrying

from shared.config import Settings, get_settings
from shared.resilient_api import (
    ApiConnectionError,
    ApiError,
    ApiResponseError,
    ApiTimeoutError,
    FieldError,
    retry_policy,
)

logger = logging.getLogger(__name__)

# Words in a 401 message that mean the token itself is unusable
AUTH_ERROR_MARKERS = ("token", "authentication", "expired", "invalid")

__all__ = [
    "ApiClient",
    "ApiConnectionError",
    "ApiError",
    "ApiResponseError",
    "ApiTimeoutError",
    "FieldError",
    "TokenSource",
    "extract_list",
    "unwrap_envelope",
]


class TokenSource(Protocol):
    """What the client needs from the session."""

    async def get_valid_token(self) -> str | None: ...

    async def clear(self) -> None: ...


def unwrap_envelope(payload: Any) -> Any:
    """
    Return `data` from a `{success, data}` envelope, or the payload itself.

    A present-but-null `data` leaves the payload untouched.
    """
    if isinstance(payload, dict) and payload.get("data") is not None:
        return payload["data"]
    return payload


def extract_list(payload: Any, *keys: str) -> list[Any]:
    """
    Pull a list out of a list response.

    Args:
        payload: Decoded JSON body
        *keys: Keys that may hold the list in a paginated object

    Raises:
        ApiResponseError: If no list can be found
    """
    data = unwrap_envelope(payload)
    if isinstance(data, list):
        return data

    if isinstance(data, dict):
        for key in (*keys, "items", "results"):
            value = data.get(key)
            if isinstance(value, list):
                return value

    raise ApiResponseError("Invalid data format received from server")


class ApiClient:
    """
    Client for the console REST API.

    Each request opens a short-lived httpx.AsyncClient; pass `transport`
    to route requests somewhere other than the network.
    """

    def __init__(
        self,
        session: TokenSource,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self.session = session
        self.base_url = self.settings.API_BASE_URL.rstrip("/")
        self._transport = transport

        logger.info(f"ApiClient initialized: {self.base_url}")

    async def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = await self.session.get_valid_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        headers = await self._headers()

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.settings.API_TIMEOUT_SECONDS,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    headers=headers,
                )
            except httpx.TimeoutException as e:
                logger.error(f"Request timeout: {method} {path}", extra={"request_path": path})
                raise ApiTimeoutError() from e
            except httpx.TransportError as e:
                logger.error(f"Transport error: {method} {path}: {e}", extra={"request_path": path})
                raise ApiConnectionError(f"Network error: {e}") from e

        if response.is_error:
            error = ApiError.from_response(response)
            logger.warning(
                f"API error: {method} {path} -> {response.status_code}: {error.message}",
                extra={"request_path": path},
            )
            if response.status_code == 401 and _is_auth_failure(error.message):
                logger.info("Authentication error detected, clearing session token")
                await self.session.clear()
            raise error

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ApiResponseError("Invalid data format received from server") from e

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
        retry: bool = False,
    ) -> Any:
        """
        Send a request, retrying transient failures only when `retry` is set.

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            ApiError: On any failure (after retries are exhausted when retrying)
        """
        if not retry:
            return await self._send(method, path, params=params, json=json)

        result = None
        async for attempt in AsyncRetrying(**retry_policy(self.settings)):
            with attempt:
                result = await self._send(method, path, params=params, json=json)
        return result

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params, retry=True)

    async def post(self, path: str, json: Any = None, params: dict[str, Any] | None = None) -> Any:
        return await self.request("POST", path, params=params, json=json)

    async def put(self, path: str, json: Any = None, params: dict[str, Any] | None = None) -> Any:
        return await self.request("PUT", path, params=params, json=json)

    async def patch(self, path: str, json: Any = None, params: dict[str, Any] | None = None) -> Any:
        return await self.request("PATCH", path, params=params, json=json)

    async def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("DELETE", path, params=params)


def _is_auth_failure(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in AUTH_ERROR_MARKERS)
