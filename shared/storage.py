"""
Key/value storage for the console's local persisted state.

Plays the role browser localStorage plays in the web console: a flat map of
string keys to string values that survives restarts of the same profile.

Backends:
- MemoryStorage: process lifetime only (tests, ephemeral sessions)
- FileStorage: single JSON document on disk (default)
- RedisStorage: shared Redis instance, keys namespaced by a prefix

Keys used by the core:
- SESSION_TOKEN_KEY: raw bearer token
- SEEN_NOTIFICATIONS_KEY: JSON array of notification ids already surfaced
"""

import asyncio
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path

import redis.asyncio as redis
from redis import ConnectionError as RedisConnectionError

from shared.config import Settings, get_settings

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """Async string key/value store."""

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Delete key. Missing keys are ignored."""


class MemoryStorage(KeyValueStorage):
    """Dict-backed storage."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage(KeyValueStorage):
    """
    Storage persisted as one JSON object on disk.

    Every write rewrites the whole document through a temp file and
    os.replace, so readers never observe a half-written file. File I/O runs
    in the default executor so the event loop is never blocked.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()
        self._lock = asyncio.Lock()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable storage file {self.path}, treating as empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Storage file {self.path} is not a JSON object, treating as empty")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".storage-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(data, tmp)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def _remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    async def get_item(self, key: str) -> str | None:
        loop = asyncio.get_running_loop()
        async with self._lock:
            data = await loop.run_in_executor(None, self._read)
        return data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        loop = asyncio.get_running_loop()
        async with self._lock:
            await loop.run_in_executor(None, self._set, key, value)

    async def remove_item(self, key: str) -> None:
        loop = asyncio.get_running_loop()
        async with self._lock:
            await loop.run_in_executor(None, self._remove, key)


class RedisStorage(KeyValueStorage):
    """Storage on a Redis instance, one Redis string per key."""

    def __init__(self, client: "redis.Redis[str]", prefix: str = "repairdesk:"):
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get_item(self, key: str) -> str | None:
        value = await self.client.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set_item(self, key: str, value: str) -> None:
        await self.client.set(self._key(key), value)

    async def remove_item(self, key: str) -> None:
        await self.client.delete(self._key(key))


@lru_cache
def get_redis_client() -> "redis.Redis[str]":
    """
    Get cached Redis client instance.

    Returns:
        Redis async client with response decoding and retry on timeout
    """
    settings = get_settings()

    try:
        client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        logger.info(f"Redis client initialized: {settings.REDIS_URL}")
        return client

    except RedisConnectionError as e:
        logger.error(f"Redis connection failed: {e}", exc_info=True)
        raise


def create_storage(settings: Settings | None = None) -> KeyValueStorage:
    """
    Build the storage backend selected by STORAGE_BACKEND.

    Raises:
        ValueError: If the backend name is unknown
    """
    settings = settings or get_settings()
    backend = settings.STORAGE_BACKEND.lower()

    if backend == "memory":
        return MemoryStorage()
    if backend == "file":
        return FileStorage(settings.STORAGE_PATH)
    if backend == "redis":
        return RedisStorage(get_redis_client(), prefix=settings.STORAGE_KEY_PREFIX)

    raise ValueError(f"Unknown storage backend: {settings.STORAGE_BACKEND}")
