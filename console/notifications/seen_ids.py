"""
Persisted set of notification ids already shown to the user.

Stored as a JSON array under a single storage key so that a reload does not
re-surface old notifications. Only the most recent `max_ids` are kept.
"""

import asyncio
import json
import logging
from collections.abc import Iterable

from shared.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class SeenNotificationIds:
    def __init__(self, storage: KeyValueStorage, key: str = "seen_notification_ids", max_ids: int = 500):
        self.storage = storage
        self.key = key
        self.max_ids = max_ids
        self._lock = asyncio.Lock()

    async def load(self) -> list[str]:
        """Ids in the order they were first seen; unreadable data reads as empty."""
        raw = await self.storage.get_item(self.key)
        if not raw:
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt seen-notification data: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Ignoring seen-notification data of type {type(data).__name__}")
            return []

        return [str(i) for i in data]

    async def contains(self, notification_id: str) -> bool:
        return notification_id in set(await self.load())

    async def mark_seen(self, ids: Iterable[str]) -> list[str]:
        """
        Add ids to the seen set.

        Already-seen ids keep their position. The read-modify-write runs under
        a lock so concurrent callers cannot lose each other's ids.

        Returns:
            The persisted ids after the update
        """
        async with self._lock:
            seen = await self.load()
            known = set(seen)
            for notification_id in ids:
                if notification_id not in known:
                    seen.append(notification_id)
                    known.add(notification_id)

            if len(seen) > self.max_ids:
                seen = seen[-self.max_ids :]

            await self.storage.set_item(self.key, json.dumps(seen))
            return seen
