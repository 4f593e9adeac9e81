"""
Notification polling loop.

There is no push channel: the poller fetches the user's most recent
notifications on a fixed interval and surfaces only the ones whose ids are
not yet in the persisted seen set.

Delivery is best effort. A failed poll is logged and skipped; a notification
that leaves the server's "most recent N" window before the next successful
poll is never shown.
"""

import asyncio
import logging

import httpx
from pydantic import ValidationError

from console.auth import SessionContext
from console.models import Notification
from console.notifications.api import NotificationAPI
from console.notifications.seen_ids import SeenNotificationIds
from console.notifications.store import NotificationStore
from shared.api_client import ApiError

logger = logging.getLogger(__name__)


class NotificationPoller:
    def __init__(
        self,
        api: NotificationAPI,
        session: SessionContext,
        store: NotificationStore,
        seen_ids: SeenNotificationIds,
        interval: float = 30.0,
        limit: int = 10,
    ):
        self.api = api
        self.session = session
        self.store = store
        self.seen_ids = seen_ids
        self.interval = interval
        self.limit = limit

        self._poll_lock = asyncio.Lock()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll(self) -> list[Notification]:
        """
        Fetch recent notifications and surface the unseen ones.

        A poll started while another is still in flight is skipped.

        Returns:
            Newly surfaced notifications in server order; [] on failure
        """
        if self._poll_lock.locked():
            logger.debug("Previous notification poll still running, skipping")
            return []

        async with self._poll_lock:
            claims = await self.session.get_claims()
            if claims is None or not claims.user_id or not claims.org_id:
                logger.debug("No user/organization in session, skipping notification poll")
                return []

            log_extra = {"user_id": claims.user_id, "org_id": claims.org_id}

            try:
                raw_items = await self.api.get_notifications(claims.user_id, claims.org_id, self.limit)
            except (ApiError, httpx.HTTPError) as e:
                logger.warning(f"Notification poll failed: {e}", extra=log_extra)
                return []

            fetched_ids: list[str] = []
            notifications: list[Notification] = []
            for raw in raw_items:
                if isinstance(raw, dict) and raw.get("id") is not None:
                    fetched_ids.append(str(raw["id"]))
                try:
                    notifications.append(Notification.model_validate(raw))
                except ValidationError as e:
                    logger.warning(f"Skipping malformed notification: {e}", extra=log_extra)

            seen = set(await self.seen_ids.load())
            surfaced: list[Notification] = []
            for notification in notifications:
                if notification.id in seen:
                    continue
                seen.add(notification.id)
                self.store.add(notification)
                surfaced.append(notification)

            await self.seen_ids.mark_seen(fetched_ids)

            if surfaced:
                logger.info(f"Surfaced {len(surfaced)} new notification(s)", extra=log_extra)
            return surfaced

    async def _run(self) -> None:
        logger.info(f"Notification poller starting (interval {self.interval}s, limit {self.limit})")

        try:
            while True:
                try:
                    await self.poll()
                except Exception as e:
                    logger.exception(f"Error in notification poll cycle: {e}")

                await asyncio.sleep(self.interval)

        except asyncio.CancelledError:
            logger.info("Notification poller shutting down...")
            raise

    def start(self) -> None:
        """Poll now and then every `interval` seconds until stopped."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return

        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
