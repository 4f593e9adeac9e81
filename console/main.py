"""
Console application container.

Wires storage, session, REST client, toasts and the notification loop, and
creates resource page controllers for the application shell.

Usage:
    async with ConsoleApp(confirm=ask_user) as app:
        customers = app.page("customers")
        await customers.load()
"""

import logging

import httpx

from console.auth import SessionContext
from console.notifications import (
    NotificationAPI,
    NotificationPoller,
    NotificationSettingsEditor,
    NotificationStore,
    SeenNotificationIds,
)
from console.resources import ResourceAPI, ResourcePage, get_resource
from console.resources.page import ConfirmCallback
from console.utils import Toaster
from shared.api_client import ApiClient
from shared.config import Settings, get_settings
from shared.logging_config import configure_logging
from shared.storage import KeyValueStorage, create_storage

logger = logging.getLogger(__name__)


class ConsoleApp:
    def __init__(
        self,
        settings: Settings | None = None,
        storage: KeyValueStorage | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        confirm: ConfirmCallback | None = None,
    ):
        self.settings = settings or get_settings()
        self.storage = storage or create_storage(self.settings)
        self.confirm = confirm

        self.session = SessionContext(self.storage, token_key=self.settings.SESSION_TOKEN_KEY)
        self.client = ApiClient(self.session, settings=self.settings, transport=transport)
        self.toaster = Toaster(max_history=self.settings.TOAST_HISTORY_MAX)

        self.notification_api = NotificationAPI(self.client)
        self.notifications = NotificationStore(max_items=self.settings.NOTIFICATION_STORE_MAX)
        self.seen_ids = SeenNotificationIds(
            self.storage,
            key=self.settings.SEEN_NOTIFICATIONS_KEY,
            max_ids=self.settings.SEEN_NOTIFICATIONS_MAX,
        )
        self.poller = NotificationPoller(
            self.notification_api,
            self.session,
            self.notifications,
            self.seen_ids,
            interval=self.settings.NOTIFICATION_POLL_INTERVAL_SECONDS,
            limit=self.settings.NOTIFICATION_POLL_LIMIT,
        )
        self.notification_settings = NotificationSettingsEditor(
            self.notification_api,
            self.session,
            self.toaster,
        )

        self._pages: list[ResourcePage] = []

    def page(self, resource_name: str) -> ResourcePage:
        """
        Mount a fresh page controller for a resource.

        Raises:
            KeyError: If the resource is unknown
        """
        spec = get_resource(resource_name)
        page = ResourcePage(
            spec,
            ResourceAPI(self.client, spec),
            self.session,
            self.toaster,
            confirm=self.confirm,
        )
        self._pages = [p for p in self._pages if not p.closed]
        self._pages.append(page)
        return page

    def start(self) -> None:
        """Configure logging (unless LOG_CONFIGURE is off) and start notification polling."""
        if self.settings.LOG_CONFIGURE:
            configure_logging(self.settings)
        self.poller.start()
        logger.info("Console started")

    async def aclose(self) -> None:
        await self.poller.stop()
        for page in self._pages:
            await page.close()
        self._pages = []
        logger.info("Console stopped")

    async def __aenter__(self) -> "ConsoleApp":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
