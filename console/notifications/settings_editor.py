"""
Notification settings editor.

Fetch, edit locally, then replace the whole record on save. There are no
partial updates.
"""

import logging
from typing import Any

import httpx

from console.auth import SessionContext
from console.models import NotificationSettings
from console.notifications.api import NotificationAPI
from console.utils import Toaster
from shared.api_client import ApiError

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED_MESSAGE = "User not authenticated"
LOAD_FAILED_MESSAGE = "Failed to load notification settings"
SAVE_SUCCEEDED_MESSAGE = "Notification settings saved successfully"
SAVE_FAILED_MESSAGE = "Failed to save notification settings"


class NotificationSettingsEditor:
    """
    Holds the settings being edited and the inline status message.

    The `email`/`sms`/`push` flags and the `channels` list are edited
    independently; changing one never updates the other.
    """

    def __init__(self, api: NotificationAPI, session: SessionContext, toaster: Toaster | None = None):
        self.api = api
        self.session = session
        self.toaster = toaster

        self.settings = NotificationSettings()
        self.loading = False
        self.saving = False
        self.message: str | None = None

    async def _identity(self) -> tuple[str, str] | None:
        claims = await self.session.get_claims()
        if claims is None or not claims.user_id or not claims.org_id:
            return None
        return claims.user_id, claims.org_id

    def _show(self, message: str, error: bool = False) -> None:
        self.message = message
        if self.toaster is None:
            return
        if error:
            self.toaster.error(message)
        else:
            self.toaster.success(message)

    async def load(self) -> NotificationSettings:
        """
        Fetch settings; missing or falsy fields fall back to defaults.

        A reply without a usable record leaves the current values untouched.
        """
        self.loading = True
        try:
            identity = await self._identity()
            if identity is None:
                self._show(NOT_AUTHENTICATED_MESSAGE, error=True)
                return self.settings

            user_id, org_id = identity
            data = await self.api.get_settings(user_id, org_id)
            if data is None:
                logger.warning("No notification settings returned, keeping current values")
            else:
                self.settings = NotificationSettings.from_server(data)
        except (ApiError, httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching notification settings: {e}")
            self._show(LOAD_FAILED_MESSAGE, error=True)
        finally:
            self.loading = False

        return self.settings

    def set(self, field: str, value: Any) -> None:
        """Change one setting in the local copy."""
        if field not in NotificationSettings.model_fields:
            raise KeyError(f"Unknown notification setting: {field}")
        data = self.settings.model_dump()
        data[field] = value
        self.settings = NotificationSettings.model_validate(data)

    def toggle_channel(self, channel: str, enabled: bool) -> None:
        current = self.settings.channels
        if enabled:
            channels = current if channel in current else [*current, channel]
        else:
            channels = [c for c in current if c != channel]
        self.settings = self.settings.model_copy(update={"channels": channels})

    async def save(self) -> bool:
        """
        Send the complete settings record.

        Returns:
            True if the server accepted it; a save already in flight returns False
        """
        if self.saving:
            logger.info("Notification settings save already in progress, ignoring")
            return False

        self.saving = True
        try:
            identity = await self._identity()
            if identity is None:
                self._show(NOT_AUTHENTICATED_MESSAGE, error=True)
                return False

            user_id, org_id = identity
            reply = await self.api.update_settings(user_id, org_id, self.settings.to_wire())
            if isinstance(reply, dict) and reply.get("success") is False:
                logger.warning(f"Notification settings rejected: {reply.get('message')}")
                self._show(SAVE_FAILED_MESSAGE, error=True)
                return False

            self._show(SAVE_SUCCEEDED_MESSAGE)
            return True
        except (ApiError, httpx.HTTPError) as e:
            logger.error(f"Error saving notification settings: {e}")
            self._show(SAVE_FAILED_MESSAGE, error=True)
            return False
        finally:
            self.saving = False
