"""
Notifications: polling with dedup, the session store and the settings editor.
"""

from console.notifications.api import NotificationAPI
from console.notifications.poller import NotificationPoller
from console.notifications.seen_ids import SeenNotificationIds
from console.notifications.settings_editor import NotificationSettingsEditor
from console.notifications.store import NotificationStore

__all__ = [
    "NotificationAPI",
    "NotificationPoller",
    "NotificationSettingsEditor",
    "NotificationStore",
    "SeenNotificationIds",
]
