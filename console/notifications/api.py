"""REST client for /notifications."""

from typing import Any

from shared.api_client import ApiClient, extract_list, unwrap_envelope


class NotificationAPI:
    """Thin wrapper over the notification endpoints; replies are unwrapped."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def get_notifications(
        self,
        user_id: str,
        org_id: str,
        limit: int = 10,
    ) -> list[dict[str, Any]]:
        """Most recent notifications for the user, newest first as the server orders them."""
        payload = await self.client.get(
            "/notifications",
            params={"userId": user_id, "organizationId": org_id, "limit": limit},
        )
        return extract_list(payload, "notifications")

    async def create_notification(self, data: dict[str, Any], org_id: str) -> Any:
        payload = await self.client.post(
            "/notifications",
            json=data,
            params={"organizationId": org_id},
        )
        return unwrap_envelope(payload)

    async def mark_as_read(self, notification_id: str, user_id: str) -> Any:
        payload = await self.client.patch(
            f"/notifications/{notification_id}/read",
            json={},
            params={"userId": user_id},
        )
        return unwrap_envelope(payload)

    async def mark_all_as_read(self, user_id: str, org_id: str) -> Any:
        payload = await self.client.patch(
            "/notifications/read-all",
            json={},
            params={"userId": user_id, "organizationId": org_id},
        )
        return unwrap_envelope(payload)

    async def delete_notification(self, notification_id: str, user_id: str) -> Any:
        payload = await self.client.delete(
            f"/notifications/{notification_id}",
            params={"userId": user_id},
        )
        return unwrap_envelope(payload)

    async def clear_all(self, user_id: str, org_id: str) -> Any:
        payload = await self.client.delete(
            "/notifications",
            params={"userId": user_id, "organizationId": org_id},
        )
        return unwrap_envelope(payload)

    async def get_settings(self, user_id: str, org_id: str) -> dict[str, Any] | None:
        """Settings record, or None when the server reports no usable record."""
        payload = await self.client.get(
            "/notifications/settings",
            params={"userId": user_id, "organizationId": org_id},
        )
        if isinstance(payload, dict) and "success" in payload:
            if not payload["success"]:
                return None
            payload = payload.get("data")
        return payload if isinstance(payload, dict) else None

    async def update_settings(
        self,
        user_id: str,
        org_id: str,
        settings: dict[str, Any],
    ) -> Any:
        """Replace the whole settings record."""
        payload = await self.client.put(
            "/notifications/settings",
            json=settings,
            params={"userId": user_id, "organizationId": org_id},
        )
        return unwrap_envelope(payload)

    async def get_stats(self, org_id: str) -> Any:
        payload = await self.client.get(
            "/notifications/stats",
            params={"organizationId": org_id},
        )
        return unwrap_envelope(payload)

    async def send_notification(self, user_id: str, org_id: str, data: dict[str, Any]) -> Any:
        payload = await self.client.post(
            "/notifications/send",
            json=data,
            params={"userId": user_id, "organizationId": org_id},
        )
        return unwrap_envelope(payload)
