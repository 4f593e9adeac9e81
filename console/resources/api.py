"""Generic CRUD client for one console resource."""

import logging
from typing import Any

from pydantic import BaseModel

from console.resources.registry import ResourceSpec
from shared.api_client import ApiClient, ApiResponseError, extract_list, unwrap_envelope

logger = logging.getLogger(__name__)


class ResourceAPI:
    """
    CRUD operations for a resource described by a ResourceSpec.

    Replies are unwrapped from `{success, data}` envelopes and validated into
    the resource's models.
    """

    def __init__(self, client: ApiClient, spec: ResourceSpec):
        self.client = client
        self.spec = spec
        self.endpoints = spec.endpoints

    def _to_item(self, payload: Any) -> BaseModel | None:
        data = unwrap_envelope(payload)
        if not isinstance(data, dict) or "id" not in data:
            return None
        return self.spec.model.model_validate(data)

    async def list(self, params: dict[str, Any] | None = None) -> list[BaseModel]:
        payload = await self.client.get(self.endpoints.list, params=params)
        keys = (self.endpoints.list_key,) if self.endpoints.list_key else ()
        raw_items = extract_list(payload, *keys)
        items = [self.spec.model.model_validate(raw) for raw in raw_items]
        logger.debug(
            f"Fetched {len(items)} {self.spec.name}",
            extra={"resource": self.spec.name},
        )
        return items

    async def stats(self) -> BaseModel:
        payload = await self.client.get(self.endpoints.stats)
        data = unwrap_envelope(payload)
        if not isinstance(data, dict):
            raise ApiResponseError("Invalid data format received from server")
        return self.spec.stats_model.model_validate(data)

    async def get(self, item_id: str) -> BaseModel | None:
        payload = await self.client.get(self.endpoints.item_path(item_id))
        return self._to_item(payload)

    async def create(self, payload: dict[str, Any]) -> BaseModel | None:
        reply = await self.client.post(self.endpoints.create, json=payload)
        return self._to_item(reply)

    async def update(self, item_id: str, payload: dict[str, Any]) -> BaseModel | None:
        reply = await self.client.put(self.endpoints.item_path(item_id), json=payload)
        return self._to_item(reply)

    async def delete(self, item_id: str) -> None:
        await self.client.delete(self.endpoints.item_path(item_id))

    async def action(self, item_id: str, name: str) -> BaseModel | None:
        """Run a named item action such as a refund's approve/process."""
        if name not in self.spec.actions:
            raise ValueError(f"{self.spec.name} has no action {name!r}")
        reply = await self.client.post(f"{self.endpoints.item_path(item_id)}/{name}")
        return self._to_item(reply)
