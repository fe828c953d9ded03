"""In-memory store for local development and tests."""

from __future__ import annotations

import asyncio
import uuid
from typing import Any

from onboarding_service.stores.base import BaseStore, RecordId, StoreError


class InMemoryStore(BaseStore):
    """Process-local collections of dict records.

    Every call yields to the event loop once, so concurrent requests
    interleave between a read and the following write like they would
    against a network store.
    """

    name = "memory"

    def __init__(
        self,
        unique_fields: dict[str, str] | None = None,
        supports_upsert: bool = False,
    ):
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._unique_fields = unique_fields or {}
        self._lock = asyncio.Lock()
        self.supports_upsert = supports_upsert

    def records(self, collection: str) -> list[dict[str, Any]]:
        return [dict(r) for r in self._collections.get(collection, {}).values()]

    def _matches(self, record: dict[str, Any], filter: dict[str, Any]) -> bool:
        return all(record.get(field) == value for field, value in filter.items())

    def _check_unique(self, collection: str, fields: dict[str, Any]) -> None:
        unique_field = self._unique_fields.get(collection)
        if not unique_field or unique_field not in fields:
            return
        for record in self._collections.get(collection, {}).values():
            if record.get(unique_field) == fields[unique_field]:
                raise StoreError("duplicate key value violates unique constraint")

    async def find_one(
        self, collection: str, filter: dict[str, Any], limit: int = 1
    ) -> dict[str, Any] | None:
        await asyncio.sleep(0)
        for record in self._collections.get(collection, {}).values():
            if self._matches(record, filter):
                return dict(record)
        return None

    async def update(
        self, collection: str, id: RecordId, fields: dict[str, Any]
    ) -> dict[str, Any]:
        await asyncio.sleep(0)
        record = self._collections.get(collection, {}).get(str(id))
        if record is None:
            raise StoreError(f"Item {id} not found in {collection}")
        record.update(fields)
        return dict(record)

    async def create(self, collection: str, fields: dict[str, Any]) -> dict[str, Any]:
        await asyncio.sleep(0)
        self._check_unique(collection, fields)
        record_id = str(uuid.uuid4())
        record = {**fields, "id": record_id}
        self._collections.setdefault(collection, {})[record_id] = record
        return dict(record)

    async def upsert(
        self, collection: str, key_field: str, key: Any, fields: dict[str, Any]
    ) -> dict[str, Any]:
        if not self.supports_upsert:
            return await super().upsert(collection, key_field, key, fields)
        async with self._lock:
            existing = await self.find_one(collection, {key_field: key})
            if existing:
                return await self.update(collection, existing["id"], fields)
            return await self.create(collection, {key_field: key, **fields})
