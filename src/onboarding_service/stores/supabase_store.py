"""Supabase (PostgREST) table access, with upsert keyed on a unique column."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from supabase import create_client

from onboarding_service.stores.base import BaseStore, RecordId, StoreError

logger = structlog.get_logger()


class SupabaseStore(BaseStore):
    """Runs sync Supabase SDK calls in a thread pool to avoid blocking the event loop."""

    name = "supabase"
    supports_upsert = True

    def __init__(self, url: str = "", service_role_key: str = "", client=None):
        self._client = client if client is not None else create_client(url, service_role_key)

    async def _run(self, op: str, collection: str, fn) -> Any:
        try:
            response = await asyncio.to_thread(fn)
        except Exception as exc:
            logger.warning("supabase.request.failed", op=op, table=collection, error=str(exc))
            raise StoreError(str(exc)) from exc
        return response.data

    async def find_one(
        self, collection: str, filter: dict[str, Any], limit: int = 1
    ) -> dict[str, Any] | None:
        def _select():
            query = self._client.table(collection).select("*")
            for field, value in filter.items():
                query = query.eq(field, value)
            return query.limit(limit).execute()

        rows = await self._run("select", collection, _select)
        return rows[0] if rows else None

    async def update(
        self, collection: str, id: RecordId, fields: dict[str, Any]
    ) -> dict[str, Any]:
        rows = await self._run(
            "update",
            collection,
            lambda: self._client.table(collection).update(fields).eq("id", id).execute(),
        )
        return rows[0] if rows else {}

    async def create(self, collection: str, fields: dict[str, Any]) -> dict[str, Any]:
        rows = await self._run(
            "insert",
            collection,
            lambda: self._client.table(collection).insert(fields).execute(),
        )
        return rows[0] if rows else {}

    async def upsert(
        self, collection: str, key_field: str, key: Any, fields: dict[str, Any]
    ) -> dict[str, Any]:
        """Insert or update in one statement; needs a unique constraint on key_field."""
        row = {key_field: key, **fields}
        rows = await self._run(
            "upsert",
            collection,
            lambda: self._client.table(collection).upsert(row, on_conflict=key_field).execute(),
        )
        return rows[0] if rows else {}
