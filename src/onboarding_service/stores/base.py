"""Store client contract shared by every backend."""

from __future__ import annotations

from typing import Any, Union

RecordId = Union[str, int]


class StoreError(Exception):
    """Any failure talking to the backing store (network, validation, conflict)."""


class BaseStore:
    """Key/value item storage with query-by-filter.

    Backends implement find_one, update and create. Backends that can insert
    or update keyed on a unique field in one round trip set supports_upsert.
    """

    name = "base"
    supports_upsert = False

    async def find_one(
        self, collection: str, filter: dict[str, Any], limit: int = 1
    ) -> dict[str, Any] | None:
        raise NotImplementedError

    async def update(
        self, collection: str, id: RecordId, fields: dict[str, Any]
    ) -> dict[str, Any]:
        raise NotImplementedError

    async def create(self, collection: str, fields: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    async def upsert(
        self, collection: str, key_field: str, key: Any, fields: dict[str, Any]
    ) -> dict[str, Any]:
        raise NotImplementedError(f"{self.name} store does not support atomic upsert")

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None
