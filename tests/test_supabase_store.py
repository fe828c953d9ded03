from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from onboarding_service.stores.base import StoreError
from onboarding_service.stores.supabase_store import SupabaseStore


class FakeQuery:
    """Records the PostgREST builder chain and returns canned rows."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.chain: list[tuple] = []

    def __getattr__(self, name):
        def _step(*args, **kwargs):
            self.chain.append((name, args, kwargs))
            return self

        return _step

    def execute(self):
        self.client.executed.append((self.table, self.chain))
        if self.client.error:
            raise self.client.error
        return SimpleNamespace(data=self.client.rows)


class FakeClient:
    def __init__(self, rows=None, error=None):
        self.rows = rows if rows is not None else []
        self.error = error
        self.executed: list[tuple[str, list]] = []

    def table(self, name):
        return FakeQuery(self, name)


def test_find_one_filters_and_limits():
    client = FakeClient(rows=[{"id": 1, "user_id": "u1"}])
    row = asyncio.run(SupabaseStore(client=client).find_one("prefs", {"user_id": "u1"}))

    assert row == {"id": 1, "user_id": "u1"}
    table, chain = client.executed[0]
    assert table == "prefs"
    assert [step[0] for step in chain] == ["select", "eq", "limit"]
    assert chain[1][1] == ("user_id", "u1")


def test_find_one_returns_none_without_rows():
    assert asyncio.run(SupabaseStore(client=FakeClient()).find_one("prefs", {"user_id": "u1"})) is None


def test_upsert_uses_on_conflict_key():
    client = FakeClient(rows=[{"id": 1, "user_id": "u1", "theme": "dark"}])
    store = SupabaseStore(client=client)
    result = asyncio.run(store.upsert("prefs", "user_id", "u1", {"theme": "dark"}))

    assert store.supports_upsert is True
    assert result["theme"] == "dark"
    _, chain = client.executed[0]
    name, args, kwargs = chain[0]
    assert name == "upsert"
    assert args == ({"user_id": "u1", "theme": "dark"},)
    assert kwargs == {"on_conflict": "user_id"}


def test_update_targets_record_id():
    client = FakeClient(rows=[{"id": 5}])
    asyncio.run(SupabaseStore(client=client).update("prefs", 5, {"theme": "light"}))

    _, chain = client.executed[0]
    assert chain[0] == ("update", ({"theme": "light"},), {})
    assert chain[1] == ("eq", ("id", 5), {})


def test_sdk_errors_become_store_error():
    client = FakeClient(error=RuntimeError("JWT expired"))
    with pytest.raises(StoreError, match="JWT expired"):
        asyncio.run(SupabaseStore(client=client).create("prefs", {"user_id": "u1"}))
