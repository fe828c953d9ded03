from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from onboarding_service.stores.base import StoreError
from onboarding_service.stores.directus import DirectusStore

BASE_URL = "http://directus.test"


def _store(handler, token="secret-token") -> DirectusStore:
    return DirectusStore(BASE_URL, token=token, transport=httpx.MockTransport(handler))


def _run(coro_fn):
    async def _wrapper(store):
        try:
            return await coro_fn(store)
        finally:
            await store.aclose()

    return _wrapper


def test_find_one_sends_filter_limit_and_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json={"data": [{"id": 7, "user_id": "u1", "theme": "dark"}]})

    store = _store(handler)
    row = asyncio.run(_run(lambda s: s.find_one("onboarding_preferences", {"user_id": "u1"}))(store))

    assert row == {"id": 7, "user_id": "u1", "theme": "dark"}
    assert seen["path"] == "/items/onboarding_preferences"
    assert seen["params"] == {"filter[user_id][_eq]": "u1", "limit": "1"}
    assert seen["auth"] == "Bearer secret-token"


def test_find_one_returns_none_for_empty_result():
    store = _store(lambda request: httpx.Response(200, json={"data": []}))
    assert asyncio.run(_run(lambda s: s.find_one("c", {"user_id": "u1"}))(store)) is None


def test_update_patches_item_by_id():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"id": 7, **seen["body"]}})

    store = _store(handler)
    result = asyncio.run(_run(lambda s: s.update("c", 7, {"theme": "light"}))(store))

    assert seen == {"method": "PATCH", "path": "/items/c/7", "body": {"theme": "light"}}
    assert result == {"id": 7, "theme": "light"}


def test_create_posts_item():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        return httpx.Response(200, json={"data": {"id": 1, "user_id": "u1"}})

    store = _store(handler)
    result = asyncio.run(_run(lambda s: s.create("c", {"user_id": "u1"}))(store))

    assert seen == {"method": "POST", "path": "/items/c"}
    assert result == {"id": 1, "user_id": "u1"}


def test_no_token_sends_no_authorization_header():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json={"data": []})

    store = _store(handler, token="")
    asyncio.run(_run(lambda s: s.find_one("c", {"user_id": "u1"}))(store))

    assert seen["auth"] is None


def test_error_envelope_message_becomes_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"errors": [{"message": 'Value for field "user_id" has to be unique.'}]},
        )

    store = _store(handler)
    with pytest.raises(StoreError, match="has to be unique"):
        asyncio.run(_run(lambda s: s.create("c", {"user_id": "u1"}))(store))


def test_error_without_envelope_reports_status():
    store = _store(lambda request: httpx.Response(503, text="upstream down"))
    with pytest.raises(StoreError, match="Directus request failed: 503"):
        asyncio.run(_run(lambda s: s.find_one("c", {"user_id": "u1"}))(store))


def test_transport_error_becomes_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store = _store(handler)
    with pytest.raises(StoreError, match="connection refused"):
        asyncio.run(_run(lambda s: s.find_one("c", {"user_id": "u1"}))(store))


def test_ping_reflects_health_endpoint():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/server/health"
        return httpx.Response(200, json={"status": "ok"})

    assert asyncio.run(_run(lambda s: s.ping())(_store(handler))) is True
    assert asyncio.run(
        _run(lambda s: s.ping())(_store(lambda request: httpx.Response(503)))
    ) is False
