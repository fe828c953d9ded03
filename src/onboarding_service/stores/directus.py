"""Directus REST client for the /items endpoints."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from onboarding_service.stores.base import BaseStore, RecordId, StoreError

logger = structlog.get_logger()


def _error_message(response: httpx.Response) -> str:
    """Pull the first message out of a Directus error envelope."""
    try:
        errors = response.json().get("errors") or []
    except ValueError:
        errors = []
    if errors and isinstance(errors[0], dict) and errors[0].get("message"):
        return errors[0]["message"]
    return f"Directus request failed: {response.status_code}"


class DirectusStore(BaseStore):
    """Reads and writes Directus collection items.

    Directus has no upsert keyed on a non-primary field, so callers fall back
    to read-then-write. Concurrent first writes for the same key can both see
    no record; only a unique constraint on the collection prevents duplicates.
    """

    name = "directus"
    supports_upsert = False

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("directus.request.transport_error", method=method, path=path, error=str(exc))
            raise StoreError(str(exc) or exc.__class__.__name__) from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "directus.request.failed",
                method=method,
                path=path,
                status=response.status_code,
                error=message,
            )
            raise StoreError(message)

        if response.status_code == 204 or not response.content:
            return None
        return response.json().get("data")

    async def find_one(
        self, collection: str, filter: dict[str, Any], limit: int = 1
    ) -> dict[str, Any] | None:
        params: dict[str, Any] = {f"filter[{field}][_eq]": value for field, value in filter.items()}
        params["limit"] = limit
        data = await self._request("GET", f"/items/{collection}", params=params)
        if not data:
            return None
        return data[0]

    async def update(
        self, collection: str, id: RecordId, fields: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request("PATCH", f"/items/{collection}/{id}", json=fields) or {}

    async def create(self, collection: str, fields: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", f"/items/{collection}", json=fields) or {}

    async def ping(self) -> bool:
        try:
            response = await self._client.get("/server/health", timeout=5)
        except httpx.HTTPError:
            return False
        return response.is_success

    async def aclose(self) -> None:
        await self._client.aclose()
