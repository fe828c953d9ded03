"""FastAPI dependency injection for the store client."""

from __future__ import annotations

from fastapi import Request

from onboarding_service.stores.base import BaseStore


def get_store(request: Request) -> BaseStore:
    """Return the store client opened in the app lifespan."""
    return request.app.state.store
