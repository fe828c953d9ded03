from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from onboarding_service.auth import AuthenticatedUser, get_current_user
from onboarding_service.main import create_app
from tests.stores import RecordingStore


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def make_client():
    """Build a TestClient bound to a store and an (optional) authenticated user."""
    clients: list[TestClient] = []

    def _make(store, user: AuthenticatedUser | None = None) -> TestClient:
        app = create_app(store=store)
        app.dependency_overrides[get_current_user] = lambda: user
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
