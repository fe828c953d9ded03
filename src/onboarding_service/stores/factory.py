"""Build the configured store backend."""

from __future__ import annotations

from onboarding_service.config import Settings
from onboarding_service.stores.base import BaseStore
from onboarding_service.stores.directus import DirectusStore
from onboarding_service.stores.memory import InMemoryStore


def build_store(settings: Settings) -> BaseStore:
    backend = settings.store_backend
    if backend == "directus":
        return DirectusStore(
            settings.directus_url,
            token=settings.directus_token,
            timeout=settings.store_timeout_sec,
        )
    if backend == "supabase":
        from onboarding_service.stores.supabase_store import SupabaseStore

        return SupabaseStore(settings.supabase_url, settings.supabase_service_role_key)
    if backend == "memory":
        return InMemoryStore(unique_fields={settings.onboarding_collection: "user_id"})
    raise ValueError(f"Unknown store_backend: {settings.store_backend!r}")
