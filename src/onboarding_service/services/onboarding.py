"""Save and fetch a user's onboarding preferences."""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError

from onboarding_service.auth import AuthenticatedUser
from onboarding_service.config import settings
from onboarding_service.models.preferences import (
    OnboardingPreferences,
    StoredPreferenceRecord,
    from_store_record,
    to_store_fields,
)
from onboarding_service.stores.base import BaseStore

logger = structlog.get_logger()


class Unauthorized(Exception):
    """No authenticated user, or the user has an empty id."""


class PreferencesNotFound(Exception):
    """The user has no stored preferences yet."""


class InvalidPreferences(Exception):
    """The request body does not coerce to OnboardingPreferences."""


def _require_user_id(user: AuthenticatedUser | None) -> str:
    if user is None or not user.id:
        raise Unauthorized()
    return user.id


def _coerce_preferences(payload: Any) -> OnboardingPreferences:
    """Validate a raw body; a missing or empty body means every field was omitted."""
    if isinstance(payload, OnboardingPreferences):
        return payload
    try:
        return OnboardingPreferences.model_validate(payload or {})
    except ValidationError as exc:
        raise InvalidPreferences(str(exc)) from exc


async def _find_record(
    store: BaseStore, collection: str, user_id: str
) -> StoredPreferenceRecord | None:
    row = await store.find_one(collection, {"user_id": user_id}, limit=1)
    if not row:
        return None
    return StoredPreferenceRecord.model_validate(row)


async def save_preferences(
    store: BaseStore,
    user: AuthenticatedUser | None,
    prefs: Any,
    collection: str | None = None,
) -> None:
    """Write the user's preferences, replacing any stored values.

    ``prefs`` may be a model or the raw request body; the body is validated
    only after the user is known, so an anonymous caller always gets
    Unauthorized.

    Uses the store's atomic upsert when available. Otherwise looks the record
    up and then updates or creates it; two concurrent first saves for one user
    can both create unless the store enforces a unique user_id.

    Raises:
        Unauthorized: user is missing or has no id. The store is not called.
        InvalidPreferences: the body fails validation. The store is not called.
        StoreError: any store failure.
    """
    user_id = _require_user_id(user)
    collection = collection or settings.onboarding_collection
    fields = to_store_fields(_coerce_preferences(prefs))

    if store.supports_upsert:
        await store.upsert(collection, "user_id", user_id, fields)
        logger.info("onboarding.save.upserted", user_id=user_id, collection=collection)
        return

    existing = await _find_record(store, collection, user_id)
    if existing is not None:
        await store.update(collection, existing.id, fields)
        logger.info("onboarding.save.updated", user_id=user_id, record_id=existing.id)
    else:
        await store.create(collection, {"user_id": user_id, **fields})
        logger.info("onboarding.save.created", user_id=user_id, collection=collection)


async def fetch_preferences(
    store: BaseStore,
    user: AuthenticatedUser | None,
    collection: str | None = None,
) -> dict[str, Any]:
    """Return the user's stored preferences in camelCase form."""
    user_id = _require_user_id(user)
    collection = collection or settings.onboarding_collection

    record = await _find_record(store, collection, user_id)
    if record is None:
        raise PreferencesNotFound()
    return from_store_record(record)
