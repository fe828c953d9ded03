"""Pydantic models for onboarding preferences and the API <-> store field mapping."""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Units = Literal["metric", "imperial"]
Theme = Literal["light", "dark", "system"]

# API (camelCase) -> store (snake_case)
FIELD_MAP: dict[str, str] = {
    "displayName": "display_name",
    "units": "units",
    "theme": "theme",
    "contentTypes": "content_types",
    "aiFeatures": "ai_features",
}


class OnboardingPreferences(BaseModel):
    """API-facing preferences. Every field is optional."""

    model_config = ConfigDict(populate_by_name=True)

    display_name: Optional[str] = Field(default=None, alias="displayName")
    units: Optional[Units] = None
    theme: Optional[Theme] = None
    content_types: Optional[list[str]] = Field(default=None, alias="contentTypes")
    ai_features: Optional[list[str]] = Field(default=None, alias="aiFeatures")


class StoredPreferenceRecord(BaseModel):
    """A persisted row, one per user_id."""

    model_config = ConfigDict(extra="ignore")

    id: Union[str, int]
    user_id: str
    display_name: Optional[str] = None
    units: Optional[str] = None
    theme: Optional[str] = None
    content_types: Optional[list[str]] = None
    ai_features: Optional[list[str]] = None


def to_store_fields(prefs: OnboardingPreferences) -> dict[str, Any]:
    """Map API preferences to store columns.

    All five columns are always present; fields omitted from the request are
    written as None, so a save fully replaces the stored values.
    """
    api_values = prefs.model_dump(by_alias=True)
    return {store_key: api_values.get(api_key) for api_key, store_key in FIELD_MAP.items()}


def from_store_record(record: StoredPreferenceRecord) -> dict[str, Any]:
    """Reshape a stored row into the flat camelCase response body."""
    row = record.model_dump()
    return {api_key: row.get(store_key) for api_key, store_key in FIELD_MAP.items()}
