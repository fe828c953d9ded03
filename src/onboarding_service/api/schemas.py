"""Request/Response schemas for the FastAPI endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class SaveResponse(BaseModel):
    success: bool = True


class OnboardingPreferencesResponse(BaseModel):
    displayName: Optional[str] = None
    units: Optional[str] = None
    theme: Optional[str] = None
    contentTypes: Optional[list[str]] = None
    aiFeatures: Optional[list[str]] = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    store: str
    available: bool
