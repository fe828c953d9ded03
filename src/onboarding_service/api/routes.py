"""FastAPI route handlers for onboarding preferences."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from onboarding_service.api.dependencies import get_store
from onboarding_service.api.schemas import (
    ErrorResponse,
    OnboardingPreferencesResponse,
    SaveResponse,
)
from onboarding_service.auth import AuthenticatedUser, get_current_user
from onboarding_service.config import settings
from onboarding_service.models.preferences import OnboardingPreferences
from onboarding_service.services.onboarding import (
    InvalidPreferences,
    PreferencesNotFound,
    Unauthorized,
    fetch_preferences,
    save_preferences,
)
from onboarding_service.stores.base import BaseStore

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/onboarding", tags=["onboarding"])

_ERROR_RESPONSES = {
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _unauthorized() -> JSONResponse:
    return JSONResponse(status_code=401, content={"error": "Unauthorized"})


@router.post(
    "",
    response_model=SaveResponse,
    responses={**_ERROR_RESPONSES, 422: {"model": ErrorResponse}},
    openapi_extra={
        "requestBody": {
            "content": {
                "application/json": {
                    "schema": OnboardingPreferences.model_json_schema(by_alias=True)
                }
            }
        }
    },
)
async def save_onboarding(
    body: Any = Body(default=None),
    store: BaseStore = Depends(get_store),
    user: Optional[AuthenticatedUser] = Depends(get_current_user),
):
    """Save onboarding preferences for the current user (full overwrite).

    The body is taken raw so the identity check runs before validation.
    """
    try:
        await save_preferences(store, user, body)
    except Unauthorized:
        return _unauthorized()
    except InvalidPreferences as exc:
        return JSONResponse(
            status_code=422,
            content={"error": "Invalid preferences", "details": str(exc)},
        )
    except Exception as exc:
        logger.exception(
            "onboarding.save.failed",
            user_id=user.id if user else None,
            collection=settings.onboarding_collection,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to save preferences", "details": str(exc)},
        )
    return SaveResponse()


@router.get(
    "",
    response_model=OnboardingPreferencesResponse,
    responses={**_ERROR_RESPONSES, 404: {"model": ErrorResponse}},
)
async def get_onboarding(
    store: BaseStore = Depends(get_store),
    user: Optional[AuthenticatedUser] = Depends(get_current_user),
):
    """Get onboarding preferences for the current user."""
    try:
        body = await fetch_preferences(store, user)
    except Unauthorized:
        return _unauthorized()
    except PreferencesNotFound:
        logger.info("onboarding.fetch.not_found", user_id=user.id)
        return JSONResponse(status_code=404, content={"error": "No preferences found"})
    except Exception as exc:
        logger.exception(
            "onboarding.fetch.failed",
            user_id=user.id if user else None,
            collection=settings.onboarding_collection,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch preferences", "details": str(exc)},
        )
    return JSONResponse(content=body)
