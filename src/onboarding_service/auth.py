"""Bearer-token authentication against Supabase Auth."""

from __future__ import annotations

import asyncio
from functools import lru_cache
from typing import Optional

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from supabase import Client, create_client

from onboarding_service.config import settings

logger = structlog.get_logger()

security = HTTPBearer(auto_error=False)


class AuthenticatedUser(BaseModel):
    id: str
    email: Optional[str] = None


@lru_cache(maxsize=1)
def get_auth_client() -> Client:
    """Return a singleton Supabase client used only for token verification."""
    return create_client(settings.supabase_url, settings.supabase_service_role_key)


def _verify_token_sync(token: str) -> AuthenticatedUser | None:
    response = get_auth_client().auth.get_user(token)
    user = getattr(response, "user", None)
    if user is None or not user.id:
        return None
    return AuthenticatedUser(id=str(user.id), email=user.email)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser | None:
    """Resolve the request's bearer token to a user, or None when unauthenticated.

    Routes decide how to answer a missing user; this dependency never raises.
    """
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await asyncio.to_thread(_verify_token_sync, credentials.credentials)
    except Exception as exc:
        logger.warning("auth.verify_token.failed", error=str(exc))
        return None
