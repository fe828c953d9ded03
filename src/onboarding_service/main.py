"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from onboarding_service.api.dependencies import get_store
from onboarding_service.api.routes import router
from onboarding_service.api.schemas import HealthResponse
from onboarding_service.config import settings
from onboarding_service.stores.base import BaseStore
from onboarding_service.stores.factory import build_store

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# CORS configuration
# ---------------------------------------------------------------------------

_DEFAULT_ORIGINS = {
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:3001",
}


def _get_allowed_origins() -> set[str]:
    origins = set(_DEFAULT_ORIGINS)
    if settings.allowed_origins:
        origins.update(o.strip() for o in settings.allowed_origins.split(",") if o.strip())
    return origins


_ALLOWED_ORIGINS = _get_allowed_origins()


# ---------------------------------------------------------------------------
# App lifecycle
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store client on startup and close it on shutdown."""
    store = getattr(app.state, "store", None)
    if store is None:
        store = build_store(settings)
        app.state.store = store
    logger.info(
        "app.startup",
        store=store.name,
        collection=settings.onboarding_collection,
        allowed_origins=sorted(_ALLOWED_ORIGINS),
    )
    try:
        yield
    finally:
        await store.aclose()
        logger.info("app.shutdown")


def create_app(store: BaseStore | None = None) -> FastAPI:
    """Build the application. A store passed in replaces the configured backend."""
    app = FastAPI(
        title="Onboarding Preferences API",
        description="Save and read a user's onboarding preferences",
        version="0.1.0",
        lifespan=lifespan,
    )
    if store is not None:
        app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(_ALLOWED_ORIGINS),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"error": "Invalid request", "details": str(exc.errors())},
        )

    @app.get("/health", response_model=HealthResponse)
    async def health_check(store: BaseStore = Depends(get_store)):
        return HealthResponse(status="ok", store=store.name, available=await store.ping())

    return app


app = create_app()
