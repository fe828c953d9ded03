"""Application configuration loaded from environment variables."""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Store backend
    store_backend: Literal["directus", "supabase", "memory"] = "directus"

    # Directus (headless CMS)
    directus_url: str = "http://localhost:8055"
    directus_token: str = ""

    # Supabase (store + auth)
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    # Onboarding
    onboarding_collection: str = "onboarding_preferences"
    store_timeout_sec: float = 10.0

    # CORS
    allowed_origins: str = ""


settings = Settings()
