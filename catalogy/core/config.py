# catalogy/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from catalogy.core.errors import ConfigurationError


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Backend selection (STORE_BACKEND):
      - "sql":      requires DATABASE_URL (Supabase Postgres connection string)
      - "supabase": requires SUPABASE_URL + SUPABASE_SERVICE_ROLE_KEY

    Nothing here is required at import time. Missing values are reported by
    `require_store_config()` as a ConfigurationError so the API can answer
    with a server-error response instead of crashing on boot.
    """

    PROJECT_NAME: str = "Catalogy Backend"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    STORE_BACKEND: Literal["sql", "supabase"] = "sql"

    # SQL backend
    DATABASE_URL: str | None = None

    # Supabase backend. The service role key is the write credential and
    # bypasses RLS, so it must never leave the backend.
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    # Profile provisioning
    DEFAULT_LOCALE: str = "es"

    # Analytics
    FINGERPRINT_CAPACITY: int = 5000
    ANALYTICS_MAX_ATTEMPTS: int = 5
    ANALYTICS_RETRY_BACKOFF_SECONDS: float = 0.01

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def require_store_config(self) -> None:
        """
        Validate the settings needed by the selected store backend.

        Raises:
            ConfigurationError: listing every missing variable.
        """
        if self.STORE_BACKEND == "sql":
            required = {"DATABASE_URL": self.DATABASE_URL}
        else:
            required = {
                "SUPABASE_URL": self.SUPABASE_URL,
                "SUPABASE_SERVICE_ROLE_KEY": self.SUPABASE_SERVICE_ROLE_KEY,
            }

        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigurationError(
                f"Missing required settings: {', '.join(missing)}"
            )

        if self.FINGERPRINT_CAPACITY < 1:
            raise ConfigurationError("FINGERPRINT_CAPACITY must be positive")
        if self.ANALYTICS_MAX_ATTEMPTS < 1:
            raise ConfigurationError("ANALYTICS_MAX_ATTEMPTS must be positive")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
