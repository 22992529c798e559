"""Mini README: Centralised configuration for the Budget OK service.

Structure:
    * BudgetOkSettings - pydantic settings model read from the environment.
    * get_settings - cached accessor shared by the web app and the CLI.

Usage:
    Every field can be overridden with a ``BUDGETOK_`` prefixed environment
    variable or a ``.env`` file, e.g. ``BUDGETOK_STORAGE_BACKEND=sql``. The
    settings object is cached, so tests that change the environment must call
    ``get_settings.cache_clear()``.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, validator
from pydantic_settings import BaseSettings

SUPPORTED_STORAGE_BACKENDS = ("memory", "sql")


class BudgetOkSettings(BaseSettings):
    """Runtime configuration for the envelope tracker."""

    environment: str = Field(
        "development",
        description="Environment label controlling reload and logging defaults.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface the HTTP service binds to.",
    )
    interface_port: int = Field(
        8080,
        description="Port the HTTP service listens on.",
        ge=1,
        le=65535,
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level name (DEBUG, INFO, WARNING, ...).",
    )
    storage_backend: str = Field(
        "memory",
        description="Envelope storage backend: 'memory' or 'sql'.",
    )
    database_url: str = Field(
        "sqlite:///budgetok.db",
        description="SQLAlchemy URL used when the sql storage backend is selected.",
    )
    bank_ok_base_url: str = Field(
        "http://localhost:8081",
        description="Base URL of the external Bank OK expense service.",
    )
    bank_ok_timeout_seconds: float = Field(
        5.0,
        description="Timeout applied to every Bank OK request.",
        gt=0,
    )

    class Config:
        env_prefix = "BUDGETOK_"
        env_file = ".env"
        case_sensitive = False

    @validator("storage_backend", pre=True)
    def _normalise_backend(cls, value: str) -> str:
        """Accept any casing but only known backend names."""

        normalised = str(value).strip().lower()
        if normalised not in SUPPORTED_STORAGE_BACKENDS:
            raise ValueError(
                f"Unsupported storage backend '{value}'."
                f" Choose one of: {', '.join(SUPPORTED_STORAGE_BACKENDS)}"
            )
        return normalised

    @validator("bank_ok_base_url")
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache()
def get_settings() -> BudgetOkSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return BudgetOkSettings()
