"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
"""

from datetime import date
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Store
    STORE_BACKEND: Literal["supabase", "memory"] = "supabase"
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    ROSTER_TABLE: str = "candidates"

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Ledger
    LEDGER_MAX_CAS_ATTEMPTS: int = 5
    CHECKIN_TOKEN_HISTORY: int = 20
    BACKFILL_CANONICAL_FIELDS: bool = True

    # Reporting
    REPORT_CUTOFF_DATE: date = date(2026, 2, 15)
    RECENT_LIMIT_DEFAULT: int = 10
    RECENT_LIMIT_MAX: int = 200

    # Scanner
    SCAN_DEBOUNCE_SECONDS: float = 3.0

    # Scheduler
    ROSTER_AUDIT_INTERVAL_MINUTES: int = 30

    # Logging
    LOG_LEVEL: str = "INFO"


settings = Settings()
