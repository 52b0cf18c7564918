"""
Studio Onboarding - Configuration and settings.

Supabase credentials are optional: without them the recorder runs in
degraded mode and every record call is skipped.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class OnboardingSettings(BaseSettings):
    """Settings read from the environment (or .env)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase (optional - progress recording is skipped without them)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None

    # Progress tracking
    progress_table: str = "progress_tracker"
    anonymous_name: str = "anonymous"

    # Web sessions (in-memory)
    session_expire_hours: int = 24  # Drop sessions idle longer than this

    # Application
    onboarding_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @property
    def is_development(self) -> bool:
        return self.onboarding_env == "development"


@lru_cache
def get_settings() -> OnboardingSettings:
    """Get cached settings instance."""
    return OnboardingSettings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: OnboardingSettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
