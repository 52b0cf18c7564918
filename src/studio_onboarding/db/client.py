"""
Studio Onboarding - Supabase Client.

Process-wide client with an explicit lifecycle: init_client() runs once at
startup, get_client() hands out whatever that produced. A missing or broken
configuration leaves the client absent, which the recorder treats as
degraded mode.
"""

import logging

from supabase import Client, create_client

from studio_onboarding.config import get_settings

logger = logging.getLogger(__name__)

_client: Client | None = None


def init_client(url: str | None = None, key: str | None = None) -> Client | None:
    """
    Create the shared Supabase client.

    Falls back to settings for any credential not passed in. Returns None
    (and logs why) when credentials are missing or creation fails.
    """
    global _client

    settings = get_settings()
    url = url or settings.supabase_url
    key = key or settings.supabase_anon_key

    if not url or not key:
        logger.warning("Supabase env vars missing; progress recording disabled.")
        _client = None
        return None

    try:
        _client = create_client(url, key)
    except Exception as e:
        logger.error(f"Supabase client initialisation failed: {e}")
        _client = None
        return None

    logger.info("Supabase client initialised for progress recording.")
    return _client


def get_client() -> Client | None:
    """Get the shared client, or None if init_client() did not produce one."""
    return _client


def reset_client() -> None:
    """Drop the shared client (shutdown and tests)."""
    global _client
    _client = None
