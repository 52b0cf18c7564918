"""Supabase access for progress tracking."""

from .client import get_client, init_client, reset_client

__all__ = ["get_client", "init_client", "reset_client"]
