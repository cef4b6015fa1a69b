"""
Supabase access for the content repository.

The personalization and scoring engines are pure; only
``recommendations.repository`` reaches for a client.
"""

from functools import lru_cache
from typing import Optional

from supabase import Client, create_client

from config.settings import get_settings


class SupabaseClientError(Exception):
    """No usable client: credentials missing or ``create_client`` failed."""


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Shared client built from SUPABASE_URL / SUPABASE_SERVICE_KEY."""
    settings = get_settings()
    if not settings.supabase_configured:
        raise SupabaseClientError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")
    try:
        return create_client(settings.supabase_url, settings.supabase_service_key)
    except Exception as e:
        raise SupabaseClientError(f"Failed to create Supabase client: {e}") from e


def get_supabase_client_optional() -> Optional[Client]:
    """Like :func:`get_supabase_client`, but ``None`` when unavailable."""
    try:
        return get_supabase_client()
    except SupabaseClientError:
        return None

