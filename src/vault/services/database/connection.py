"""Supabase database connection management."""

from functools import lru_cache

from supabase import Client, create_client

from src.vault.config import Settings


@lru_cache(maxsize=1)
def get_supabase_admin_client(settings: Settings) -> Client:
    """
    Get Supabase admin client with service role key (singleton per settings).

    This client bypasses Row-Level Security (RLS) policies. Every handler that
    uses it enforces ownership itself before touching user data.

    Args:
        settings: Frozen application settings

    Returns:
        Configured Supabase client with service role key (bypasses RLS)

    Example:
        >>> client = get_supabase_admin_client(settings)
        >>> response = client.table("projects").select("*").execute()
    """
    return create_client(settings.supabase_url, settings.supabase_service_role_key)
