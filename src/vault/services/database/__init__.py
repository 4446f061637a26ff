"""Database connection and models."""

from src.vault.services.database.connection import get_supabase_admin_client
from src.vault.services.database.utils import SupabaseQueryBuilder, get_query_builder

__all__ = [
    "get_supabase_admin_client",
    "SupabaseQueryBuilder",
    "get_query_builder",
]
