"""Client singletons for external API interactions."""
from directory_etl.clients.supabase_client import SupabaseClient

__all__ = ["SupabaseClient"]
