"""Read adapters for the hosted patient/update data store."""

from src.store.supabase import InMemoryStore, SupabaseStore

__all__ = ["InMemoryStore", "SupabaseStore"]
