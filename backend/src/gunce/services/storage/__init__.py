"""
Storage adapters for diary entries.

One abstract interface, a local SQLite implementation with soft deletes and a
remote Supabase implementation.
"""

from .adapters import LocalStorageAdapter, RemoteStorageAdapter, StorageAdapter
from .factory import StorageAdapterFactory
from .supabase_client import SupabaseClient

__all__ = [
    "StorageAdapter",
    "LocalStorageAdapter",
    "RemoteStorageAdapter",
    "StorageAdapterFactory",
    "SupabaseClient",
]
