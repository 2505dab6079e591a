"""
Record store adapters for runlens

The only I/O boundary: fetches raw training-run rows and weekly buckets.
"""

from .base import RecordStore
from .memory_store import MemoryStore
from .supabase_store import SUPABASE_SCHEMA, SupabaseStore

__all__ = [
    "RecordStore",
    "MemoryStore",
    "SupabaseStore",
    "SUPABASE_SCHEMA",
]
