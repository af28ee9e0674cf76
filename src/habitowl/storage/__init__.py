"""Preference storage for HabitOwl.

Supports an in-memory store, SQLite (default) and Redis.
"""

from habitowl.storage.base import AD_IMPRESSIONS_KEY, PREMIUM_STATUS_KEY, StorageBackend
from habitowl.storage.factory import get_storage_backend
from habitowl.storage.memory_backend import MemoryBackend

__all__ = [
    "AD_IMPRESSIONS_KEY",
    "MemoryBackend",
    "PREMIUM_STATUS_KEY",
    "StorageBackend",
    "get_storage_backend",
]
