"""Storage backend factory."""

from typing import Optional

from habitowl.storage.base import StorageBackend
from habitowl.storage.memory_backend import MemoryBackend
from habitowl.storage.sqlite_backend import SQLiteBackend


def get_storage_backend(
    storage_type: Optional[str] = None,
    database_url: Optional[str] = None,
    redis_url: Optional[str] = None,
) -> StorageBackend:
    """Create and return the appropriate storage backend.

    Args:
        storage_type: Type of storage ("memory", "sqlite" or "redis"). Defaults to settings.
        database_url: SQLite database URL (for sqlite backend)
        redis_url: Redis connection URL (for redis backend)

    Returns:
        StorageBackend instance (not yet connected)

    Raises:
        ValueError: If invalid storage type or missing configuration
    """
    from habitowl.config.settings import get_settings
    settings = get_settings()

    storage_type = (storage_type or settings.storage_type).lower()
    database_url = database_url or settings.database_url
    redis_url = redis_url or settings.redis_url

    if storage_type == "memory":
        return MemoryBackend()

    if storage_type == "sqlite":
        return SQLiteBackend(database_url=database_url or "sqlite:///./habitowl.db")

    if storage_type == "redis":
        if not redis_url:
            raise ValueError(
                "Redis URL required for redis storage. "
                "Set REDIS_URL environment variable or pass redis_url parameter."
            )

        from habitowl.storage.redis_backend import RedisBackend
        return RedisBackend(redis_url=redis_url)

    raise ValueError(
        f"Unknown storage type: {storage_type}. "
        "Supported types: memory, sqlite, redis"
    )
