"""Redis preference store."""

import json
from typing import Any, Optional

from habitowl.storage.base import StorageBackend

try:
    import redis.asyncio as redis
    REDIS_AVAILABLE = True
except ImportError:
    REDIS_AVAILABLE = False


class RedisBackend(StorageBackend):
    """Redis-based preference store.

    Used when preferences are kept server-side for a user, so several
    devices share one premium flag and impression log.

    Requires redis package: pip install habitowl[redis]
    """

    def __init__(self, redis_url: str, key_prefix: str = "habitowl:"):
        """Initialize Redis backend.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            key_prefix: Prefix for all keys, typically including the user id
        """
        if not REDIS_AVAILABLE:
            raise ImportError(
                "Redis package not installed. Install with: pip install habitowl[redis]"
            )

        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self._client: Optional["redis.Redis"] = None

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def _require_client(self) -> "redis.Redis":
        if self._client is None:
            raise RuntimeError("Storage not connected. Call connect() first.")
        return self._client

    async def connect(self) -> None:
        """Establish connection to Redis."""
        self._client = redis.from_url(
            self.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        await self._client.ping()

    async def disconnect(self) -> None:
        """Close the Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(self, key: str) -> Optional[Any]:
        """Retrieve a value by key."""
        value = await self._require_client().get(self._key(key))
        return None if value is None else json.loads(value)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store a value with optional TTL (seconds)."""
        await self._require_client().set(self._key(key), json.dumps(value), ex=ttl or None)

    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if key existed."""
        return await self._require_client().delete(self._key(key)) > 0

    async def exists(self, key: str) -> bool:
        """Check if key exists."""
        return await self._require_client().exists(self._key(key)) > 0

    async def keys(self, pattern: str = "*") -> list[str]:
        """List keys matching pattern."""
        client = self._require_client()
        prefix_length = len(self.key_prefix)
        return sorted(
            key[prefix_length:]
            async for key in client.scan_iter(match=self._key(pattern))
        )
