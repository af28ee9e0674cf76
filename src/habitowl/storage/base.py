"""Base storage backend interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

PREMIUM_STATUS_KEY = "user_premium_status"
AD_IMPRESSIONS_KEY = "ad_impressions"


class StorageBackend(ABC):
    """Abstract base class for preference storage backends."""

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection to storage backend."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close connection to storage backend."""
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Retrieve a value by key."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store a value with optional TTL (seconds)."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if key existed."""
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if key exists."""
        pass

    @abstractmethod
    async def keys(self, pattern: str = "*") -> list[str]:
        """List keys matching pattern."""
        pass

    # Preference keys used by the ad layer

    async def get_premium_status(self) -> Optional[str]:
        """Get the raw premium flag ("true" or "false"), None if never set."""
        return await self.get(PREMIUM_STATUS_KEY)

    async def set_premium_status(self, is_premium: bool) -> None:
        """Store the premium flag."""
        await self.set(PREMIUM_STATUS_KEY, "true" if is_premium else "false")

    async def get_ad_impressions(self) -> list[dict]:
        """Get the persisted impression log, oldest first."""
        impressions = await self.get(AD_IMPRESSIONS_KEY)
        return impressions or []

    async def set_ad_impressions(self, impressions: list[dict]) -> None:
        """Replace the persisted impression log."""
        await self.set(AD_IMPRESSIONS_KEY, impressions)
