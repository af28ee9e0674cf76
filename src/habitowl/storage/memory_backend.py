"""In-process preference store."""

import copy
import fnmatch
import time
from typing import Any, Optional

from habitowl.storage.base import StorageBackend


class MemoryBackend(StorageBackend):
    """Dictionary-backed store for tests and the ad simulator.

    Values are deep-copied on the way in and out so callers cannot mutate
    stored state, matching the copy semantics of the persistent backends.
    """

    def __init__(self) -> None:
        self._data: dict[str, tuple[Any, Optional[float]]] = {}
        self._connected = False

    def _require_connection(self) -> None:
        if not self._connected:
            raise RuntimeError("Storage not connected. Call connect() first.")

    def _live(self, key: str) -> bool:
        entry = self._data.get(key)
        if entry is None:
            return False
        expires_at = entry[1]
        if expires_at is not None and expires_at <= time.time():
            del self._data[key]
            return False
        return True

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def get(self, key: str) -> Optional[Any]:
        self._require_connection()
        if not self._live(key):
            return None
        return copy.deepcopy(self._data[key][0])

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self._require_connection()
        expires_at = time.time() + ttl if ttl else None
        self._data[key] = (copy.deepcopy(value), expires_at)

    async def delete(self, key: str) -> bool:
        self._require_connection()
        if not self._live(key):
            return False
        del self._data[key]
        return True

    async def exists(self, key: str) -> bool:
        self._require_connection()
        return self._live(key)

    async def keys(self, pattern: str = "*") -> list[str]:
        self._require_connection()
        return sorted(
            key for key in list(self._data)
            if self._live(key) and fnmatch.fnmatchcase(key, pattern)
        )
