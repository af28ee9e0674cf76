"""SQLite preference store."""

import json
import time
from pathlib import Path
from typing import Any, Optional

import aiosqlite

from habitowl.storage.base import StorageBackend

MEMORY_DATABASE = ":memory:"


class SQLiteBackend(StorageBackend):
    """SQLite-based preference store.

    Keeps one row per key with a JSON encoded value, the same shape the
    device key-value store uses. Suitable for development, the CLI and
    single-device deployments.
    """

    def __init__(self, database_url: str):
        """Initialize SQLite backend.

        Args:
            database_url: SQLite connection string (e.g., sqlite:///./habitowl.db
                or sqlite:///:memory:)
        """
        if database_url.startswith("sqlite:///"):
            self.db_path = database_url[len("sqlite:///"):]
        else:
            self.db_path = database_url

        self._connection: Optional[aiosqlite.Connection] = None

    def _require_connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise RuntimeError("Storage not connected. Call connect() first.")
        return self._connection

    async def connect(self) -> None:
        """Open the database and create the preferences table."""
        if self.db_path != MEMORY_DATABASE:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self._connection = await aiosqlite.connect(self.db_path)
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS preferences (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                expires_at REAL
            )
        """)
        await self._connection.commit()

    async def disconnect(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def _purge_expired(self, connection: aiosqlite.Connection) -> None:
        await connection.execute(
            "DELETE FROM preferences WHERE expires_at IS NOT NULL AND expires_at <= ?",
            (time.time(),),
        )

    async def get(self, key: str) -> Optional[Any]:
        """Retrieve a value by key."""
        connection = self._require_connection()
        await self._purge_expired(connection)

        async with connection.execute(
            "SELECT value FROM preferences WHERE key = ?", (key,)
        ) as cursor:
            row = await cursor.fetchone()

        await connection.commit()
        return None if row is None else json.loads(row[0])

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store a value with optional TTL (seconds)."""
        connection = self._require_connection()
        expires_at = time.time() + ttl if ttl else None

        await connection.execute(
            """
            INSERT INTO preferences (key, value, expires_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                expires_at = excluded.expires_at
            """,
            (key, json.dumps(value), expires_at),
        )
        await connection.commit()

    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if key existed."""
        connection = self._require_connection()
        await self._purge_expired(connection)

        cursor = await connection.execute("DELETE FROM preferences WHERE key = ?", (key,))
        await connection.commit()
        return cursor.rowcount > 0

    async def exists(self, key: str) -> bool:
        """Check if key exists."""
        connection = self._require_connection()
        await self._purge_expired(connection)

        async with connection.execute(
            "SELECT 1 FROM preferences WHERE key = ?", (key,)
        ) as cursor:
            row = await cursor.fetchone()

        await connection.commit()
        return row is not None

    async def keys(self, pattern: str = "*") -> list[str]:
        """List keys matching a glob pattern (* and ? wildcards)."""
        connection = self._require_connection()
        await self._purge_expired(connection)

        async with connection.execute(
            "SELECT key FROM preferences WHERE key GLOB ? ORDER BY key", (pattern,)
        ) as cursor:
            rows = await cursor.fetchall()

        await connection.commit()
        return [row[0] for row in rows]
