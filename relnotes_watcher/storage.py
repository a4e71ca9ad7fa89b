"""
SQLite storage for the update watermark.

Persists the timestamp of the most recent release the user has been
notified about, so restarts do not repeat notifications.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol, runtime_checkable

import aiosqlite

logger = logging.getLogger(__name__)


@runtime_checkable
class WatermarkStore(Protocol):
    """
    Protocol for a persisted single-timestamp store.

    Timestamps are epoch milliseconds; 0 means never updated.
    """

    async def get(self) -> int:
        """Return the stored watermark, 0 if none was ever written."""
        ...

    async def set(self, value: int) -> None:
        """Persist a new watermark."""
        ...


class MemoryWatermarkStore:
    """Watermark store kept in process memory."""

    def __init__(self, value: int = 0):
        self.value = value

    async def get(self) -> int:
        return self.value

    async def set(self, value: int) -> None:
        self.value = value


class SQLiteWatermarkStore:
    """
    Async SQLite watermark store.

    Several named watermarks can share one database; each store instance
    reads and writes the one named by ``key``.
    """

    def __init__(self, database_path: str | Path, key: str = "last_update"):
        """
        Initialize storage with database path.

        Parameters
        ----------
        database_path : str | Path
            Path to the SQLite database file, or ``:memory:``.
        key : str
            Name of the watermark this store manages.
        """
        self.database_path = database_path if database_path == ":memory:" else Path(database_path)
        self.key = key
        self._connection: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """
        Initialize the database connection and create tables.

        Creates the database file and parent directories if they don't exist.
        """
        if isinstance(self.database_path, Path):
            self.database_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info("Initializing database at %s", self.database_path)

        self._connection = await aiosqlite.connect(self.database_path)
        await self._create_tables()

    async def _create_tables(self) -> None:
        """Create database tables if they don't exist."""
        if self._connection is None:
            raise RuntimeError("Database not initialized")

        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS watermarks (
                name TEXT PRIMARY KEY,
                value INTEGER NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        await self._connection.commit()
        logger.debug("Database tables created/verified")

    async def get(self) -> int:
        """
        Read the watermark.

        Returns
        -------
        int
            Stored epoch milliseconds, or 0 if never written.
        """
        if self._connection is None:
            raise RuntimeError("Database not initialized")

        cursor = await self._connection.execute(
            "SELECT value FROM watermarks WHERE name = ?",
            (self.key,),
        )
        result = await cursor.fetchone()
        return result[0] if result else 0

    async def set(self, value: int) -> None:
        """
        Write the watermark.

        Parameters
        ----------
        value : int
            New watermark in epoch milliseconds.
        """
        if self._connection is None:
            raise RuntimeError("Database not initialized")

        now = datetime.now(timezone.utc).isoformat()

        await self._connection.execute(
            """
            INSERT INTO watermarks (name, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(name) DO UPDATE SET value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (self.key, value, now),
        )
        await self._connection.commit()
        logger.debug("Watermark '%s' set to %d", self.key, value)

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
            logger.debug("Database connection closed")

    async def __aenter__(self) -> "SQLiteWatermarkStore":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
