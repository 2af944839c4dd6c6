"""Async SQLite database manager for the history baseline.

Uses aiosqlite for non-blocking access from the FastAPI event loop, with
WAL mode so the publisher can write while the dashboard reads.
"""

import os
from typing import Self

import aiosqlite

from lithium_prices.logging import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 1

# One row only: the baseline is replaced, never appended to.
_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS history_baseline (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    history_date TEXT NOT NULL,
    saved_at TEXT,
    payload TEXT NOT NULL
);
"""


class HistoryDatabase:
    """Async SQLite connection manager for the history baseline.

    Usage:
        async with HistoryDatabase("data/history.db") as database:
            cursor = await database.db.execute("SELECT payload FROM history_baseline")
    """

    def __init__(self, db_path: str = "data/history.db") -> None:
        self._db_path = db_path
        self._connection: aiosqlite.Connection | None = None

    @property
    def db(self) -> aiosqlite.Connection:
        """Access the raw aiosqlite connection.

        Raises RuntimeError if not connected.
        """
        if self._connection is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._connection

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    async def connect(self) -> None:
        """Open the connection, set pragmas and create the schema.

        Creates the parent directory if it does not exist.
        """
        db_dir = os.path.dirname(self._db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        self._connection = await aiosqlite.connect(self._db_path)
        await self._connection.execute("PRAGMA journal_mode=WAL")
        await self._connection.execute("PRAGMA synchronous=NORMAL")

        await self._connection.executescript(_CREATE_TABLES_SQL)
        await self._connection.commit()
        await self._ensure_schema_version()

        logger.info("history_db_connected", db_path=self._db_path)

    async def close(self) -> None:
        """Close the database connection if open."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            logger.info("history_db_closed", db_path=self._db_path)

    async def _ensure_schema_version(self) -> None:
        assert self._connection is not None
        cursor = await self._connection.execute("SELECT version FROM schema_version LIMIT 1")
        if await cursor.fetchone() is None:
            await self._connection.execute(
                "INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,)
            )
            await self._connection.commit()
            logger.info("schema_version_set", version=SCHEMA_VERSION)

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        await self.close()
