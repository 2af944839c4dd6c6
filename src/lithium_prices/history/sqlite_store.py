"""SQLite-backed history store.

The baseline is kept as the same JSON document the file store writes, in a
single-row table, so both backends share one parser.

CRITICAL: Prices are stored as JSON text and restored as Decimal on read.
"""

import json
from datetime import datetime

import aiosqlite

from lithium_prices.exceptions import HistoryStoreError
from lithium_prices.history.database import HistoryDatabase
from lithium_prices.history.store import HistoryStore, build_history_snapshot
from lithium_prices.logging import get_logger
from lithium_prices.models import HistorySnapshot, Snapshot
from lithium_prices.serialization import history_to_dict, parse_history

logger = get_logger(__name__)


class SqliteHistoryStore(HistoryStore):
    """History store over a HistoryDatabase connection.

    Usage:
        store = SqliteHistoryStore(HistoryDatabase("data/history.db"))
        await store.open()
        try:
            history = await store.load()
        finally:
            await store.close()
    """

    def __init__(self, database: HistoryDatabase) -> None:
        self._database = database

    async def open(self) -> None:
        if not self._database.is_connected:
            await self._database.connect()

    async def close(self) -> None:
        await self._database.close()

    async def load(self) -> HistorySnapshot | None:
        try:
            cursor = await self._database.db.execute(
                "SELECT payload FROM history_baseline WHERE id = 1"
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise HistoryStoreError(f"Cannot read history baseline: {e}") from e

        if row is None:
            return None
        try:
            payload = json.loads(row[0])
        except json.JSONDecodeError as e:
            logger.warning("history_unreadable", backend="sqlite", error=str(e))
            return None
        return parse_history(payload)

    async def save(self, snapshot: Snapshot, now: datetime) -> HistorySnapshot:
        history = build_history_snapshot(snapshot, now)
        try:
            await self._database.db.execute(
                "INSERT OR REPLACE INTO history_baseline "
                "(id, history_date, saved_at, payload) VALUES (1, ?, ?, ?)",
                (history.date, history.saved_at, json.dumps(history_to_dict(history))),
            )
            await self._database.db.commit()
        except aiosqlite.Error as e:
            raise HistoryStoreError(f"Cannot write history baseline: {e}") from e

        logger.info("history_saved", backend="sqlite", date=history.date)
        return history
