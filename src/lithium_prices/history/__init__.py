"""History baseline persistence.

Provides the HistoryStore interface, in-memory, JSON file and SQLite
backends, and a factory that picks one from HistorySettings.
"""

from lithium_prices.config import HistorySettings
from lithium_prices.history.database import HistoryDatabase
from lithium_prices.history.file_store import JsonFileHistoryStore
from lithium_prices.history.sqlite_store import SqliteHistoryStore
from lithium_prices.history.store import (
    HistoryStore,
    InMemoryHistoryStore,
    build_history_snapshot,
)


def build_history_store(settings: HistorySettings) -> HistoryStore:
    """Create the backend selected by HISTORY_BACKEND."""
    if settings.backend == "memory":
        return InMemoryHistoryStore()
    if settings.backend == "sqlite":
        return SqliteHistoryStore(HistoryDatabase(settings.db_path))
    return JsonFileHistoryStore(settings.file_path)


__all__ = [
    "HistoryDatabase",
    "HistoryStore",
    "InMemoryHistoryStore",
    "JsonFileHistoryStore",
    "SqliteHistoryStore",
    "build_history_snapshot",
    "build_history_store",
]
