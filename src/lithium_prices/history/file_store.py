"""JSON file history store (history.json next to the published prices)."""

import asyncio
import json
from datetime import datetime
from pathlib import Path

from lithium_prices.exceptions import HistoryStoreError
from lithium_prices.history.store import HistoryStore, build_history_snapshot
from lithium_prices.logging import get_logger
from lithium_prices.models import HistorySnapshot, Snapshot
from lithium_prices.serialization import history_to_dict, parse_history, write_json_atomic

logger = get_logger(__name__)


class JsonFileHistoryStore(HistoryStore):
    """Keeps the baseline as a single pretty-printed JSON document.

    A file that is missing or not valid JSON reads as "no baseline", so the
    dashboard shows N/A changes instead of failing. A document that parses
    but holds malformed prices raises PriceValidationError.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_text(self) -> str | None:
        if not self._path.exists():
            return None
        return self._path.read_text(encoding="utf-8")

    async def load(self) -> HistorySnapshot | None:
        try:
            text = await asyncio.to_thread(self._read_text)
        except OSError as e:
            raise HistoryStoreError(f"Cannot read {self._path}: {e}") from e
        if text is None:
            return None
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("history_unreadable", path=str(self._path), error=str(e))
            return None
        return parse_history(payload)

    async def save(self, snapshot: Snapshot, now: datetime) -> HistorySnapshot:
        history = build_history_snapshot(snapshot, now)
        try:
            await asyncio.to_thread(write_json_atomic, self._path, history_to_dict(history))
        except OSError as e:
            raise HistoryStoreError(f"Cannot write {self._path}: {e}") from e

        logger.info("history_saved", backend="file", path=str(self._path), date=history.date)
        return history
