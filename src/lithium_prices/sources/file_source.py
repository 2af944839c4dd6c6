"""Snapshot source backed by a JSON file.

This file is also the target of price updates: ``write`` replaces it with
a structured snapshot instead of patching constants in source code.
"""

import asyncio
import json
from pathlib import Path

from lithium_prices.exceptions import SnapshotSourceError
from lithium_prices.logging import get_logger
from lithium_prices.models import Snapshot
from lithium_prices.serialization import parse_snapshot, snapshot_to_dict, write_json_atomic
from lithium_prices.sources.base import SnapshotSource

logger = get_logger(__name__)


class JsonFileSnapshotSource(SnapshotSource):
    """Reads (and rewrites) a snapshot JSON document."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def fetch(self) -> Snapshot:
        try:
            text = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
            payload = json.loads(text)
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotSourceError(f"Cannot load snapshot from {self._path}: {e}") from e
        return parse_snapshot(payload)

    async def write(self, snapshot: Snapshot) -> None:
        """Replace the snapshot file atomically."""
        try:
            await asyncio.to_thread(write_json_atomic, self._path, snapshot_to_dict(snapshot))
        except OSError as e:
            raise SnapshotSourceError(f"Cannot write snapshot to {self._path}: {e}") from e
        logger.info(
            "snapshot_written",
            path=str(self._path),
            carbonate_price=str(snapshot.carbonate.price),
            futures=len(snapshot.futures),
        )
