"""History store interface and the in-memory implementation.

The baseline is owned by the store, not by the engine: callers load it,
pass it into build_response, and trigger save() from an explicit action.
A save always replaces the previous baseline as a whole; fields are never
merged.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from lithium_prices.logging import get_logger
from lithium_prices.models import (
    HistoryFuture,
    HistoryPrice,
    HistorySnapshot,
    Snapshot,
)
from lithium_prices.pricing.engine import format_timestamp

logger = get_logger(__name__)


def build_history_snapshot(snapshot: Snapshot, now: datetime) -> HistorySnapshot:
    """Capture the parts of a snapshot needed as tomorrow's baseline."""
    saved_at = format_timestamp(now)
    return HistorySnapshot(
        date=saved_at[:10],
        saved_at=saved_at,
        carbonate=HistoryPrice(
            price=snapshot.carbonate.price,
            price_cny=snapshot.carbonate.price_cny,
        ),
        spodumene=HistoryPrice(price=snapshot.spodumene.price),
        futures=tuple(
            HistoryFuture(contract=f.contract, price_cny=f.price_cny)
            for f in snapshot.futures
        ),
    )


class HistoryStore(ABC):
    """Abstract base class for baseline storage backends."""

    async def open(self) -> None:
        """Acquire backend resources. No-op unless the backend needs it."""

    async def close(self) -> None:
        """Release backend resources. No-op unless the backend needs it."""

    @abstractmethod
    async def load(self) -> HistorySnapshot | None:
        """Return the saved baseline, or None when none exists."""
        ...

    @abstractmethod
    async def save(self, snapshot: Snapshot, now: datetime) -> HistorySnapshot:
        """Replace the baseline with ``snapshot`` and return what was stored."""
        ...


class InMemoryHistoryStore(HistoryStore):
    """Process-local baseline. Lost on restart; suitable for tests and demos."""

    def __init__(self, initial: HistorySnapshot | None = None) -> None:
        self._history = initial

    async def load(self) -> HistorySnapshot | None:
        return self._history

    async def save(self, snapshot: Snapshot, now: datetime) -> HistorySnapshot:
        self._history = build_history_snapshot(snapshot, now)
        logger.info("history_saved", backend="memory", date=self._history.date)
        return self._history
