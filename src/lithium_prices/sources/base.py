"""Abstract snapshot source interface.

The engine and the dashboard depend only on this interface; where the
prices actually come from (constants, a file, a scraped page) stays
inside the concrete implementations.
"""

from abc import ABC, abstractmethod

from lithium_prices.models import Snapshot


class SnapshotSource(ABC):
    """Abstract base class for current-price providers."""

    @abstractmethod
    async def fetch(self) -> Snapshot:
        """Return the current price snapshot."""
        ...
