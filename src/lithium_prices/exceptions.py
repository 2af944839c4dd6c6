"""Custom exceptions for the lithium price service.

Missing or stale data is never an error here: the engine degrades those
cases to null fields. Exceptions are reserved for input that would corrupt
the output and for collaborators that cannot do their job at all.
"""


class LithiumPriceError(Exception):
    """Base exception for all price service errors."""


class PriceValidationError(LithiumPriceError):
    """Raised when a snapshot or history payload holds malformed values."""


class InvalidContractCodeError(PriceValidationError):
    """Raised when a futures code does not follow the LC + YYMM format."""


class HistoryStoreError(LithiumPriceError):
    """Raised when the history baseline cannot be read or written."""


class SnapshotSourceError(LithiumPriceError):
    """Raised when a snapshot source cannot produce any snapshot."""
