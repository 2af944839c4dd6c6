"""Current price snapshot providers."""

from pathlib import Path

from lithium_prices.config import SourceSettings
from lithium_prices.sources.base import SnapshotSource
from lithium_prices.sources.file_source import JsonFileSnapshotSource
from lithium_prices.sources.smm import SmmSnapshotSource, parse_carbonate_price
from lithium_prices.sources.static import DEFAULT_SNAPSHOT, StaticSnapshotSource


def base_snapshot_source(settings: SourceSettings) -> SnapshotSource:
    """The snapshot file when one has been written, else the built-in prices."""
    if Path(settings.snapshot_path).exists():
        return JsonFileSnapshotSource(settings.snapshot_path)
    return StaticSnapshotSource()


def build_snapshot_source(settings: SourceSettings) -> SnapshotSource:
    """Create the source selected by SOURCE_KIND."""
    if settings.kind == "file":
        return JsonFileSnapshotSource(settings.snapshot_path)
    if settings.kind == "smm":
        return SmmSnapshotSource(settings, fallback=base_snapshot_source(settings))
    return StaticSnapshotSource()


__all__ = [
    "DEFAULT_SNAPSHOT",
    "JsonFileSnapshotSource",
    "SmmSnapshotSource",
    "SnapshotSource",
    "StaticSnapshotSource",
    "base_snapshot_source",
    "build_snapshot_source",
    "parse_carbonate_price",
]
