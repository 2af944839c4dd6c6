"""Shared test fixtures for the lithium price service."""

import pytest
from factories import make_history, make_snapshot

from lithium_prices.config import (
    AppSettings,
    HistorySettings,
    PublishSettings,
    SourceSettings,
)
from lithium_prices.models import HistorySnapshot, Snapshot


@pytest.fixture
def snapshot() -> Snapshot:
    return make_snapshot()


@pytest.fixture
def history() -> HistorySnapshot:
    return make_history()


@pytest.fixture
def app_settings(tmp_path) -> AppSettings:
    """AppSettings writing everything under tmp_path, with auto-save disabled."""
    return AppSettings(
        log_level="DEBUG",
        history=HistorySettings(
            backend="file",
            file_path=str(tmp_path / "history.json"),
            db_path=str(tmp_path / "history.db"),
            auto_save_start_hour=1,
            auto_save_end_hour=0,
        ),
        source=SourceSettings(
            kind="static",
            snapshot_path=str(tmp_path / "snapshot.json"),
        ),
        publish=PublishSettings(output_path=str(tmp_path / "public" / "prices.json")),
    )
