"""Daily publisher: derive prices and write them as a static prices.json.

Run once a day (cron or CI):

    lithium-publish                     # write prices, keep the baseline
    lithium-publish --save-history      # also make today's prices tomorrow's baseline
    lithium-publish --update-snapshot   # refresh the snapshot file from SMM first

Between HISTORY_AUTO_SAVE_START_HOUR and HISTORY_AUTO_SAVE_END_HOUR (local
time, inclusive) the baseline is saved even without --save-history.
"""

import argparse
import asyncio
from datetime import datetime, timezone
from pathlib import Path

from lithium_prices.config import AppSettings, HistorySettings
from lithium_prices.exceptions import LithiumPriceError
from lithium_prices.history import build_history_store
from lithium_prices.logging import get_logger, setup_logging
from lithium_prices.models import DerivedPrices, Snapshot
from lithium_prices.pricing import build_response
from lithium_prices.serialization import derived_prices_to_dict, write_json_atomic
from lithium_prices.sources import (
    JsonFileSnapshotSource,
    SmmSnapshotSource,
    base_snapshot_source,
    build_snapshot_source,
)

logger = get_logger(__name__)


def should_auto_save(hour: int, settings: HistorySettings) -> bool:
    """True when ``hour`` falls inside the configured auto-save window."""
    return settings.auto_save_start_hour <= hour <= settings.auto_save_end_hour


async def update_snapshot(settings: AppSettings) -> Snapshot:
    """Scrape SMM over the current snapshot and write the result to the snapshot file."""
    scraper = SmmSnapshotSource(settings.source, fallback=base_snapshot_source(settings.source))
    snapshot = await scraper.fetch()
    await JsonFileSnapshotSource(settings.source.snapshot_path).write(snapshot)
    return snapshot


async def publish(
    settings: AppSettings,
    save_history: bool = False,
    output: str | None = None,
    now: datetime | None = None,
) -> DerivedPrices:
    """Derive prices, write them to ``output``, and optionally save the baseline."""
    now = now or datetime.now(timezone.utc)
    source = build_snapshot_source(settings.source)
    store = build_history_store(settings.history)

    await store.open()
    try:
        history = await store.load()
        if history is None:
            logger.info("no_history_baseline", note="changes will show as N/A")
        else:
            logger.info("history_baseline_loaded", date=history.date)

        snapshot = await source.fetch()
        prices = build_response(
            snapshot,
            history,
            now=now,
            fallback_rate=settings.pricing.fallback_conversion_rate,
        )

        path = Path(output or settings.publish.output_path)
        await asyncio.to_thread(write_json_atomic, path, derived_prices_to_dict(prices))
        logger.info(
            "prices_published",
            path=str(path),
            conversion_rate=str(prices.conversion_rate),
            history_date=prices.history_date,
        )

        if save_history or should_auto_save(now.astimezone().hour, settings.history):
            await store.save(snapshot, now)
        else:
            logger.info("history_not_saved", hint="run with --save-history to set the baseline")
    finally:
        await store.close()

    return prices


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Publish derived lithium prices as JSON.")
    parser.add_argument(
        "--save-history",
        action="store_true",
        help="Save today's prices as the baseline for tomorrow's changes.",
    )
    parser.add_argument("--output", default=None, help="Output path for prices.json.")
    parser.add_argument(
        "--update-snapshot",
        action="store_true",
        help="Refresh the snapshot file from SMM before publishing.",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace, settings: AppSettings) -> None:
    if args.update_snapshot:
        await update_snapshot(settings)
    await publish(settings, save_history=args.save_history, output=args.output)


def main(argv: list[str] | None = None) -> None:
    """Synchronous entry point."""
    args = _parse_args(argv)
    settings = AppSettings()
    setup_logging(settings.log_level)

    try:
        asyncio.run(run(args, settings))
    except LithiumPriceError as e:
        logger.error("publish_failed", error_type=type(e).__name__, error=str(e))
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
