"""Normalization engine: raw snapshot + optional baseline -> display-ready prices.

``build_response`` is pure apart from reading the clock when ``now`` is not
supplied. It performs no I/O and holds no state between calls, so the same
inputs always give the same output.
"""

from datetime import datetime, timezone
from decimal import Decimal

from lithium_prices.logging import get_logger
from lithium_prices.models import (
    DerivedInstrument,
    DerivedPrices,
    HistorySnapshot,
    Instrument,
    Snapshot,
)
from lithium_prices.pricing.change import (
    history_spot_prices,
    is_history_usable,
    resolve_instrument_change,
)
from lithium_prices.pricing.conversion import (
    DEFAULT_CONVERSION_RATE,
    compute_conversion_rate,
)
from lithium_prices.pricing.futures import convert_futures, history_futures_by_contract
from lithium_prices.pricing.rounding import RATE_PLACES, round_half_up

logger = get_logger(__name__)


def format_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix."""
    utc = _as_utc(moment)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def build_response(
    snapshot: Snapshot,
    history: HistorySnapshot | None = None,
    now: datetime | None = None,
    fallback_rate: Decimal = DEFAULT_CONVERSION_RATE,
) -> DerivedPrices:
    """Derive USD futures prices and day-over-day changes for one snapshot.

    Args:
        snapshot: Current spot and futures prices.
        history: Previous-day baseline, or None when none was ever saved.
        now: Generation time; naive values are taken as UTC. Defaults to now.
        fallback_rate: CNY per USD when carbonate cannot imply a rate.

    Returns:
        DerivedPrices where every change figure is a rounded Decimal or None.
    """
    now = _as_utc(now or datetime.now(timezone.utc))
    today = now.date()
    history_date = history.date if history is not None else None

    rate = compute_conversion_rate(snapshot.carbonate, fallback_rate)
    carbonate_baseline, spodumene_baseline = history_spot_prices(history)

    carbonate = _derive_instrument(
        snapshot.carbonate, carbonate_baseline, rate, history_date, now
    )
    spodumene = _derive_instrument(
        snapshot.spodumene, spodumene_baseline, rate, history_date, now
    )

    if is_history_usable(history_date, today):
        baseline_futures = history_futures_by_contract(history)
    else:
        baseline_futures = {}
    futures = convert_futures(snapshot.futures, rate, baseline_futures)

    logger.debug(
        "prices_derived",
        conversion_rate=str(rate),
        history_date=history_date,
        carbonate_source=carbonate.change_source.value,
        spodumene_source=spodumene.change_source.value,
        futures=len(futures),
        futures_with_change=sum(1 for f in futures if f.change is not None),
    )

    return DerivedPrices(
        carbonate=carbonate,
        spodumene=spodumene,
        futures=futures,
        conversion_rate=round_half_up(rate, RATE_PLACES),
        last_updated=format_timestamp(now),
        history_date=history_date,
    )


def _derive_instrument(
    instrument: Instrument,
    history_price: Decimal | None,
    rate: Decimal,
    history_date: str | None,
    now: datetime,
) -> DerivedInstrument:
    resolved = resolve_instrument_change(
        instrument,
        history_price,
        conversion_rate=rate,
        history_date=history_date,
        today=now.date(),
    )
    return DerivedInstrument(
        instrument=instrument,
        change=resolved.change,
        change_percent=resolved.change_percent,
        change_source=resolved.source,
    )
