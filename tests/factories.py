"""Model builders shared across test modules."""

from datetime import datetime, timezone
from decimal import Decimal

from lithium_prices.models import (
    FutureContract,
    HistoryFuture,
    HistoryPrice,
    HistorySnapshot,
    Instrument,
    Snapshot,
)

# 08:00 UTC on a trading day; "today" for staleness is 2026-01-22
NOW = datetime(2026, 1, 22, 8, 0, tzinfo=timezone.utc)
NEXT_DAY = datetime(2026, 1, 23, 8, 0, tzinfo=timezone.utc)


def make_carbonate(**kwargs) -> Instrument:
    """Carbonate spot quote; 164700 CNY / 22704 USD."""
    defaults = dict(
        id="carbonate",
        name="LITHIUM CARBONATE",
        grade="99.5%",
        price=Decimal("22704"),
        price_cny=Decimal("164700"),
    )
    defaults.update(kwargs)
    return Instrument(**defaults)


def make_spodumene(**kwargs) -> Instrument:
    defaults = dict(
        id="spodumene",
        name="SPODUMENE CONCENTRATE",
        grade="6.0%",
        price=Decimal("2035"),
        spot_only=True,
    )
    defaults.update(kwargs)
    return Instrument(**defaults)


def make_snapshot(**kwargs) -> Snapshot:
    defaults = dict(
        carbonate=make_carbonate(),
        spodumene=make_spodumene(),
        futures=(
            FutureContract(contract="LC2602", month="Feb-26", price_cny=Decimal("165080")),
            FutureContract(contract="LC2603", month="Mar-26", price_cny=Decimal("165600")),
        ),
    )
    defaults.update(kwargs)
    return Snapshot(**defaults)


def make_history(date: str = "2026-01-21", **kwargs) -> HistorySnapshot:
    """Previous-day baseline: carbonate 22000, spodumene 2000, LC2602 at 160000 CNY."""
    defaults = dict(
        date=date,
        carbonate=HistoryPrice(price=Decimal("22000"), price_cny=Decimal("160000")),
        spodumene=HistoryPrice(price=Decimal("2000")),
        futures=(HistoryFuture(contract="LC2602", price_cny=Decimal("160000")),),
        saved_at=f"{date}T08:00:00.000Z",
    )
    defaults.update(kwargs)
    return HistorySnapshot(**defaults)
