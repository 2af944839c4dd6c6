"""Built-in snapshot: the last manually verified SMM spot and GFEX futures prices.

Update through a JSON snapshot file (SOURCE_KIND=file), not by editing this
module.
"""

from decimal import Decimal

from lithium_prices.models import FutureContract, Instrument, Snapshot
from lithium_prices.sources.base import SnapshotSource

# SMM spot and GFEX settlement, 21 Jan 2026
DEFAULT_SNAPSHOT = Snapshot(
    carbonate=Instrument(
        id="carbonate",
        name="LITHIUM CARBONATE",
        grade="99.5%",
        price=Decimal("22704"),
        price_cny=Decimal("164700"),
    ),
    spodumene=Instrument(
        id="spodumene",
        name="SPODUMENE CONCENTRATE",
        grade="6.0%",
        price=Decimal("2035"),
        spot_only=True,
    ),
    futures=tuple(
        FutureContract(contract=contract, month=month, price_cny=Decimal(price))
        for contract, month, price in (
            ("LC2602", "Feb-26", "165080"),
            ("LC2603", "Mar-26", "165600"),
            ("LC2604", "Apr-26", "164900"),
            ("LC2605", "May-26", "164460"),
            ("LC2606", "Jun-26", "166120"),
            ("LC2607", "Jul-26", "165020"),
            ("LC2608", "Aug-26", "165500"),
            ("LC2609", "Sep-26", "168320"),
            ("LC2610", "Oct-26", "166260"),
            ("LC2611", "Nov-26", "166480"),
            ("LC2612", "Dec-26", "167000"),
            ("LC2701", "Jan-27", "167500"),
        )
    ),
)


class StaticSnapshotSource(SnapshotSource):
    """Serves a fixed snapshot (DEFAULT_SNAPSHOT unless one is given)."""

    def __init__(self, snapshot: Snapshot = DEFAULT_SNAPSHOT) -> None:
        self._snapshot = snapshot

    async def fetch(self) -> Snapshot:
        return self._snapshot
