"""Shared data models for the lithium price service.

CRITICAL: All monetary values use Decimal. Never use float for prices or changes.
Input models are frozen: a snapshot is immutable for the lifetime of one request.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

USD_PER_TONNE = "USD/T"


class ChangeSource(str, Enum):
    """Where an instrument's day-over-day change came from."""

    SCRAPED = "scraped"
    HISTORY = "history"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Instrument:
    """A spot instrument (lithium carbonate or spodumene concentrate)."""

    id: str
    name: str
    grade: str
    price: Decimal  # USD per metric ton
    price_cny: Decimal | None = None  # carbonate only
    change_usd: Decimal | None = None  # scraped absolute change
    change_cny: Decimal | None = None
    change_percent: Decimal | None = None  # scraped percent change
    unit: str = USD_PER_TONNE
    spot_only: bool = False  # no futures curve available


@dataclass(frozen=True)
class FutureContract:
    """A GFEX lithium carbonate futures quote."""

    contract: str  # LC + YY + MM, e.g. "LC2602"
    month: str  # display label, e.g. "Feb-26"
    price_cny: Decimal


@dataclass(frozen=True)
class Snapshot:
    """Raw prices for one publication, as supplied by a snapshot source."""

    carbonate: Instrument
    spodumene: Instrument
    futures: tuple[FutureContract, ...] = ()


@dataclass(frozen=True)
class HistoryPrice:
    """Baseline spot price kept from the previous trading day."""

    price: Decimal | None = None
    price_cny: Decimal | None = None


@dataclass(frozen=True)
class HistoryFuture:
    """Baseline CNY price of one futures contract."""

    contract: str
    price_cny: Decimal | None = None


@dataclass(frozen=True)
class HistorySnapshot:
    """Previous-day baseline used for change computation."""

    date: str  # YYYY-MM-DD, the day the baseline was saved
    carbonate: HistoryPrice = field(default_factory=HistoryPrice)
    spodumene: HistoryPrice = field(default_factory=HistoryPrice)
    futures: tuple[HistoryFuture, ...] = ()
    saved_at: str | None = None


@dataclass(frozen=True)
class InstrumentChange:
    """Resolved change of a spot instrument, tagged with its source."""

    source: ChangeSource
    change: Decimal | None = None  # USD per metric ton
    change_percent: Decimal | None = None


UNAVAILABLE_CHANGE = InstrumentChange(source=ChangeSource.UNAVAILABLE)


@dataclass(frozen=True)
class DerivedInstrument:
    """Spot instrument plus its rounded change figures."""

    instrument: Instrument
    change: Decimal | None
    change_percent: Decimal | None
    change_source: ChangeSource = ChangeSource.UNAVAILABLE


@dataclass(frozen=True)
class DerivedFuture:
    """Futures quote converted to USD with its CNY percent change."""

    contract: str
    month: str
    price_cny: Decimal
    price: int  # USD per metric ton, whole dollars
    change: Decimal | None  # percent, computed on CNY prices


@dataclass(frozen=True)
class DerivedPrices:
    """Display-ready price record served to the dashboard."""

    carbonate: DerivedInstrument
    spodumene: DerivedInstrument
    futures: tuple[DerivedFuture, ...]
    conversion_rate: Decimal  # CNY per USD, 4 decimals
    last_updated: str  # generation time, ISO-8601
    history_date: str | None
