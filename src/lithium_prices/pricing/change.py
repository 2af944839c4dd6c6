"""Day-over-day change resolution for spot instruments.

A change can come from the scraped page itself or from the saved history
baseline. Each candidate source is a resolver in ``_RESOLVERS``, tried in
priority order; the first one that applies wins. When none applies the
change is explicitly unavailable rather than zero.

Zero is a real value: a scraped change of 0 means "no change", not "no data".

CRITICAL: All values use Decimal. Never use float for prices or changes.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from lithium_prices.models import (
    UNAVAILABLE_CHANGE,
    ChangeSource,
    HistorySnapshot,
    Instrument,
    InstrumentChange,
)
from lithium_prices.pricing.rounding import CHANGE_PLACES, round_optional

HUNDRED = Decimal("100")


def compute_percent_change(current: Decimal, previous: Decimal | None) -> Decimal | None:
    """Percent change from ``previous`` to ``current``.

    Formula: (current - previous) / previous * 100

    Returns:
        The unrounded percent, or None when there is no usable baseline
        (previous missing or zero).
    """
    if previous is None or previous == 0:
        return None
    return (current - previous) / previous * HUNDRED


def is_history_usable(history_date: str | None, today: date) -> bool:
    """A baseline saved today would compare the snapshot against itself."""
    return history_date is not None and history_date != today.isoformat()


@dataclass(frozen=True)
class ChangeInputs:
    """Everything a resolver may look at for one instrument."""

    instrument: Instrument
    history_price: Decimal | None
    conversion_rate: Decimal
    history_usable: bool


def _scraped_change(inputs: ChangeInputs) -> InstrumentChange | None:
    inst = inputs.instrument
    # The CNY figures only make sense next to a CNY price (carbonate)
    cny_change = inst.change_cny if inst.price_cny is not None else None

    if inst.change_percent is None and inst.change_usd is None and cny_change is None:
        return None

    change = inst.change_usd
    if change is None and cny_change is not None:
        change = cny_change / inputs.conversion_rate

    percent = inst.change_percent
    if percent is None:
        if cny_change is not None:
            percent = compute_percent_change(inst.price_cny, inst.price_cny - cny_change)
        elif inst.change_usd is not None:
            percent = compute_percent_change(inst.price, inst.price - inst.change_usd)

    return InstrumentChange(
        source=ChangeSource.SCRAPED, change=change, change_percent=percent
    )


def _history_change(inputs: ChangeInputs) -> InstrumentChange | None:
    if not inputs.history_usable or not inputs.history_price:
        return None
    price = inputs.instrument.price
    return InstrumentChange(
        source=ChangeSource.HISTORY,
        change=price - inputs.history_price,
        change_percent=compute_percent_change(price, inputs.history_price),
    )


# Highest priority first
_RESOLVERS: tuple[Callable[[ChangeInputs], InstrumentChange | None], ...] = (
    _scraped_change,
    _history_change,
)


def resolve_instrument_change(
    instrument: Instrument,
    history_price: Decimal | None,
    conversion_rate: Decimal,
    history_date: str | None,
    today: date,
) -> InstrumentChange:
    """Pick the change figures for one spot instrument.

    Precedence: scraped change fields, then the history delta (only when the
    baseline is from an earlier day and nonzero), then unavailable.

    Args:
        instrument: The current spot quote.
        history_price: Baseline USD price from the history snapshot, if any.
        conversion_rate: CNY per USD, used to express a scraped CNY change in USD.
        history_date: Date the baseline was saved (YYYY-MM-DD), if any.
        today: The date the response is generated for.

    Returns:
        InstrumentChange with both figures rounded to 2 decimals, half-up.
    """
    inputs = ChangeInputs(
        instrument=instrument,
        history_price=history_price,
        conversion_rate=conversion_rate,
        history_usable=is_history_usable(history_date, today),
    )
    for resolver in _RESOLVERS:
        resolved = resolver(inputs)
        if resolved is not None:
            return InstrumentChange(
                source=resolved.source,
                change=round_optional(resolved.change, CHANGE_PLACES),
                change_percent=round_optional(resolved.change_percent, CHANGE_PLACES),
            )
    return UNAVAILABLE_CHANGE


def history_spot_prices(
    history: HistorySnapshot | None,
) -> tuple[Decimal | None, Decimal | None]:
    """Baseline (carbonate, spodumene) USD prices, None when absent."""
    if history is None:
        return None, None
    return history.carbonate.price, history.spodumene.price
