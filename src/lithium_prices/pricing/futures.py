"""Futures curve conversion from CNY to USD.

The percent change of a contract is always computed on CNY prices so that
a move in the implied FX rate does not show up as a futures move.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal

from lithium_prices.models import DerivedFuture, FutureContract, HistorySnapshot
from lithium_prices.pricing.change import compute_percent_change
from lithium_prices.pricing.rounding import CHANGE_PLACES, round_optional, round_to_int


def history_futures_by_contract(
    history: HistorySnapshot | None,
) -> dict[str, Decimal | None]:
    """Index baseline CNY prices by contract code. Later duplicates win."""
    if history is None:
        return {}
    return {future.contract: future.price_cny for future in history.futures}


def convert_futures(
    futures: Iterable[FutureContract],
    conversion_rate: Decimal,
    history_by_contract: Mapping[str, Decimal | None],
) -> tuple[DerivedFuture, ...]:
    """Convert each contract to whole USD and attach its CNY percent change.

    Output order is input order; it is the x-axis of the futures curve.
    Contracts missing from the baseline, or with a zero baseline, get a
    None change without affecting the others.
    """
    derived: list[DerivedFuture] = []
    for future in futures:
        change = compute_percent_change(
            future.price_cny, history_by_contract.get(future.contract)
        )
        derived.append(
            DerivedFuture(
                contract=future.contract,
                month=future.month,
                price_cny=future.price_cny,
                price=round_to_int(future.price_cny / conversion_rate),
                change=round_optional(change, CHANGE_PLACES),
            )
        )
    return tuple(derived)
