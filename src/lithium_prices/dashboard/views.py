"""Display rows for the contracts table and futures curve chart.

The first row is always the SMM physical spot price, followed by the GFEX
contracts that have not expired yet, in curve order.
"""

from datetime import date
from decimal import Decimal
from typing import Any

from lithium_prices.models import DerivedPrices
from lithium_prices.pricing.expiry import get_active_contracts
from lithium_prices.serialization import to_json_number

SPOT_TYPE = "SMM PHYSICAL SPOT"
FUTURES_TYPE = "GFEX DERIVATIVE"


def format_change(change: Decimal | None) -> str:
    """Signed percent label, e.g. '+1.25%', '-0.40%', '0.00%' or 'N/A'."""
    if change is None:
        return "N/A"
    if change == 0:
        return "0.00%"
    sign = "+" if change > 0 else ""
    return f"{sign}{change:.2f}%"


def build_contract_rows(prices: DerivedPrices, today: date) -> list[dict[str, Any]]:
    """Spot row plus active futures rows, all priced in USD/t."""
    spot = prices.carbonate
    rows: list[dict[str, Any]] = [
        {
            "contract": "Spot",
            "month": "Today",
            "price": to_json_number(spot.instrument.price),
            "change": to_json_number(spot.change_percent),
            "changeLabel": format_change(spot.change_percent),
            "type": SPOT_TYPE,
            "isSpot": True,
        }
    ]
    for future in get_active_contracts(prices.futures, today):
        rows.append(
            {
                "contract": future.contract,
                "month": future.month,
                "price": future.price,
                "change": to_json_number(future.change),
                "changeLabel": format_change(future.change),
                "type": FUTURES_TYPE,
                "isSpot": False,
            }
        )
    return rows


def build_chart_points(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Curve points (label, price, isSpot) from contract rows."""
    return [
        {"label": row["month"], "price": row["price"], "isSpot": row["isSpot"]}
        for row in rows
    ]
