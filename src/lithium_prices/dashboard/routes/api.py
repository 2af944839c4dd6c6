"""JSON API endpoints: derived prices, save-history action, contract rows and chart."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from lithium_prices.dashboard.views import build_chart_points, build_contract_rows
from lithium_prices.models import DerivedPrices
from lithium_prices.pricing import build_response
from lithium_prices.serialization import derived_prices_to_dict

log = structlog.get_logger(__name__)

router = APIRouter()

SAVE_HISTORY_ACTION = "save-history"


async def _derive_prices(request: Request) -> DerivedPrices:
    """Fetch the current snapshot and baseline and run the engine."""
    state = request.app.state
    snapshot = await state.source.fetch()
    history = await state.history_store.load()
    return build_response(
        snapshot,
        history,
        now=state.clock(),
        fallback_rate=state.settings.pricing.fallback_conversion_rate,
    )


@router.get("/prices")
async def get_prices(request: Request) -> JSONResponse:
    """Derived price record: spot, futures in USD, conversion rate, changes."""
    prices = await _derive_prices(request)
    return JSONResponse(content=derived_prices_to_dict(prices))


@router.post("/prices")
async def post_prices(request: Request, action: str | None = None) -> JSONResponse:
    """Run a side action; only ?action=save-history is supported."""
    if action != SAVE_HISTORY_ACTION:
        return JSONResponse(
            status_code=400,
            content={"error": f"Unsupported action: {action!r}"},
        )

    state = request.app.state
    snapshot = await state.source.fetch()
    history = await state.history_store.save(snapshot, state.clock())
    log.info("history_saved_via_dashboard", date=history.date)
    return JSONResponse(content={"success": True, "date": history.date})


@router.get("/contracts")
async def get_contracts(request: Request) -> JSONResponse:
    """Contracts table rows: spot first, then unexpired futures."""
    prices = await _derive_prices(request)
    today = request.app.state.clock().date()
    return JSONResponse(content=build_contract_rows(prices, today))


@router.get("/chart")
async def get_chart(request: Request) -> JSONResponse:
    """Futures curve points for the chart, spot first."""
    prices = await _derive_prices(request)
    today = request.app.state.clock().date()
    return JSONResponse(content=build_chart_points(build_contract_rows(prices, today)))
