"""FastAPI dashboard application factory."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lithium_prices.config import AppSettings
from lithium_prices.dashboard.routes import api
from lithium_prices.exceptions import (
    HistoryStoreError,
    LithiumPriceError,
    PriceValidationError,
    SnapshotSourceError,
)
from lithium_prices.history.store import HistoryStore
from lithium_prices.sources.base import SnapshotSource

log = structlog.get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _status_for(exc: LithiumPriceError) -> int:
    if isinstance(exc, PriceValidationError):
        return 422
    if isinstance(exc, (HistoryStoreError, SnapshotSourceError)):
        return 503
    return 500


async def _handle_price_error(request: Request, exc: LithiumPriceError) -> JSONResponse:
    status = _status_for(exc)
    log.error(
        "request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
        status=status,
    )
    return JSONResponse(status_code=status, content={"error": str(exc)})


def create_dashboard_app(
    source: SnapshotSource,
    history_store: HistoryStore,
    settings: AppSettings | None = None,
    clock: Callable[[], datetime] | None = None,
    lifespan: Any = None,
) -> FastAPI:
    """Create and configure the FastAPI dashboard application.

    Args:
        source: Provider of the current price snapshot.
        history_store: Owner of the previous-day baseline.
        settings: Application settings; loaded from the environment if omitted.
        clock: Returns the current UTC time. Injected by tests.
        lifespan: Optional async context manager for startup/shutdown.
                  Used by main.py to open and close the history store.

    Returns:
        Configured FastAPI application with CORS and the /api routes.
    """
    settings = settings or AppSettings()

    app = FastAPI(title="Lithium Price Dashboard", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.dashboard.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.state.settings = settings
    app.state.source = source
    app.state.history_store = history_store
    app.state.clock = clock or _utc_now

    app.add_exception_handler(LithiumPriceError, _handle_price_error)
    app.include_router(api.router, prefix="/api")

    return app
