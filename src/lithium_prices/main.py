"""Entry point for the lithium price dashboard server.

Wires settings, logging, the snapshot source and the history store into
the FastAPI app and serves it with uvicorn's programmatic API. The
lifespan opens the history store before the first request and closes it
on shutdown.
"""

import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from lithium_prices.config import AppSettings
from lithium_prices.dashboard.app import create_dashboard_app
from lithium_prices.history import build_history_store
from lithium_prices.logging import get_logger, setup_logging
from lithium_prices.sources import build_snapshot_source


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the history store for the lifetime of the server."""
    logger = get_logger("lithium_prices.main")
    settings: AppSettings = app.state.settings
    store = app.state.history_store

    await store.open()
    logger.info(
        "lifespan_started",
        source=settings.source.kind,
        history_backend=settings.history.backend,
    )

    yield

    await store.close()
    logger.info("lithium_dashboard_stopped")


async def run() -> None:
    """Build components and serve the dashboard until interrupted."""
    settings = AppSettings()
    setup_logging(settings.log_level)
    logger = get_logger("lithium_prices.main")

    app = create_dashboard_app(
        source=build_snapshot_source(settings.source),
        history_store=build_history_store(settings.history),
        settings=settings,
        lifespan=lifespan,
    )

    logger.info(
        "starting_dashboard",
        host=settings.dashboard.host,
        port=settings.dashboard.port,
    )

    config = uvicorn.Config(
        app,
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
