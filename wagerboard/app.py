"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from wagerboard import __version__
from wagerboard.config import Config
from wagerboard.datasources import PublishedSheetSource, SheetSource
from wagerboard.models import FetchState
from wagerboard.services import LeaderboardWidget
from wagerboard.api import router
from wagerboard.api.dependencies import set_widget

logger = logging.getLogger(__name__)


def create_app(
    config: Config | None = None,
    datasource: SheetSource | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration. If None, loads from environment.
        datasource: Export source. If None, reads the configured spreadsheet.

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = Config.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Mount the widget on startup and unmount it on shutdown."""
        # Startup
        logger.info("Starting leaderboard widget")
        logger.info(f"Using export: {config.sheet_url}")

        state = FetchState(refresh_interval_ms=config.refresh_interval_ms)
        source = datasource or PublishedSheetSource(
            sheet_url=config.sheet_url,
            proxy_url=config.proxy_url,
            state=state,
            min_request_interval_ms=config.min_request_interval_ms,
            timeout=config.request_timeout_seconds,
        )
        widget = LeaderboardWidget.from_config(config, source, state)

        set_widget(widget)
        widget.mount()

        yield

        # Shutdown
        logger.info("Shutting down...")
        await widget.unmount()
        set_widget(None)

    app = FastAPI(
        title="Wager Leaderboard",
        description="Ranked wager leaderboard rendered from a published spreadsheet",
        version=__version__,
        lifespan=lifespan,
    )

    # Include routes
    app.include_router(router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
