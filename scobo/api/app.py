"""
FastAPI application factory for the score board.

The app lifespan owns the ScoreBoard lifecycle: the log file is ensured and
the writer spawned on startup; on shutdown the writer gets its bounded grace
period and any loss is reported.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from scobo.api.middleware.error_handler import ErrorHandlerMiddleware
from scobo.api.routes.chats import router as chats_router
from scobo.api.routes.health import router as health_router
from scobo.core.config.settings import settings
from scobo.core.logging.logger import get_app_logger, setup_app_logging
from scobo.core.scoreboard import ScoreBoard


def create_app(board: ScoreBoard | None = None) -> FastAPI:
    """
    Build the HTTP app around a score board.

    Args:
        board: Board to serve; built from settings when omitted

    Returns:
        FastAPI application whose lifespan starts and shuts down the board
    """
    # `scobo serve` configures logging itself; `uvicorn --factory` does not
    if not logging.getLogger().handlers:
        setup_app_logging()

    scoreboard = board or ScoreBoard.from_settings()
    logger = get_app_logger()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("=== SCORE BOARD STARTUP ===")
        scoreboard.start()
        app.state.scoreboard = scoreboard
        try:
            yield
        finally:
            logger.info("=== SCORE BOARD SHUTDOWN ===")
            report = scoreboard.shutdown()
            if not report.clean:
                logger.error(f"{report.lost} events were lost during shutdown")

    app = FastAPI(
        title="Scobo Score Board",
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.scoreboard = scoreboard

    app.add_middleware(ErrorHandlerMiddleware)
    app.include_router(health_router)
    app.include_router(chats_router)

    return app
