"""
Health check endpoints.

A writer that stopped on an unavailable log keeps the API up but makes the
health check fail, so operators notice that events are no longer persisted.
"""

import time
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from scobo.api.dependencies import get_scoreboard
from scobo.core.config.settings import settings
from scobo.core.logging.logger import get_logger
from scobo.core.scoreboard import ScoreBoard

logger = get_logger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(board: ScoreBoard = Depends(get_scoreboard)) -> JSONResponse:
    """
    Health of the persistence pipeline.

    Returns 200 while the writer is healthy, 503 once it is degraded.
    """
    start_time = time.time()

    board_health = board.health()
    response_time = time.time() - start_time

    health_data: dict[str, Any] = {
        "status": board_health["status"],
        "timestamp": time.time(),
        "response_time_ms": round(response_time * 1000, 2),
        "environment": {
            "environment": settings.environment,
            "version": settings.version,
            "log_level": settings.log_level,
        },
        **{key: value for key, value in board_health.items() if key != "status"},
    }

    if board.is_healthy:
        logger.debug("Health check completed - Status: healthy")
        return JSONResponse(status_code=200, content=health_data)

    logger.warning(
        f"Health check completed - Status: degraded, writer state "
        f"{board_health['writer']['state']}"
    )
    return JSONResponse(status_code=503, content=health_data)
