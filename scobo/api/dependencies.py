"""
Dependency injection for API routes.

The ScoreBoard is created by the app factory and stored in app state.
"""

from fastapi import HTTPException, Request

from scobo.core.scoreboard import ScoreBoard


def get_scoreboard(request: Request) -> ScoreBoard:
    """
    Get the score board from app state.

    Raises:
        HTTPException: 503 when the app was built without a board
    """
    board = getattr(request.app.state, "scoreboard", None)
    if board is None:
        raise HTTPException(status_code=503, detail="Score board is not initialized")
    return board
