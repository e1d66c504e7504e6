"""
Chat score board endpoints.

- POST /chats/{chat_id}/events: inbound event interface (already parsed events)
- POST /chats/{chat_id}/commands: raw chat text, routed like a bot message
- GET /chats/{chat_id}/scores: leaderboard replayed from the log
- GET /chats/{chat_id}/undo-target: participant an undo would compensate

Reads are blocking file scans and run in a worker thread.
"""

import asyncio
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, model_validator

from scobo.api.dependencies import get_scoreboard
from scobo.core.logging.context import set_chat_context
from scobo.core.logging.logger import get_logger
from scobo.core.scoreboard import ScoreBoard
from scobo.domain.interfaces.reply_sender import CollectingReplySender
from scobo.domain.models.event_record import (
    CommandKind,
    EventRecord,
    resolve_sender_name,
)
from scobo.router.command_router import CommandRouter, InboundMessage
from scobo.services.score_aggregator import rank_scores

logger = get_logger(__name__)
router = APIRouter(prefix="/chats", tags=["Chats"])


class EventRequest(BaseModel):
    """Parsed scoring event submitted by a transport collaborator."""

    command_kind: CommandKind
    sender_name: str | None = None
    username: str | None = None
    first_name: str | None = None
    text: str | None = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def _check_event(self) -> "EventRequest":
        if not self.command_kind.is_scoring:
            raise ValueError("command_kind must be 'won' or 'undo'")
        if self.resolved_sender_name is None:
            raise ValueError("sender_name, username or first_name is required")
        return self

    @property
    def resolved_sender_name(self) -> str | None:
        return resolve_sender_name(self.sender_name, self.username, self.first_name)


class CommandRequest(BaseModel):
    """Raw chat message submitted by a transport collaborator."""

    text: str = Field(..., description="Message text, e.g. '/won'")
    username: str | None = None
    first_name: str | None = None


@router.post("/{chat_id}/events")
async def ingest_event(
    chat_id: int,
    event: EventRequest,
    board: ScoreBoard = Depends(get_scoreboard),
) -> JSONResponse:
    """Accept one scoring event into the persistence pipeline."""
    sender_name = event.resolved_sender_name
    set_chat_context(chat_id=chat_id, user_id=sender_name)

    record = EventRecord(
        chat_id=chat_id,
        sender_name=sender_name,
        command_kind=event.command_kind,
        text=event.text,
    )
    accepted = board.ingest(record)

    if not accepted:
        logger.error("Event was not accepted into the ingest queue")
        return JSONResponse(status_code=503, content={"accepted": False})
    return JSONResponse(status_code=202, content={"accepted": True})


@router.post("/{chat_id}/commands")
async def handle_command(
    chat_id: int,
    command: CommandRequest,
    board: ScoreBoard = Depends(get_scoreboard),
) -> dict[str, Any]:
    """Route a chat message and return the replies the bot would send."""
    sender = CollectingReplySender()
    command_router = CommandRouter(board, sender)
    message = InboundMessage(
        chat_id=chat_id,
        text=command.text,
        username=command.username,
        first_name=command.first_name,
    )

    result = await asyncio.to_thread(command_router.handle, message)
    return {"result": result, "replies": sender.replies}


@router.get("/{chat_id}/scores")
async def get_scores(
    chat_id: int, board: ScoreBoard = Depends(get_scoreboard)
) -> dict[str, Any]:
    """Leaderboard of the chat, replayed from the event log."""
    scores = await asyncio.to_thread(board.compute, chat_id)
    return {
        "chat_id": chat_id,
        "scores": scores,
        "ranking": [
            {"participant": name, "score": score} for name, score in rank_scores(scores)
        ],
    }


@router.get("/{chat_id}/undo-target")
async def get_undo_target(
    chat_id: int, board: ScoreBoard = Depends(get_scoreboard)
) -> dict[str, Any]:
    """Participant whose last /won an undo would compensate (None if nothing)."""
    participant = await asyncio.to_thread(board.find_last_scoring_event, chat_id)
    return {"chat_id": chat_id, "participant": participant}
