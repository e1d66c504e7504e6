"""
Command Router - turns chat text into score board operations.

Handles the bot commands:
- /won: +1 point for the sender
- /undo: compensate the last /won of the chat
- /board: show the leaderboard

This is the boundary between a concrete chat transport and the score board
core: it only depends on an IReplySender for output.
"""

from __future__ import annotations

import random
from typing import Any

from pydantic import BaseModel, Field

from scobo.core.logging.context import clear_chat_context, set_chat_context
from scobo.core.logging.logger import get_logger
from scobo.core.scoreboard import ScoreBoard
from scobo.domain.interfaces.reply_sender import IReplySender
from scobo.domain.models.event_record import (
    CommandKind,
    EventRecord,
    resolve_sender_name,
)
from scobo.services.score_aggregator import rank_scores

WON_COMMAND = "/won"
UNDO_COMMAND = "/undo"
BOARD_COMMAND = "/board"

BOARD = "board"

# Emojis meant to convey "success"
SUCCESS_EMOJIS = ["\U0001F44F", "\U0001F389", "\U0001F60E", "\U0001F62C"]
CONGRATZ_TEXT = ["gg", "wp", "gratz", "nice", "gj", "you rock"]

FAILURE_TEXT = "Oh no! I failed to register that command. Please try again!"
UNKNOWN_COMMAND_TEXT = "I don't know what to do with that. Try /won, /undo or /board."
NOTHING_TO_UNDO_TEXT = "There is nothing to undo yet!"
EMPTY_BOARD_TEXT = "Nobody has any points, yet. *LOL*"


class InboundMessage(BaseModel):
    """A text message received from a chat transport."""

    chat_id: int
    text: str | None = None
    username: str | None = Field(default=None, description="Preferred handle")
    first_name: str | None = Field(default=None, description="Fallback name")

    @property
    def sender_name(self) -> str | None:
        return resolve_sender_name(self.username, self.first_name)


def parse_command(text: str | None) -> CommandKind | str | None:
    """
    Recognize a bot command at the start of a message.

    ``/won@scobo_bot`` is treated like ``/won``.

    Returns:
        CommandKind.WON, CommandKind.UNDO, "board", CommandKind.UNKNOWN for
        any other slash command, or None for plain text
    """
    if not text:
        return None

    stripped = text.strip()
    if not stripped.startswith("/"):
        return None

    command = stripped.split(maxsplit=1)[0].split("@", 1)[0].lower()
    if command == WON_COMMAND:
        return CommandKind.WON
    if command == UNDO_COMMAND:
        return CommandKind.UNDO
    if command == BOARD_COMMAND:
        return BOARD
    return CommandKind.UNKNOWN


def render_board(scores: dict[str, int]) -> str:
    """Leaderboard text, best score first."""
    if not scores:
        return EMPTY_BOARD_TEXT
    return "\n".join(f"*{name}*:\t{score} pts." for name, score in rank_scores(scores))


class CommandRouter:
    """
    Dispatches parsed commands to the score board and replies with the result.

    Acknowledgements only depend on the event being accepted into the queue,
    never on it being visible in the log already.
    """

    def __init__(
        self,
        board: ScoreBoard,
        sender: IReplySender,
        *,
        rng: random.Random | None = None,
    ):
        self.board = board
        self.sender = sender
        self.rng = rng or random.Random()
        self.logger = get_logger(__name__)

    def handle(self, message: InboundMessage) -> dict[str, Any]:
        """
        Route one inbound message.

        Returns:
            Result dictionary with operation status
        """
        clear_chat_context()
        set_chat_context(chat_id=message.chat_id, user_id=message.sender_name)

        command = parse_command(message.text)
        if command is None:
            self.logger.debug("The message contained no command, ignoring it")
            return {"success": True, "command": None, "handled": False}

        if command is CommandKind.WON:
            return self.handle_won(message)
        if command is CommandKind.UNDO:
            return self.handle_undo(message)
        if command == BOARD:
            return self.handle_board(message)

        self.logger.info(f"Received an unknown command: {message.text}")
        self.sender.send_text(message.chat_id, UNKNOWN_COMMAND_TEXT)
        return {"success": False, "command": "unknown", "handled": True}

    def handle_won(self, message: InboundMessage) -> dict[str, Any]:
        """+1 point for the sender."""
        sender_name = message.sender_name
        if sender_name is None:
            self.logger.warning("A /won message without a usable sender name is ignored")
            return {"success": False, "command": "won", "error": "no_sender"}

        record = EventRecord(
            chat_id=message.chat_id,
            sender_name=sender_name,
            command_kind=CommandKind.WON,
            text=message.text,
        )
        if not self.board.ingest(record):
            self.sender.send_text(message.chat_id, FAILURE_TEXT)
            return {"success": False, "command": "won", "error": "not_accepted"}

        reply = (
            f"{self.rng.choice(SUCCESS_EMOJIS)} {self.rng.choice(CONGRATZ_TEXT)}, "
            f"{sender_name}! +1 pointz."
        )
        self.sender.send_text(message.chat_id, reply)
        return {"success": True, "command": "won", "participant": sender_name}

    def handle_undo(self, message: InboundMessage) -> dict[str, Any]:
        """Compensate the most recent /won of this chat."""
        # File I/O ahead, let people know this might take a moment
        self.sender.send_typing(message.chat_id)

        target = self.board.find_last_scoring_event(message.chat_id)
        if target is None:
            self.sender.send_text(message.chat_id, NOTHING_TO_UNDO_TEXT)
            return {"success": True, "command": "undo", "participant": None}

        record = EventRecord(
            chat_id=message.chat_id,
            sender_name=target,
            command_kind=CommandKind.UNDO,
            text=message.text,
            issued_by=message.sender_name,
        )
        if not self.board.ingest(record):
            self.sender.send_text(message.chat_id, FAILURE_TEXT)
            return {"success": False, "command": "undo", "error": "not_accepted"}

        self.sender.send_text(
            message.chat_id,
            f"_yessir!_ the last score adjustment from *{target}* will be undone!",
            markdown=True,
        )
        return {"success": True, "command": "undo", "participant": target}

    def handle_board(self, message: InboundMessage) -> dict[str, Any]:
        """Reply with the leaderboard."""
        self.sender.send_typing(message.chat_id)

        scores = self.board.compute(message.chat_id)
        self.sender.send_text(message.chat_id, render_board(scores), markdown=True)
        return {"success": True, "command": "board", "scores": scores}
