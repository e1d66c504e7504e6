"""
Event record model for the score board event log.

An EventRecord is one recognized scoring command from a chat participant.
It is created once at ingestion, persisted at most once and never mutated.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class CommandKind(str, Enum):
    """Commands that are relevant for scoring."""

    WON = "won"
    UNDO = "undo"
    UNKNOWN = "unknown"

    @property
    def is_scoring(self) -> bool:
        """Only WON and UNDO records are ever written to the log."""
        return self is not CommandKind.UNKNOWN


class EventRecord(BaseModel):
    """
    Durable unit written to and read from the event log.

    Physical append order is the event order; ``received_at`` is kept for
    auditing only and never used for ordering.

    Example:
        EventRecord(chat_id=-1001, sender_name="alice", command_kind=CommandKind.WON)
    """

    chat_id: int = Field(..., description="Chat whose leaderboard this event belongs to")
    sender_name: str = Field(
        ...,
        min_length=1,
        description="Participant the event is attributed to, resolved at ingestion",
    )
    command_kind: CommandKind = Field(..., description="Scoring command")
    text: str | None = Field(default=None, description="Raw message text, for audit")
    issued_by: str | None = Field(
        default=None,
        description="Participant who typed /undo when it differs from sender_name",
    )
    received_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("sender_name")
    @classmethod
    def _strip_sender_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("sender_name must not be blank")
        return value


def resolve_sender_name(*candidates: str | None) -> str | None:
    """
    Resolve the display identity of a participant.

    Candidates are tried in order of preference (handle first, first name
    last); blank ones are skipped. Resolution happens once at ingestion;
    a later rename never rewrites history.

    Returns:
        The resolved name, or None when every candidate is blank
    """
    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate.strip()
    return None
