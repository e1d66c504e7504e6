"""
Scobo - chat score board backed by an append-only event log

Users issue /won, /undo and /board in a chat; every scoring command is
appended to a log file by a background writer and the leaderboard is
derived by replaying that log.

Clean Import Interface:
- Only the essentials are exposed at top level
- Everything else is available via its scobo.* path
"""

from .core.config.settings import settings
from .core.scoreboard import ScoreBoard, ShutdownReport
from .domain.models.event_record import CommandKind, EventRecord
from .router.command_router import CommandRouter, InboundMessage

__version__ = settings.version

__all__ = [
    "ScoreBoard",
    "ShutdownReport",
    "CommandKind",
    "EventRecord",
    "CommandRouter",
    "InboundMessage",
]
