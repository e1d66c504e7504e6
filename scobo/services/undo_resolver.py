"""
Undo target resolution.

Answers "whose most recent increment would an undo compensate?" by scanning
the log backwards. The scan never touches stored history: the compensating
effect only exists once the next UNDO record is persisted.
"""

import logging

from scobo.domain.models.event_record import CommandKind
from scobo.persistence.event_log.store import EventLogStore

logger = logging.getLogger(__name__)


def find_last_scoring_event(store: EventLogStore, chat_id: int) -> str | None:
    """
    Find the participant of the most recent WON record of ``chat_id``.

    Records of other chats, other kinds and malformed lines are skipped; the
    scan stops at the first matching WON record.

    Returns:
        The participant name, or None when there is nothing to undo
    """
    for record in store.records_reverse():
        if record.chat_id != chat_id:
            continue

        if record.command_kind is not CommandKind.WON:
            logger.debug(
                f"Skipping {record.command_kind.value} record of {record.sender_name}"
            )
            continue

        logger.debug(f"Last scoring event in chat {chat_id} is from {record.sender_name}")
        return record.sender_name

    logger.debug(f"No scoring event found in chat {chat_id}")
    return None


class UndoResolver:
    """Stateless query object bound to one event log."""

    def __init__(self, store: EventLogStore):
        self._store = store

    def find_last_scoring_event(self, chat_id: int) -> str | None:
        return find_last_scoring_event(self._store, chat_id)
