"""
Score aggregation by replaying the event log.

The leaderboard of a chat is never stored; it is derived by folding every
record of that chat in file order:

    won  --> +1 for the participant
    undo --> -1 for the participant, unless the score would drop below zero,
             in which case the participant is removed from the board

The result depends only on the persisted log content at call time.
"""

import logging
from collections.abc import Iterable

from scobo.domain.models.event_record import CommandKind, EventRecord
from scobo.persistence.event_log.store import EventLogStore

logger = logging.getLogger(__name__)


def fold_scores(records: Iterable[EventRecord], chat_id: int) -> dict[str, int]:
    """Fold already decoded records of one chat into participant scores."""
    scores: dict[str, int] = {}

    for record in records:
        if record.chat_id != chat_id:
            continue

        name = record.sender_name
        if record.command_kind is CommandKind.WON:
            scores[name] = scores.get(name, 0) + 1
        elif record.command_kind is CommandKind.UNDO:
            new_score = scores.get(name, 0) - 1
            if new_score < 0:
                scores.pop(name, None)
            else:
                scores[name] = new_score
        else:
            logger.debug(
                f"Record of kind '{record.command_kind.value}' is not relevant for scores"
            )

    return scores


def compute_scores(store: EventLogStore, chat_id: int) -> dict[str, int]:
    """
    Replay the whole log into the leaderboard of ``chat_id``.

    Malformed lines are skipped with a diagnostic, never fatal.

    Returns:
        Mapping participant -> score, never containing a negative score
    """
    scores = fold_scores(store.records_forward(), chat_id)
    logger.info(f"These scores were found in the event log for chat {chat_id}: {scores}")
    return scores


def rank_scores(scores: dict[str, int]) -> list[tuple[str, int]]:
    """Participants by score descending, ties broken by name."""
    return sorted(scores.items(), key=lambda item: (-item[1], item[0].casefold()))


class ScoreAggregator:
    """Stateless query object bound to one event log."""

    def __init__(self, store: EventLogStore):
        self._store = store

    def compute(self, chat_id: int) -> dict[str, int]:
        return compute_scores(self._store, chat_id)
