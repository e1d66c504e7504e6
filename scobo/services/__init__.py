"""Read-side services replaying the event log."""

from .score_aggregator import ScoreAggregator, compute_scores, fold_scores, rank_scores
from .undo_resolver import UndoResolver, find_last_scoring_event

__all__ = [
    "ScoreAggregator",
    "UndoResolver",
    "compute_scores",
    "find_last_scoring_event",
    "fold_scores",
    "rank_scores",
]
