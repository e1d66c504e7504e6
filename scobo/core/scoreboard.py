"""
ScoreBoard - explicitly constructed context for one bot's event log.

Owns the event log store, the ingest queue and the log writer, and exposes
the inbound event interface (``ingest``) and the query interface
(``compute``, ``find_last_scoring_event``).

Lifecycle:
    1. start(): ensure the log file exists, spawn the writer
    2. ingest() / compute() / find_last_scoring_event()
    3. shutdown(): refuse new events, let the writer drain for a bounded
       grace period, report whatever could not be persisted

Queries read the file directly and are not synchronized with the queue: an
event accepted a moment ago may not be visible yet.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from scobo.core.config.settings import settings
from scobo.core.ingest.ingest_queue import IngestQueue
from scobo.core.ingest.log_writer import LogWriterWorker, WriterState
from scobo.core.logging.logger import get_logger
from scobo.domain.models.event_record import EventRecord
from scobo.persistence.event_log.store import EventLogStore
from scobo.services.score_aggregator import compute_scores
from scobo.services.undo_resolver import find_last_scoring_event


@dataclass(frozen=True)
class ShutdownReport:
    """Outcome of a shutdown."""

    persisted: int
    dropped: int
    lost: int
    writer_state: WriterState

    @property
    def clean(self) -> bool:
        """True when nothing queued was lost."""
        return self.lost == 0


class ScoreBoard:
    """
    Event-sourced score board for every chat of one bot.

    Example:
        with ScoreBoard(Path("/tmp/scobo.json")) as board:
            board.ingest(EventRecord(chat_id=1, sender_name="alice",
                                     command_kind=CommandKind.WON))
        # leaving the block drains the writer
    """

    def __init__(
        self,
        log_path: Path | str,
        *,
        poll_interval: float = 1.0,
        shutdown_grace_period: float = 30.0,
        queue_max_size: int = 0,
    ):
        self.store = EventLogStore(log_path)
        self.queue = IngestQueue(max_size=queue_max_size)
        self.writer = LogWriterWorker(self.queue, self.store, poll_interval=poll_interval)
        self.shutdown_grace_period = shutdown_grace_period
        self.logger = get_logger(__name__)

    @classmethod
    def from_settings(cls) -> "ScoreBoard":
        """Build a board from the global settings."""
        return cls(
            settings.event_log_file,
            poll_interval=settings.writer_poll_interval,
            shutdown_grace_period=settings.shutdown_grace_period,
            queue_max_size=settings.ingest_queue_max_size,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> "ScoreBoard":
        """Initialize the log file and spawn the writer. Idempotent."""
        self.store.ensure_exists()
        self.writer.start()
        self.logger.info(f"Score board ready, event log at {self.store.path}")
        return self

    def shutdown(self, grace_period: float | None = None) -> ShutdownReport:
        """
        Stop accepting events and let the writer drain.

        Events still queued after the grace period, or left behind by a
        failed writer, are lost; the loss is logged and reported.
        """
        grace = self.shutdown_grace_period if grace_period is None else grace_period

        self.queue.close()
        self.writer.stop(grace)

        # A finished writer leaves an empty queue; anything left is lost
        lost = len(self.queue.drain())

        report = ShutdownReport(
            persisted=self.writer.persisted_count,
            dropped=self.writer.dropped_count,
            lost=lost,
            writer_state=self.writer.state,
        )

        if report.lost:
            self.logger.error(
                f"Shutdown lost {report.lost} queued events that were never persisted "
                f"(writer state: {report.writer_state.value})"
            )
        else:
            self.logger.info(
                f"Score board shut down (persisted={report.persisted}, "
                f"dropped={report.dropped})"
            )
        return report

    def __enter__(self) -> "ScoreBoard":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # ------------------------------------------------------------------
    # Inbound event interface
    # ------------------------------------------------------------------

    def ingest(self, record: EventRecord) -> bool:
        """
        Accept one scoring event into the persistence pipeline.

        Non-scoring records are refused; only WON and UNDO ever reach the log.

        Returns:
            True when the event was queued, False when the user must be told
            that the action did not register
        """
        if not record.command_kind.is_scoring:
            self.logger.warning(
                f"Refusing non-scoring record of kind '{record.command_kind.value}'"
            )
            return False

        accepted = self.queue.enqueue(record)
        if accepted:
            self.logger.debug(
                f"Accepted {record.command_kind.value} event of {record.sender_name}"
            )
        return accepted

    # ------------------------------------------------------------------
    # Query interface
    # ------------------------------------------------------------------

    def compute(self, chat_id: int) -> dict[str, int]:
        """Current leaderboard of ``chat_id`` replayed from the log."""
        return compute_scores(self.store, chat_id)

    def find_last_scoring_event(self, chat_id: int) -> str | None:
        """Participant whose last increment in ``chat_id`` an undo would compensate."""
        return find_last_scoring_event(self.store, chat_id)

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    @property
    def is_healthy(self) -> bool:
        return self.writer.is_healthy

    def health(self) -> dict[str, Any]:
        """Snapshot of the persistence pipeline for health checks."""
        last_error = self.writer.last_error
        return {
            "status": "healthy" if self.is_healthy else "degraded",
            "writer": {
                "state": self.writer.state.value,
                "alive": self.writer.is_alive,
                "persisted": self.writer.persisted_count,
                "dropped": self.writer.dropped_count,
                "last_error": str(last_error) if last_error else None,
            },
            "queue": {
                "pending": self.queue.pending_count,
                "closed": self.queue.closed,
                "max_size": self.queue.max_size,
            },
            "event_log": {
                "path": str(self.store.path),
                "exists": self.store.exists(),
                "size_bytes": self.store.size_bytes(),
            },
        }
