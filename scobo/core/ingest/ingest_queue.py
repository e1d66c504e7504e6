"""
Ingest queue between inbound command handling and log persistence.

Producers call ``enqueue`` from any thread or task and never block; the single
log writer drains it with ``poll``.
"""

import logging
import queue
import threading

from scobo.domain.models.event_record import EventRecord

logger = logging.getLogger(__name__)


class IngestQueue:
    """
    Thread-safe, non-blocking queue of event records awaiting persistence.

    Unbounded by default. A bounded queue (``max_size > 0``) refuses records
    when full. Refusals are always reported to the caller as ``False`` so the
    user can be told that the action did not register.
    """

    def __init__(self, max_size: int = 0):
        self._queue: queue.Queue[EventRecord] = queue.Queue(maxsize=max_size)
        self._closed = threading.Event()
        self.max_size = max_size

    def enqueue(self, record: EventRecord) -> bool:
        """
        Offer a record without blocking.

        Returns:
            True when the record was accepted, False otherwise
        """
        if self._closed.is_set():
            logger.error(
                f"Ingest queue is closed, refusing {record.command_kind.value} "
                f"event for chat {record.chat_id}"
            )
            return False

        try:
            self._queue.put_nowait(record)
        except queue.Full:
            logger.error(
                f"Ingest queue is full ({self.max_size} pending), refusing "
                f"{record.command_kind.value} event for chat {record.chat_id}"
            )
            return False
        except MemoryError:
            logger.error(
                f"Out of memory while queueing {record.command_kind.value} "
                f"event for chat {record.chat_id}"
            )
            return False

        return True

    def poll(self) -> EventRecord | None:
        """Next record in arrival order, or None when the queue is empty."""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def drain(self) -> list[EventRecord]:
        """Remove and return everything still queued."""
        drained: list[EventRecord] = []
        while (record := self.poll()) is not None:
            drained.append(record)
        return drained

    def close(self) -> None:
        """Stop accepting records. Already queued records stay available."""
        self._closed.set()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def pending_count(self) -> int:
        """Approximate number of queued records."""
        return self._queue.qsize()

    def is_empty(self) -> bool:
        return self._queue.empty()
