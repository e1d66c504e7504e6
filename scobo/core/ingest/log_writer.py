"""
Log Writer Worker - drains the ingest queue into the event log file.

Exactly one worker runs per event log. It lives on its own daemon thread so
blocking file I/O never touches the reply path.

Failure policy:
    - Serialization failure: the event is lost, logged, processing continues
    - Transient I/O failure: the event is lost, logged, processing continues
    - Unavailable log (bad handle, read-only, vanished directory): the worker
      stops in state FAILED; the queue keeps accepting records that will not
      be drained until a restart
"""

import logging
import threading
from enum import Enum

from scobo.core.exceptions import (
    EventLogUnavailableError,
    EventLogWriteError,
    EventSerializationError,
)
from scobo.core.logging.context import clear_chat_context
from scobo.domain.models.event_record import EventRecord
from scobo.persistence.event_log.store import EventLogStore

from .ingest_queue import IngestQueue

logger = logging.getLogger(__name__)


class WriterState(str, Enum):
    """Lifecycle states of the log writer."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FAILED = "failed"


class LogWriterWorker:
    """
    Single consumer persisting queued events, one append per record.

    Algorithm:
        1. Poll the queue
        2. Empty: wait ``poll_interval`` seconds (or until stop) and retry
        3. Item present: append it and poll again immediately
        4. On stop: keep going until the queue is empty, then exit

    CPython threads carry no scheduling priority; the worker only does work
    while the queue is non-empty and otherwise sleeps on its stop event.

    Usage:
        worker = LogWriterWorker(ingest_queue, store, poll_interval=1.0)
        worker.start()
        ...
        finished = worker.stop(grace_period=30)
    """

    def __init__(
        self,
        ingest_queue: IngestQueue,
        store: EventLogStore,
        *,
        poll_interval: float = 1.0,
        name: str = "event-log-writer",
    ):
        self._queue = ingest_queue
        self._store = store
        self._poll_interval = poll_interval
        self._name = name

        self._stop_event = threading.Event()
        self._start_lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._state = WriterState.NOT_STARTED
        self._last_error: BaseException | None = None

        self._persisted_count = 0
        self._dropped_count = 0

    def start(self) -> None:
        """Spawn the writer thread. No-op while it is already running."""
        with self._start_lock:
            if self._thread is not None and self._thread.is_alive():
                logger.debug("Event log writer already running")
                return

            self._stop_event.clear()
            self._last_error = None
            self._state = WriterState.RUNNING
            self._thread = threading.Thread(
                target=self._run, name=self._name, daemon=True
            )
            self._thread.start()

    def stop(self, grace_period: float | None = None) -> bool:
        """
        Signal the writer to drain the queue and exit, then wait for it.

        Args:
            grace_period: Seconds to wait for the thread (None waits forever)

        Returns:
            True when the thread finished within the grace period
        """
        if self._thread is None:
            return True

        if self._state is WriterState.RUNNING:
            self._state = WriterState.STOPPING
        self._stop_event.set()
        self._thread.join(timeout=grace_period)

        finished = not self._thread.is_alive()
        if not finished:
            logger.warning(
                f"Event log writer did not finish within {grace_period}s "
                f"({self._queue.pending_count} events still queued)"
            )
        return finished

    def _run(self) -> None:
        clear_chat_context()
        logger.info(
            f"Event log writer started on {self._store.path} "
            f"(poll_interval={self._poll_interval}s)"
        )

        try:
            while True:
                record = self._queue.poll()

                if record is None:
                    if self._stop_event.is_set():
                        break
                    # Queue is empty: pause and try again later
                    self._stop_event.wait(self._poll_interval)
                    continue

                self._persist(record)

        except EventLogUnavailableError as e:
            self._last_error = e
            self._state = WriterState.FAILED
            logger.critical(
                f"Event log writer stopped, the log file is unavailable: {e.message}. "
                f"Incoming events will be queued but not persisted until restart."
            )
            return
        except Exception as e:
            self._last_error = e
            self._state = WriterState.FAILED
            logger.critical(f"Event log writer crashed: {e}", exc_info=True)
            return

        self._state = WriterState.STOPPED
        logger.info(
            f"Event log writer stopped (persisted={self._persisted_count}, "
            f"dropped={self._dropped_count})"
        )

    def _persist(self, record: EventRecord) -> None:
        try:
            self._store.append(record)
        except EventSerializationError as e:
            self._dropped_count += 1
            self._last_error = e
            logger.warning(
                f"Serializer failed, the following event will be lost: {record!r} ({e})"
            )
        except EventLogWriteError as e:
            self._dropped_count += 1
            self._last_error = e
            logger.error(
                f"Failed to append event for chat {record.chat_id}, "
                f"the event is lost: {e.message}"
            )
        except EventLogUnavailableError:
            self._dropped_count += 1
            raise
        else:
            self._persisted_count += 1
            logger.debug(
                f"Persisted {record.command_kind.value} event of "
                f"{record.sender_name} in chat {record.chat_id}"
            )

    @property
    def state(self) -> WriterState:
        return self._state

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def is_healthy(self) -> bool:
        """False once the writer failed or died unexpectedly."""
        if self._state is WriterState.FAILED:
            return False
        if self._state is WriterState.RUNNING:
            return self.is_alive
        return True

    @property
    def last_error(self) -> BaseException | None:
        return self._last_error

    @property
    def persisted_count(self) -> int:
        return self._persisted_count

    @property
    def dropped_count(self) -> int:
        return self._dropped_count
