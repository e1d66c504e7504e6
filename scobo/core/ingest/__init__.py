"""
Asynchronous persistence of ingested events.

Components:
    - IngestQueue: non-blocking, thread-safe queue of accepted records
    - LogWriterWorker: single background writer draining the queue
    - WriterState: lifecycle states of the writer
"""

from .ingest_queue import IngestQueue
from .log_writer import LogWriterWorker, WriterState

__all__ = ["IngestQueue", "LogWriterWorker", "WriterState"]
