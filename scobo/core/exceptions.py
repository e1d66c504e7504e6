"""
Exception hierarchy for Scobo.

Per-record failures (serialization, transient writes, malformed lines) never
escalate to per-request failures; only ``EventLogUnavailableError`` stops the
background writer.
"""

from pathlib import Path


class ScoboError(Exception):
    """Base exception for all Scobo errors."""


class EventLogError(ScoboError):
    """Base exception for event log file errors."""

    def __init__(self, message: str, path: Path | None = None):
        self.message = message
        self.path = path
        super().__init__(message)


class EventLogWriteError(EventLogError):
    """Transient I/O failure while appending; the event is lost, the writer continues."""


class EventLogUnavailableError(EventLogError):
    """The log file cannot be written at all (gone, read-only, invalid handle)."""


class EventSerializationError(ScoboError):
    """Raised when an event record cannot be encoded into a log line."""


class EventDecodeError(ScoboError):
    """Raised when a log line cannot be decoded into an event record."""

    def __init__(self, message: str, line: str):
        self.message = message
        self.line = line
        super().__init__(message)
