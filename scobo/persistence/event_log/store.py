"""
Append-only event log file.

One file per bot, one JSON record per line, UTF-8. The file is only ever
opened in append mode (by the single writer) or read-only (by any number of
concurrent readers, each with its own handle). Nothing is ever edited or
deleted in place.
"""

import errno
import logging
import os
from collections.abc import Iterator
from pathlib import Path

from scobo.core.exceptions import EventLogUnavailableError, EventLogWriteError
from scobo.domain.models.event_record import EventRecord

from .serialization import to_json_line, try_decode

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"

# Errors that mean the file can never be appended to without operator action.
_UNRECOVERABLE_ERRNOS = frozenset(
    {
        errno.EBADF,
        errno.EACCES,
        errno.EPERM,
        errno.EROFS,
        errno.ENOENT,
        errno.ENOTDIR,
        errno.EISDIR,
    }
)


class EventLogStore:
    """
    Durable, append-only storage of event records.

    Writes go through ``append`` only. Reads produce lazy, restartable
    sequences of raw lines; every call opens a fresh read-only handle so
    readers never interfere with each other or with the writer.

    Example:
        store = EventLogStore(Path("~/.local/share/scobo_bot/scobo_bot.json"))
        store.ensure_exists()
        store.append(record)
        for line in store.read_all_reverse():
            ...
    """

    def __init__(self, path: Path | str, *, block_size: int = 8192):
        self._path = Path(path).expanduser()
        self._block_size = block_size

    @property
    def path(self) -> Path:
        return self._path

    def ensure_exists(self) -> None:
        """
        Create parent directories and an empty log file if absent.

        Idempotent; an existing file is never truncated.

        Raises:
            EventLogUnavailableError: the path cannot be created or is not a file
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.touch(exist_ok=True)
        except OSError as e:
            raise EventLogUnavailableError(
                f"Could not initialize event log {self._path}: {e}", self._path
            ) from e

        if not self._path.is_file():
            raise EventLogUnavailableError(
                f"Event log path {self._path} is not a regular file", self._path
            )

        logger.debug(f"Event log ensured at: {self._path}")

    def append(self, record: EventRecord) -> None:
        """
        Append one record, durably.

        Writes a line separator followed by the serialized record in a single
        write, then flushes and fsyncs before closing. Never retries.

        Raises:
            EventSerializationError: the record cannot be encoded
            EventLogWriteError: transient I/O failure, the record is lost
            EventLogUnavailableError: the file cannot be written at all
        """
        payload = LINE_SEPARATOR + to_json_line(record)

        try:
            with self._path.open("a", encoding="utf-8", newline="") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            if e.errno in _UNRECOVERABLE_ERRNOS:
                raise EventLogUnavailableError(
                    f"Event log {self._path} is unavailable: {e}", self._path
                ) from e
            raise EventLogWriteError(
                f"Failed to append to event log {self._path}: {e}", self._path
            ) from e

    def read_all_forward(self) -> Iterator[str]:
        """
        Yield raw lines in file order, skipping empty lines.

        A missing or empty file yields nothing.
        """
        try:
            f = self._path.open("r", encoding="utf-8", errors="replace")
        except FileNotFoundError:
            logger.debug(f"Event log {self._path} does not exist yet, nothing to read")
            return

        with f:
            for raw_line in f:
                line = raw_line.strip()
                if line:
                    yield line

    def read_all_reverse(self) -> Iterator[str]:
        """
        Yield raw lines in exact reverse physical order, skipping empty lines.

        The last appended record comes first. The file is read backwards in
        fixed size blocks, so the whole log is never loaded at once. Bytes
        are split on newlines before decoding, which is safe for UTF-8.
        """
        try:
            f = self._path.open("rb")
        except FileNotFoundError:
            logger.debug(f"Event log {self._path} does not exist yet, nothing to read")
            return

        with f:
            position = f.seek(0, os.SEEK_END)
            remainder = b""

            while position > 0:
                read_size = min(self._block_size, position)
                position -= read_size
                f.seek(position)
                chunk = f.read(read_size) + remainder

                pieces = chunk.split(b"\n")
                # First piece may continue in the previous block
                remainder = pieces.pop(0)
                for raw_line in reversed(pieces):
                    line = _decode_line(raw_line)
                    if line:
                        yield line

            line = _decode_line(remainder)
            if line:
                yield line

    def records_forward(self) -> Iterator[EventRecord]:
        """Decoded records in file order; malformed lines are skipped."""
        for line in self.read_all_forward():
            record = try_decode(line)
            if record is not None:
                yield record

    def records_reverse(self) -> Iterator[EventRecord]:
        """Decoded records in reverse order; malformed lines are skipped."""
        for line in self.read_all_reverse():
            record = try_decode(line)
            if record is not None:
                yield record

    def exists(self) -> bool:
        return self._path.is_file()

    def size_bytes(self) -> int:
        """Current size of the log file, 0 when it does not exist."""
        try:
            return self._path.stat().st_size
        except FileNotFoundError:
            return 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path={str(self._path)!r})"


def _decode_line(raw_line: bytes) -> str:
    return raw_line.decode("utf-8", errors="replace").strip()
