"""
JSON line codec for event records.

One record per line: compact JSON, UTF-8, no embedded newlines (json escapes
them inside strings).
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from scobo.core.exceptions import EventDecodeError, EventSerializationError
from scobo.domain.models.event_record import EventRecord

logger = logging.getLogger(__name__)


def to_json_line(record: EventRecord) -> str:
    """Encode a record as a single log line (without line separator)."""
    try:
        data = record.model_dump(mode="json")
        return json.dumps(data, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise EventSerializationError(f"Failed to serialize event record: {e}") from e


def from_json_line(line: str) -> EventRecord:
    """
    Decode a log line into a record.

    Raises:
        EventDecodeError: the line is not JSON or does not describe a record
    """
    try:
        data: Any = json.loads(line)
    except json.JSONDecodeError as e:
        raise EventDecodeError(f"Invalid JSON in event log line: {e}", line) from e

    if not isinstance(data, dict):
        raise EventDecodeError("Event log line is not a JSON object", line)

    try:
        return EventRecord.model_validate(data)
    except ValidationError as e:
        raise EventDecodeError(
            f"Event log line is not a valid record: {e.error_count()} error(s)", line
        ) from e


def try_decode(line: str) -> EventRecord | None:
    """Decode a line, logging and returning None when it is malformed."""
    try:
        return from_json_line(line)
    except EventDecodeError as e:
        logger.warning(f"Skipping malformed event log line: {e.message}")
        logger.debug(f"Malformed line content: {line[:200]!r}")
        return None
