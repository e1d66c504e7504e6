"""
Append-only event log persistence.

Components:
    - EventLogStore: append-only file with forward and reverse readers
    - to_json_line / from_json_line: JSON line codec for event records
"""

from .serialization import from_json_line, to_json_line, try_decode
from .store import EventLogStore

__all__ = ["EventLogStore", "from_json_line", "to_json_line", "try_decode"]
