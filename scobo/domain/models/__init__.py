"""Domain models for Scobo."""

from .event_record import CommandKind, EventRecord, resolve_sender_name

__all__ = ["CommandKind", "EventRecord", "resolve_sender_name"]
