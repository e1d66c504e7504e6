"""
Pytest configuration and common fixtures for Scobo tests.

Provides a temporary event log, stores and started score boards.
"""

from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from scobo.core.logging.context import clear_chat_context
from scobo.core.scoreboard import ScoreBoard
from scobo.domain.models.event_record import CommandKind, EventRecord
from scobo.persistence.event_log.store import EventLogStore

CHAT_X = -1001
CHAT_Y = -2002


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    """Event log location inside a not yet existing directory."""
    return tmp_path / "share" / "scobo_bot" / "scobo_bot.json"


@pytest.fixture
def store(log_path: Path) -> EventLogStore:
    """Initialized, empty event log store."""
    event_store = EventLogStore(log_path)
    event_store.ensure_exists()
    return event_store


@pytest.fixture
def make_record() -> Callable[..., EventRecord]:
    """Factory for event records."""

    def _make(
        sender_name: str,
        command_kind: CommandKind = CommandKind.WON,
        chat_id: int = CHAT_X,
        **kwargs,
    ) -> EventRecord:
        return EventRecord(
            chat_id=chat_id,
            sender_name=sender_name,
            command_kind=command_kind,
            **kwargs,
        )

    return _make


@pytest.fixture
def append_events(
    store: EventLogStore, make_record
) -> Callable[..., None]:
    """Append (kind, name) pairs of one chat straight to the log."""

    def _append(events: list[tuple[CommandKind, str]], chat_id: int = CHAT_X) -> None:
        for kind, name in events:
            store.append(make_record(name, kind, chat_id=chat_id))

    return _append


@pytest.fixture
def board(log_path: Path) -> Generator[ScoreBoard, None, None]:
    """Started score board with a fast polling writer."""
    scoreboard = ScoreBoard(log_path, poll_interval=0.01, shutdown_grace_period=5)
    scoreboard.start()
    yield scoreboard
    if scoreboard.writer.is_alive:
        scoreboard.shutdown()


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch, tmp_path: Path):
    """Keep tests away from the real ~/.local event log."""
    monkeypatch.setenv("ENVIRONMENT", "DEV")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SCOBO_EVENT_LOG_PATH", str(tmp_path / "env" / "scobo.json"))
    clear_chat_context()
    yield
    clear_chat_context()
