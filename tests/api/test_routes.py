"""
Tests for the HTTP surface.

The app lifespan starts the board, so every client is used as a context
manager.
"""

import logging
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from scobo.api.app import create_app
from scobo.core.exceptions import EventLogUnavailableError
from scobo.core.scoreboard import ScoreBoard

CHAT_X = -1001


@pytest.fixture
def app_board(log_path) -> ScoreBoard:
    return ScoreBoard(log_path, poll_interval=0.01, shutdown_grace_period=5)


@pytest.fixture
def client(app_board):
    with TestClient(create_app(app_board)) as test_client:
        yield test_client


class TestEventsEndpoint:
    """Test POST /chats/{chat_id}/events."""

    def test_accepts_won_event(self, client, app_board):
        response = client.post(
            f"/chats/{CHAT_X}/events",
            json={"command_kind": "won", "username": "alice"},
        )

        assert response.status_code == 202
        assert response.json() == {"accepted": True}

        app_board.shutdown()
        assert app_board.compute(CHAT_X) == {"alice": 1}

    def test_first_name_is_used_without_username(self, client, app_board):
        client.post(
            f"/chats/{CHAT_X}/events",
            json={"command_kind": "won", "first_name": "Alice"},
        )
        app_board.shutdown()

        assert app_board.compute(CHAT_X) == {"Alice": 1}

    def test_blank_sender_name_falls_back_to_username(self, client, app_board):
        response = client.post(
            f"/chats/{CHAT_X}/events",
            json={"command_kind": "won", "sender_name": "  ", "username": "alice"},
        )
        app_board.shutdown()

        assert response.status_code == 202
        assert app_board.compute(CHAT_X) == {"alice": 1}

    @pytest.mark.parametrize(
        "payload",
        [
            {"command_kind": "unknown", "username": "alice"},
            {"command_kind": "won"},
            {"command_kind": "won", "username": "   "},
            {"command_kind": "dance", "username": "alice"},
            {"command_kind": "won", "username": "alice", "bogus": 1},
        ],
    )
    def test_rejects_invalid_events(self, client, payload):
        response = client.post(f"/chats/{CHAT_X}/events", json=payload)

        assert response.status_code == 422

    def test_refused_event_is_503(self, client, app_board):
        app_board.queue.close()

        response = client.post(
            f"/chats/{CHAT_X}/events",
            json={"command_kind": "won", "username": "alice"},
        )

        assert response.status_code == 503
        assert response.json() == {"accepted": False}


class TestQueryEndpoints:
    """Test score and undo target reads."""

    def test_scores_are_ranked(self, client, app_board, make_record):
        for name in ["bob", "alice", "alice"]:
            app_board.store.append(make_record(name))

        response = client.get(f"/chats/{CHAT_X}/scores")

        assert response.status_code == 200
        data = response.json()
        assert data["chat_id"] == CHAT_X
        assert data["scores"] == {"alice": 2, "bob": 1}
        assert data["ranking"] == [
            {"participant": "alice", "score": 2},
            {"participant": "bob", "score": 1},
        ]

    def test_empty_chat(self, client):
        response = client.get("/chats/7/scores")

        assert response.json()["scores"] == {}

    def test_undo_target(self, client, app_board, make_record):
        for name in ["Alice", "Bob"]:
            app_board.store.append(make_record(name))

        response = client.get(f"/chats/{CHAT_X}/undo-target")

        assert response.json() == {"chat_id": CHAT_X, "participant": "Bob"}

    def test_nothing_to_undo(self, client):
        response = client.get(f"/chats/{CHAT_X}/undo-target")

        assert response.json()["participant"] is None


class TestCommandsEndpoint:
    """Test POST /chats/{chat_id}/commands."""

    def test_won_command_returns_reply(self, client, app_board):
        response = client.post(
            f"/chats/{CHAT_X}/commands", json={"text": "/won", "username": "alice"}
        )

        data = response.json()
        assert response.status_code == 200
        assert data["result"]["participant"] == "alice"
        assert data["replies"][0]["chat_id"] == CHAT_X
        assert data["replies"][0]["text"].endswith("alice! +1 pointz.")

    def test_board_command(self, client, app_board, make_record):
        app_board.store.append(make_record("alice"))

        response = client.post(f"/chats/{CHAT_X}/commands", json={"text": "/board"})

        assert response.json()["replies"][-1]["text"] == "*alice*:\t1 pts."

    def test_plain_text_has_no_reply(self, client):
        response = client.post(f"/chats/{CHAT_X}/commands", json={"text": "hi all"})

        assert response.json()["replies"] == []
        assert response.json()["result"]["handled"] is False


class TestHealthEndpoint:
    """Test GET /health."""

    def test_healthy(self, client):
        response = client.get("/health")

        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["writer"]["state"] == "running"
        assert data["event_log"]["exists"] is True
        assert "response_time_ms" in data

    def test_failed_writer_is_503(self, client, app_board, make_record):
        with patch.object(
            app_board.store,
            "append",
            side_effect=EventLogUnavailableError("read-only file system"),
        ):
            app_board.ingest(make_record("alice"))
            app_board.writer._thread.join(timeout=5)

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"
        assert response.json()["writer"]["last_error"] == "read-only file system"

    def test_app_stops_writer_on_exit(self, app_board):
        with TestClient(create_app(app_board)):
            assert app_board.writer.is_alive

        assert not app_board.writer.is_alive
        assert app_board.queue.closed


class TestAppFactory:
    """Test logging setup done by create_app."""

    def test_configures_logging_when_root_has_no_handlers(self, monkeypatch, app_board):
        monkeypatch.setattr(logging.getLogger(), "handlers", [])

        with patch("scobo.api.app.setup_app_logging") as setup:
            create_app(app_board)

        setup.assert_called_once_with()

    def test_keeps_existing_logging_setup(self, monkeypatch, app_board):
        monkeypatch.setattr(logging.getLogger(), "handlers", [logging.NullHandler()])

        with patch("scobo.api.app.setup_app_logging") as setup:
            create_app(app_board)

        setup.assert_not_called()
