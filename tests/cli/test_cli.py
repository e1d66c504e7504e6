"""Tests for the offline CLI commands."""

import pytest
from typer.testing import CliRunner

from scobo.cli.main import app
from scobo.domain.models.event_record import CommandKind

CHAT = 42
WON = CommandKind.WON
UNDO = CommandKind.UNDO


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def history(store, append_events):
    append_events([(WON, "alice"), (WON, "bob"), (WON, "alice")], chat_id=CHAT)
    return store


class TestBoardCommand:
    """Test `scobo board`."""

    def test_prints_ranked_board(self, runner, history):
        result = runner.invoke(app, ["board", str(CHAT), "--log", str(history.path)])

        assert result.exit_code == 0
        assert "*alice*:\t2 pts." in result.output
        assert result.output.index("alice") < result.output.index("bob")

    def test_negative_chat_id_after_separator(self, runner, store, append_events):
        append_events([(WON, "carol")], chat_id=-1001)

        result = runner.invoke(app, ["board", "--log", str(store.path), "--", "-1001"])

        assert result.exit_code == 0
        assert "*carol*:\t1 pts." in result.output

    def test_empty_chat(self, runner, history):
        result = runner.invoke(app, ["board", "7", "--log", str(history.path)])

        assert result.exit_code == 0
        assert "Nobody has any points" in result.output

    def test_missing_log_fails(self, runner, tmp_path):
        missing = tmp_path / "nope.json"

        result = runner.invoke(app, ["board", str(CHAT), "--log", str(missing)])

        assert result.exit_code == 1
        assert not missing.exists()


class TestUndoTargetCommand:
    """Test `scobo undo-target`."""

    def test_prints_participant(self, runner, history, append_events):
        append_events([(UNDO, "alice")], chat_id=CHAT)

        result = runner.invoke(
            app, ["undo-target", str(CHAT), "--log", str(history.path)]
        )

        assert result.exit_code == 0
        assert result.output.strip() == "alice"

    def test_nothing_to_undo_exits_1(self, runner, store):
        result = runner.invoke(app, ["undo-target", str(CHAT), "--log", str(store.path)])

        assert result.exit_code == 1
        assert "nothing to undo" in result.output


class TestCheckCommand:
    """Test `scobo check`."""

    def test_clean_log(self, runner, history, append_events):
        append_events([(WON, "dave")], chat_id=7)

        result = runner.invoke(app, ["check", "--log", str(history.path)])

        assert result.exit_code == 0
        assert "Records: 4 (0 malformed)" in result.output
        assert "Chats: 2" in result.output
        assert "won: 4" in result.output

    def test_malformed_line_exits_1(self, runner, history):
        with history.path.open("a", encoding="utf-8") as f:
            f.write("\nnot json at all")

        result = runner.invoke(app, ["check", "--log", str(history.path)])

        assert result.exit_code == 1
        assert "Records: 4 (1 malformed)" in result.output
