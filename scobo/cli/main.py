"""
Scobo CLI main module.

Serve the score board over HTTP or inspect an event log offline.
"""

from collections import Counter
from pathlib import Path

import typer

from scobo.core.config.settings import settings
from scobo.core.logging.logger import setup_app_logging
from scobo.domain.models.event_record import CommandKind
from scobo.persistence.event_log.serialization import try_decode
from scobo.persistence.event_log.store import EventLogStore
from scobo.router.command_router import render_board
from scobo.services.score_aggregator import compute_scores
from scobo.services.undo_resolver import find_last_scoring_event

app = typer.Typer(help="Scobo chat score board CLI")


def _open_store(log_path: Path | None) -> EventLogStore:
    store = EventLogStore(log_path or settings.event_log_file)
    if not store.exists():
        typer.echo(f"❌ Event log not found: {store.path}", err=True)
        raise typer.Exit(1)
    return store


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(settings.port, "--port", "-p", help="Port to bind to"),
):
    """
    Run the score board HTTP server.

    Examples:
        scobo serve
        scobo serve --port 8080
    """
    import uvicorn

    setup_app_logging()

    typer.echo("🚀 Starting Scobo score board...")
    typer.echo(f"📒 Event log: {settings.event_log_file}")
    typer.echo(f"🌐 Server: http://{host}:{port}")
    typer.echo("💡 Press CTRL+C to stop")
    typer.echo()

    uvicorn.run("scobo.api.app:create_app", factory=True, host=host, port=port)


@app.command()
def board(
    chat_id: int = typer.Argument(..., help="Chat whose leaderboard to show"),
    log_path: Path | None = typer.Option(
        None, "--log", "-l", help="Event log file (defaults to SCOBO_EVENT_LOG_PATH)"
    ),
):
    """
    Replay the event log and print the leaderboard of a chat.

    Examples:
        scobo board -- -1001234567
        scobo board 42 --log ./scobo_bot.json
    """
    store = _open_store(log_path)
    scores = compute_scores(store, chat_id)
    typer.echo(render_board(scores))


@app.command("undo-target")
def undo_target(
    chat_id: int = typer.Argument(..., help="Chat to inspect"),
    log_path: Path | None = typer.Option(
        None, "--log", "-l", help="Event log file (defaults to SCOBO_EVENT_LOG_PATH)"
    ),
):
    """Print whose last /won an /undo would compensate."""
    store = _open_store(log_path)
    participant = find_last_scoring_event(store, chat_id)
    if participant is None:
        typer.echo("There is nothing to undo yet!")
        raise typer.Exit(1)
    typer.echo(participant)


@app.command()
def check(
    log_path: Path | None = typer.Option(
        None, "--log", "-l", help="Event log file (defaults to SCOBO_EVENT_LOG_PATH)"
    ),
):
    """
    Scan the event log and report malformed lines.

    Exits with code 1 when at least one line cannot be decoded.
    """
    store = _open_store(log_path)

    total = 0
    malformed = 0
    kinds: Counter[CommandKind] = Counter()
    chats: set[int] = set()

    for line in store.read_all_forward():
        total += 1
        record = try_decode(line)
        if record is None:
            malformed += 1
            continue
        kinds[record.command_kind] += 1
        chats.add(record.chat_id)

    typer.echo(f"📒 {store.path}")
    typer.echo(f"Records: {total} ({malformed} malformed)")
    typer.echo(f"Chats: {len(chats)}")
    for kind in CommandKind:
        typer.echo(f"  {kind.value}: {kinds[kind]}")

    if malformed:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
