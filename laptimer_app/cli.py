"""
Command-line harness for the lap timer.

Each command opens the persisted session, applies one operation and closes
it again, so consecutive invocations behave like one long-lived session.
"""

import json
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import typer

from .config.defaults import DefaultConfig
from .config.loader import ConfigLoader
from .errors import ConfigurationError
from .logging.config import configure_logging
from .persistence.codec import lap_to_dict
from .state.session import LapTimerSession, open_session
from .ticker.threaded import ThreadedTickSource
from .utils.time import format_clock_time, format_elapsed

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Stopwatch with named laps, persisted between runs."
)


@contextmanager
def _session(ctx: typer.Context, tick_source=None) -> Iterator[LapTimerSession]:
    config: DefaultConfig = ctx.obj
    session = open_session(config, tick_source=tick_source)
    try:
        yield session
    finally:
        session.close()


def _print_status(session: LapTimerSession, as_json: bool = False) -> None:
    snapshot = session.snapshot()
    if as_json:
        typer.echo(json.dumps({
            "isRunning": snapshot.is_running,
            "elapsed": snapshot.elapsed,
            "lapCount": len(snapshot.laps),
            "totalLapTime": snapshot.total_lap_time,
        }))
        return

    typer.echo(f"State:   {'running' if snapshot.is_running else 'stopped'}")
    typer.echo(f"Elapsed: {format_elapsed(snapshot.elapsed)}")
    typer.echo(f"Laps:    {len(snapshot.laps)}")
    typer.echo(f"Total:   {format_elapsed(snapshot.total_lap_time)}")


@app.callback()
def main(
    ctx: typer.Context,
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite file holding the session"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML configuration file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON"),
) -> None:
    """Load configuration and logging before any command runs."""
    overrides: dict = {}
    if db is not None:
        overrides["persistence"] = {"backend": "sqlite", "db_path": str(db)}
    if log_level is not None:
        overrides["logging"] = {"level": log_level}

    try:
        config = ConfigLoader.create(config_path).load(overrides)
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)

    configure_logging(
        level=config.logging.level,
        format_json=json_logs or config.logging.format_json
    )
    ctx.obj = config


@app.command()
def status(ctx: typer.Context, as_json: bool = typer.Option(False, "--json")) -> None:
    """Show running state, elapsed time and lap totals."""
    with _session(ctx) as session:
        _print_status(session, as_json)


@app.command()
def start(ctx: typer.Context) -> None:
    """Start the clock."""
    with _session(ctx) as session:
        session.start()
        _print_status(session)


@app.command()
def stop(ctx: typer.Context) -> None:
    """Stop the clock."""
    with _session(ctx) as session:
        session.stop()
        _print_status(session)


@app.command()
def toggle(ctx: typer.Context) -> None:
    """Start the clock if stopped, stop it if running."""
    with _session(ctx) as session:
        session.toggle()
        _print_status(session)


@app.command()
def reset(ctx: typer.Context) -> None:
    """Stop the clock and zero the elapsed time. Laps are kept."""
    with _session(ctx) as session:
        session.reset()
        _print_status(session)


@app.command()
def lap(ctx: typer.Context) -> None:
    """Save a lap at the current elapsed time."""
    with _session(ctx) as session:
        saved = session.save_lap()
        typer.echo(f"Saved {saved.display_name} at {format_elapsed(saved.elapsed)} ({saved.id})")


@app.command()
def laps(ctx: typer.Context, as_json: bool = typer.Option(False, "--json")) -> None:
    """List laps, newest first."""
    with _session(ctx) as session:
        snapshot = session.snapshot()

        if as_json:
            typer.echo(json.dumps([lap_to_dict(item) for item in snapshot.laps]))
            return

        if not snapshot.laps:
            typer.echo("No laps yet")
            return

        for index, item in enumerate(snapshot.laps):
            typer.echo(
                f"{index:>3}  {item.id}  {item.display_name:<20}  "
                f"{format_clock_time(item.created_at)}  {format_elapsed(item.elapsed)}"
            )
        typer.echo(f"Total: {format_elapsed(snapshot.total_lap_time)}")


@app.command()
def rename(ctx: typer.Context, lap_id: str, name: str) -> None:
    """Rename a lap by id."""
    with _session(ctx) as session:
        renamed = session.rename(lap_id, name)
        if renamed is None:
            typer.echo(f"No lap with id {lap_id}")
        else:
            typer.echo(f"Renamed {lap_id} to {renamed.display_name}")


@app.command()
def delete(ctx: typer.Context, indices: List[int] = typer.Argument(..., help="Lap positions, 0 is newest")) -> None:
    """Delete laps by position."""
    with _session(ctx) as session:
        removed = session.delete_laps(indices)
        typer.echo(f"Removed {len(removed)} lap(s)")


@app.command()
def run(
    ctx: typer.Context,
    seconds: float = typer.Option(1.0, "--seconds", min=0.0, help="How long to let the clock run"),
    keep_running: bool = typer.Option(False, "--keep-running", help="Leave the clock marked as running"),
) -> None:
    """Run the clock on a background ticker for a while."""
    with _session(ctx, tick_source=ThreadedTickSource()) as session:
        session.start()
        time.sleep(seconds)
        if not keep_running:
            session.stop()
        _print_status(session)


@app.command()
def clear(ctx: typer.Context, yes: bool = typer.Option(False, "--yes", help="Skip confirmation")) -> None:
    """Wipe the clock, all laps and the persisted session."""
    if not yes:
        typer.confirm("Delete all laps and reset the clock?", abort=True)
    with _session(ctx) as session:
        session.clear()
        typer.echo("Session cleared")


if __name__ == "__main__":
    app()
