# src/shiptivity/cli.py
"""Shiptivity Command Line Interface.

Entry point for the shiptivity CLI tool.

Usage:
    shiptivity serve                        # Start the API on 127.0.0.1:3001
    shiptivity --settings board.yaml serve  # Custom config
    shiptivity init-db --seed               # Create tables and demo clients
    shiptivity list --status backlog        # Print one lane
    shiptivity move 7 --status complete --priority 1
    shiptivity check                        # Verify every lane is 1..N
    shiptivity renumber                     # Repair broken lanes
    shiptivity show-config --format json    # Effective settings
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
import yaml
from pydantic import ValidationError

from shiptivity import __version__
from shiptivity.contracts.enums import Lane
from shiptivity.contracts.errors import (
    BoardInputError,
    ClientNotFoundError,
    SchemaCompatibilityError,
    StoreCommitFailedError,
)
from shiptivity.contracts.records import Client
from shiptivity.core.config import ShiptivitySettings, load_settings
from shiptivity.core.store.database import BoardDB
from shiptivity.core.store.integrity import find_violations, renumber_lanes
from shiptivity.core.store.queries import BoardQueries
from shiptivity.core.store.seed import seed_sample_clients
from shiptivity.core.validation import validate_identifier, validate_lane, validate_priority
from shiptivity.engine.reorder import ReorderEngine

__all__ = ["app", "main"]

app = typer.Typer(
    name="shiptivity",
    help="Shiptivity: a kanban board of clients with strictly ordered lanes.",
    no_args_is_help=True,
)

# Exit codes
EXIT_STORE_ERROR = 1
EXIT_INPUT_ERROR = 2


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"shiptivity version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(f"Error: .env file not found: {env_file}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)  # Don't override existing env vars


def _settings(ctx: typer.Context) -> ShiptivitySettings:
    settings: ShiptivitySettings = ctx.obj
    return settings


def _open_db(settings: ShiptivitySettings) -> BoardDB:
    """Open the configured store, exiting cleanly on schema problems."""
    try:
        return BoardDB.from_url(settings.database.url, echo=settings.database.echo)
    except SchemaCompatibilityError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_STORE_ERROR) from e


def _print_clients(clients: list[Client], *, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps([client.to_dict() for client in clients], indent=2))
        return
    if not clients:
        typer.echo("No clients.")
        return
    for client in clients:
        typer.echo(f"{client.status.value:<12} {client.priority:>3}  #{client.id:<4} {client.name or ''}")


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."),
    ] = None,
    settings_file: Annotated[
        Path | None,
        typer.Option("--settings", "-s", help="Path to YAML settings file.", dir_okay=False),
    ] = None,
    no_dotenv: Annotated[
        bool,
        typer.Option("--no-dotenv", help="Skip loading .env file."),
    ] = False,
    env_file: Annotated[
        Path | None,
        typer.Option("--env-file", help="Path to .env file (skips automatic search)."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose/debug logging."),
    ] = False,
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Output structured JSON logs (for machine processing)."),
    ] = False,
) -> None:
    """Shiptivity: a kanban board of clients with strictly ordered lanes."""
    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho("Warning: --env-file ignored because --no-dotenv is set.", fg=typer.colors.YELLOW, err=True)

    try:
        settings = load_settings(settings_file)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from e
    except ValidationError as e:
        typer.secho(f"Configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from e

    from shiptivity.core.logging import configure_logging

    log_level = "DEBUG" if verbose else settings.logging.level
    configure_logging(json_output=json_logs or settings.logging.json_output, level=log_level)
    ctx.obj = settings


@app.command()
def serve(
    ctx: typer.Context,
    host: Annotated[
        str | None,
        typer.Option("--host", "-h", help="Host address to bind to."),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-P", help="Port to listen on.", min=1, max=65535),
    ] = None,
    seed: Annotated[
        bool,
        typer.Option("--seed", help="Populate an empty board with the sample clients."),
    ] = False,
) -> None:
    """Start the board API server.

    Runs a single worker process. Other processes (e.g. the move command)
    may write the same database file; each move is one IMMEDIATE
    transaction, so they queue rather than interleave.
    """
    settings = _settings(ctx)
    server_updates = {key: value for key, value in (("host", host), ("port", port)) if value is not None}
    if server_updates or seed:
        settings = settings.model_copy(
            update={
                "server": settings.server.model_copy(update=server_updates),
                "database": settings.database.model_copy(update={"seed_if_empty": settings.database.seed_if_empty or seed}),
            }
        )

    typer.secho(f"Starting Shiptivity on {settings.server.host}:{settings.server.port}", fg=typer.colors.GREEN)
    typer.echo(f"  Database: {settings.database.url}")
    typer.echo(f"  API prefix: {settings.server.api_prefix or '/'}")
    if settings.database.is_in_memory:
        typer.secho("  In-memory database: the board is discarded when the server stops.", fg=typer.colors.YELLOW)
    typer.echo()

    import uvicorn

    from shiptivity.server import create_app

    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,  # keep the structlog handlers configured in main()
    )


@app.command("init-db")
def init_db(
    ctx: typer.Context,
    seed: Annotated[
        bool,
        typer.Option("--seed", help="Insert the sample clients if the board is empty."),
    ] = False,
) -> None:
    """Create the clients table (and optionally sample clients)."""
    settings = _settings(ctx)
    with _open_db(settings) as db:
        typer.echo(f"Database ready: {settings.database.url}")
        if seed:
            inserted = seed_sample_clients(db)
            if inserted:
                typer.secho(f"Inserted {inserted} sample clients.", fg=typer.colors.GREEN)
            else:
                typer.echo("Board already has clients; nothing inserted.")


@app.command("list")
def list_clients(
    ctx: typer.Context,
    status: Annotated[
        str | None,
        typer.Option("--status", help="Only show one lane: backlog, in-progress or complete."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print JSON instead of a table."),
    ] = False,
) -> None:
    """List clients ordered by (status, priority)."""
    settings = _settings(ctx)
    try:
        lane = validate_lane(status) if status is not None else None
    except BoardInputError as e:
        typer.secho(f"{e.message} {e.long_message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_INPUT_ERROR) from e

    with _open_db(settings) as db:
        queries = BoardQueries(db)
        clients = queries.list_by_lane(lane) if lane is not None else queries.list_all()
    _print_clients(clients, as_json=as_json)


@app.command()
def move(
    ctx: typer.Context,
    client_id: Annotated[str, typer.Argument(help="Id of the client to move.")],
    status: Annotated[
        str | None,
        typer.Option("--status", help="Destination lane (default: keep)."),
    ] = None,
    priority: Annotated[
        str | None,
        typer.Option("--priority", help="Destination priority, 1 = top (default: keep)."),
    ] = None,
) -> None:
    """Move a client to another lane and/or priority."""
    settings = _settings(ctx)
    with _open_db(settings) as db:
        try:
            valid_id = validate_identifier(client_id, db)
            lane: Lane | None = validate_lane(status) if status is not None else None
            new_priority = validate_priority(priority) if priority is not None else None
        except BoardInputError as e:
            typer.secho(f"{e.message} {e.long_message}", fg=typer.colors.RED, err=True)
            raise typer.Exit(EXIT_INPUT_ERROR) from e

        try:
            outcome = ReorderEngine(db).move(valid_id, lane=lane, priority=new_priority)
        except ClientNotFoundError as e:
            typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(EXIT_INPUT_ERROR) from e
        except StoreCommitFailedError as e:
            typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(EXIT_STORE_ERROR) from e

    source, target = outcome.source, outcome.target
    if not outcome.changed:
        typer.echo(f"Client {valid_id} already at {target.lane.value}/{target.priority}; nothing to do.")
        return
    typer.secho(
        f"Moved client {valid_id}: {source.lane.value}/{source.priority} -> {target.lane.value}/{target.priority}",
        fg=typer.colors.GREEN,
    )
    if outcome.clamped:
        typer.echo(f"  Requested priority was past the end of {target.lane.value}; placed last.")


@app.command("show-config")
def show_config(
    ctx: typer.Context,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: json or yaml."),
    ] = "yaml",
) -> None:
    """Show the effective configuration (file + environment + defaults)."""
    config_dict = _settings(ctx).model_dump(mode="json")
    if output_format == "json":
        typer.echo(json.dumps(config_dict, indent=2))
    elif output_format == "yaml":
        typer.echo(yaml.safe_dump(config_dict, default_flow_style=False, sort_keys=False))
    else:
        typer.secho(f"Unknown format {output_format!r}; use json or yaml.", fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_INPUT_ERROR)


@app.command()
def check(ctx: typer.Context) -> None:
    """Verify every lane holds priorities 1..N with no duplicates."""
    settings = _settings(ctx)
    with _open_db(settings) as db:
        violations = find_violations(db)
    if not violations:
        typer.secho("All lanes are consistent.", fg=typer.colors.GREEN)
        return
    typer.secho(f"{len(violations)} lane(s) inconsistent:", fg=typer.colors.RED, err=True)
    for violation in violations:
        typer.echo(f"  - {violation.describe()}", err=True)
    typer.echo("Run 'shiptivity renumber' to repair.", err=True)
    raise typer.Exit(1)


@app.command()
def renumber(ctx: typer.Context) -> None:
    """Rewrite every lane to priorities 1..N, keeping the current order."""
    settings = _settings(ctx)
    with _open_db(settings) as db:
        try:
            changed = renumber_lanes(db)
        except StoreCommitFailedError as e:
            typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(EXIT_STORE_ERROR) from e
    typer.echo(f"Renumbered {changed} client(s).")


if __name__ == "__main__":
    app()
