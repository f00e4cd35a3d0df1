from __future__ import annotations

import sys

import typer

from squid_log_daemon.config import get_settings
from squid_log_daemon.daemon import check_startup, run_daemon
from squid_log_daemon.errors import DaemonError
from squid_log_daemon.utils.logging import configure_logging, get_logger

log = get_logger(__name__)

app = typer.Typer(
    help="Squid logfile daemon: store access log lines from stdin in PostgreSQL.",
    add_completion=False,
)


@app.command()
def run(
    config: str = typer.Argument(
        ...,
        help="Connection path /host/database/table/user/password; empty parts use defaults.",
    ),
    check: bool = typer.Option(
        False,
        "--check",
        help="Only connect, validate the table and prepare the insert, then exit.",
    ),
) -> None:
    """
    Read logfile daemon commands from stdin and insert each `L` record.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    try:
        if check:
            resolved = check_startup(config, settings)
            typer.echo(
                f"OK: {resolved.user}@{resolved.host}:{settings.db_port}/"
                f"{resolved.database} table={resolved.table}"
            )
            return
        run_daemon(config, sys.stdin.buffer, settings)
    except DaemonError as exc:
        log.error(str(exc))
        raise typer.Exit(code=1)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
