"""
Synthetic protocol line generator for the squid log daemon.

Emits deterministic pseudo-random `L` commands in the `squid_mysql` log
format, optionally mixed with malformed appends and non-append commands, so
the daemon can be smoke- or load-tested without a running proxy:

    python -m scripts.generate_lines --lines 10000 | squid-log-daemon //squid_log///
"""

from __future__ import annotations

import random
import sys
import time
from pathlib import Path
from typing import Iterator, List, TextIO

import typer

app = typer.Typer(help="Generate synthetic logfile daemon commands (one per line).")

STATUSES = ["TCP_MISS", "TCP_HIT", "TCP_MEM_HIT", "TCP_REFRESH_MODIFIED", "TCP_DENIED"]
HIERARCHY = ["DIRECT", "NONE", "FIRSTUP_PARENT", "TIMEOUT_DIRECT"]
METHODS = ["GET", "POST", "CONNECT", "HEAD"]
MIME_TYPES = ["text/html", "image/png", "application/json", "text/css", "-"]
HOSTS = ["example.com", "example.org", "cdn.example.net", "api.example.io"]
OTHER_COMMANDS = ["R", "T", "O", "F", "r1", "b0"]


def _append_line(rng: random.Random, now: float) -> str:
    client = f"10.0.{rng.randint(0, 255)}.{rng.randint(1, 254)}"
    server = f"192.0.2.{rng.randint(1, 254)}"
    path = "/".join(rng.choice(["img", "static", "v1", "index", "news"]) for _ in range(3))
    fields: List[str] = [
        f"{now + rng.uniform(0, 60):.3f}",
        str(rng.randint(1, 5000)),
        client,
        rng.choice(STATUSES),
        rng.choice(["200", "304", "404", "500"]),
        str(rng.randint(0, 2_000_000)),
        rng.choice(METHODS),
        f"http://{rng.choice(HOSTS)}/{path}",
        rng.choice(["-", "alice", "bob"]),
        rng.choice(HIERARCHY),
        server,
        rng.choice(MIME_TYPES),
    ]
    return "L" + " ".join(fields)


def _generate_lines(
    count: int, seed: int, malformed_every: int = 0, command_every: int = 0
) -> Iterator[str]:
    rng = random.Random(seed)
    now = time.time()
    for i in range(1, count + 1):
        if command_every and i % command_every == 0:
            yield rng.choice(OTHER_COMMANDS)
        elif malformed_every and i % malformed_every == 0:
            # Drop the mime type so the append carries 11 fields.
            yield _append_line(rng, now).rsplit(" ", 1)[0]
        else:
            yield _append_line(rng, now)


def _write_lines(out: TextIO, lines: Iterator[str]) -> int:
    written = 0
    for line in lines:
        out.write(line + "\n")
        written += 1
    return written


@app.command()
def main(
    lines: int = typer.Option(1_000, "--lines", "-n", help="Number of lines to generate."),
    seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
    malformed_every: int = typer.Option(
        0, "--malformed-every", help="Make every Nth line a malformed append (0 disables)."
    ),
    command_every: int = typer.Option(
        0, "--command-every", help="Make every Nth line a non-append command (0 disables)."
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output file (defaults to stdout)."
    ),
) -> None:
    """
    Write synthetic logfile daemon commands to a file or stdout.
    """
    generated = _generate_lines(lines, seed, malformed_every, command_every)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("w", encoding="utf-8") as f:
            written = _write_lines(f, generated)
        typer.echo(f"Wrote {written:,} lines -> {output}", err=True)
    else:
        _write_lines(sys.stdout, generated)


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
