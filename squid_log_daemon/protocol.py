"""
Line protocol reader for the proxy's logfile daemon interface.

Each input line carries a one-character command tag followed by its
payload. Only `L` (append a log line) is acted on; the other commands the
proxy sends (rotate, truncate, reopen, flush, buffering) are consumed and
ignored. The loop ends when the input stream does.
"""

from __future__ import annotations

from typing import IO, Iterable, Iterator, Optional, Union

from squid_log_daemon.domain.models import InsertOutcome, ProtocolStats
from squid_log_daemon.inserter import RecordInserter
from squid_log_daemon.utils.logging import get_logger

log = get_logger(__name__)

APPEND_TAG = "L"

Line = Union[bytes, str]


def iter_lines(stream: Union[IO[bytes], Iterable[Line]], encoding: str = "utf-8") -> Iterator[str]:
    """
    Yield decoded lines without their trailing newline.

    Undecodable bytes are replaced rather than rejected.
    """
    for raw in stream:
        if isinstance(raw, bytes):
            raw = raw.decode(encoding, errors="replace")
        yield raw.rstrip("\n")


def split_command(line: str) -> tuple[str, str]:
    """
    Return the command tag and the payload of a protocol line.

    The tag character is overwritten with a blank in the payload so field
    splitting always sees a leading separator.
    """
    if not line:
        return "", ""
    return line[0], " " + line[1:]


def format_failure(outcome: InsertOutcome) -> str:
    """Single-line diagnostic for a failed append, with the parsed values."""
    return f"{outcome.error_kind}: {outcome.error} values=({', '.join(outcome.values)})"


class ProtocolReader:
    """
    Read lines until end-of-stream and dispatch append commands.
    """

    def __init__(self, inserter: RecordInserter, encoding: str = "utf-8") -> None:
        self.inserter = inserter
        self.encoding = encoding
        self.stats = ProtocolStats()

    def handle_line(self, line: str) -> Optional[InsertOutcome]:
        """
        Process one decoded line; returns the insert outcome for `L` lines.
        """
        self.stats.lines += 1
        tag, payload = split_command(line)
        if tag != APPEND_TAG:
            self.stats.ignored += 1
            return None

        outcome = self.inserter.insert(payload)
        if outcome.ok:
            self.stats.appended += 1
        else:
            self.stats.failed += 1
            log.error(
                format_failure(outcome),
                extra={"error_kind": outcome.error_kind, "values": list(outcome.values)},
            )
        return outcome

    def run(self, stream: Union[IO[bytes], Iterable[Line]]) -> ProtocolStats:
        for line in iter_lines(stream, self.encoding):
            self.handle_line(line)
        return self.stats


__all__ = [
    "APPEND_TAG",
    "ProtocolReader",
    "format_failure",
    "iter_lines",
    "split_command",
]
