"""
Record inserter: turns one `L` payload into one insert attempt.

A failing record is reported as an InsertOutcome rather than raised, so a
bad line or a storage hiccup never reaches the protocol loop as an
exception.
"""

from __future__ import annotations

import re
from typing import Protocol, Sequence, runtime_checkable

from squid_log_daemon.domain.models import (
    APPEND_FIELDS,
    INSERT_FAILED,
    RECORD_MALFORMED,
    AppendRecord,
    InsertOutcome,
)

_WHITESPACE = re.compile(r"\s+")


@runtime_checkable
class RecordSink(Protocol):
    """Anything that can execute the prepared insert (AccessLogStore in production)."""

    def insert(self, values: Sequence[str]) -> None:
        ...


def parse_append_payload(payload: str) -> AppendRecord:
    """
    Split a payload on runs of whitespace and drop the first token.

    The first token is the blank left where the command tag was, so it is
    always empty for a payload produced by the protocol reader.
    """
    _, *values = _WHITESPACE.split(payload.rstrip())
    return tuple(values)


class RecordInserter:
    """
    Bind the 12 payload values to the prepared insert, one attempt per record.
    """

    def __init__(self, sink: RecordSink) -> None:
        self._sink = sink

    def insert(self, payload: str) -> InsertOutcome:
        values = parse_append_payload(payload)
        if len(values) != len(APPEND_FIELDS):
            return InsertOutcome.failure(
                values,
                RECORD_MALFORMED,
                f"expected {len(APPEND_FIELDS)} fields, got {len(values)}",
            )
        try:
            self._sink.insert(values)
        except Exception as exc:  # noqa: BLE001 - a failed record must not stop the daemon
            return InsertOutcome.failure(values, INSERT_FAILED, _describe(exc))
        return InsertOutcome.success(values)


def _describe(exc: BaseException) -> str:
    """Collapse an exception message onto one line."""
    text = " ".join(str(exc).split())
    return text or type(exc).__name__


__all__ = ["RecordInserter", "RecordSink", "parse_append_payload"]
