"""
Daemon runner: startup checks, the protocol loop, and shutdown.

Usage (example from CLI):
    from squid_log_daemon.daemon import run_daemon

    stats = run_daemon("/db_host/squid_log/access_log/squid/secret", sys.stdin.buffer)

Startup failures raise a DaemonError before any input is read. Once the loop
is running, nothing short of end-of-stream stops it.
"""

from __future__ import annotations

import codecs
from typing import IO, Iterable, Optional, Union

from squid_log_daemon.config import Settings, get_settings
from squid_log_daemon.domain.models import ConnectionConfig, ProtocolStats
from squid_log_daemon.errors import DaemonError, InputEncodingUnknown
from squid_log_daemon.infrastructure.access_log_store import AccessLogStore
from squid_log_daemon.inserter import RecordInserter
from squid_log_daemon.protocol import Line, ProtocolReader
from squid_log_daemon.resolver import resolve_config
from squid_log_daemon.utils.logging import get_logger

log = get_logger(__name__)


def check_input_encoding(encoding: str) -> None:
    """Fail at startup rather than on the first decoded line."""
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise InputEncodingUnknown(encoding) from exc


def start_store(config_string: str, settings: Optional[Settings] = None) -> AccessLogStore:
    """
    Resolve the configuration, connect, validate the table and prepare the insert.

    Raises
    ------
    DaemonError
        InputEncodingUnknown, ConfigMalformed, ConnectionFailed, SchemaMismatch
        or StatementPrepareFailed.
    """
    settings = settings or get_settings()
    check_input_encoding(settings.input_encoding)
    config = resolve_config(config_string)
    store = AccessLogStore.open(config, settings)
    try:
        store.validate_schema()
        store.prepare_insert()
    except DaemonError:
        store.close()
        raise
    log.info(
        "Ready to store access log records",
        extra={"database": config.database, "table": config.table},
    )
    return store


def check_startup(config_string: str, settings: Optional[Settings] = None) -> ConnectionConfig:
    """Run the startup sequence only, then disconnect."""
    with start_store(config_string, settings) as store:
        return store.config


def run_daemon(
    config_string: str,
    stream: Union[IO[bytes], Iterable[Line]],
    settings: Optional[Settings] = None,
) -> ProtocolStats:
    """
    Store every `L` record from `stream` until it closes.

    Parameters
    ----------
    config_string : str
        The `/host/database/table/user/password` argument.
    stream : binary stream or iterable of lines
        Protocol input, normally `sys.stdin.buffer`.
    settings : Settings | None
        Runtime settings; defaults to the cached environment settings.

    Returns
    -------
    ProtocolStats
        Line counters for the run.
    """
    settings = settings or get_settings()
    store = start_store(config_string, settings)
    try:
        reader = ProtocolReader(RecordInserter(store), encoding=settings.input_encoding)
        stats = reader.run(stream)
    finally:
        store.close()

    log.info(
        "Input closed, disconnected: %d lines, %d appended, %d failed, %d ignored",
        stats.lines,
        stats.appended,
        stats.failed,
        stats.ignored,
    )
    return stats


__all__ = ["check_input_encoding", "check_startup", "run_daemon", "start_store"]
