"""
Domain package for the squid log daemon.

Exports the record layout, the resolved connection parameters and the
per-record result types. Keep this package free of I/O.
"""

from squid_log_daemon.domain.models import (
    APPEND_FIELDS,
    ID_FIELD,
    INSERT_FAILED,
    RECORD_FIELDS,
    RECORD_MALFORMED,
    AppendRecord,
    ConnectionConfig,
    InsertOutcome,
    ProtocolStats,
)

__all__ = [
    "APPEND_FIELDS",
    "ID_FIELD",
    "INSERT_FAILED",
    "RECORD_FIELDS",
    "RECORD_MALFORMED",
    "AppendRecord",
    "ConnectionConfig",
    "InsertOutcome",
    "ProtocolStats",
]
